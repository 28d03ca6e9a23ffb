"""パディングなし base64 エンコーダ"""

from __future__ import annotations

import base64


def to_base64_string(data: bytes) -> str:
    """バイト列を標準アルファベットの base64 文字列に変換する。

    末尾の "=" パディングは付与しない。出力長は ceil(len(data) * 8 / 6)。
    """
    return base64.b64encode(data).decode("ascii").rstrip("=")
