"""相関ベクトルの設定（pydantic BaseModel）と YAML 読み込み"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from .exceptions import CorrelationVectorError, CorrelationVectorErrorCodes

SETTINGS_SECTION = "correlation_vector"


class ErrorPolicy(str, Enum):
    """不正な相関ベクトルを検出したときの扱い。"""

    THROW = "throw"
    REPORT = "report"


class CorrelationVectorSettings(BaseModel):
    """相関ベクトル生成時の設定。"""

    validate_during_creation: bool = False
    error_policy: ErrorPolicy = ErrorPolicy.THROW
    max_saved_errors: int = Field(default=1, ge=0, le=100)


_default_settings = CorrelationVectorSettings()


def get_default_settings() -> CorrelationVectorSettings:
    """settings を省略した操作が使うプロセス既定の設定を返す。"""
    return _default_settings


def set_default_settings(settings: CorrelationVectorSettings) -> None:
    """プロセス既定の設定を差し替える。"""
    global _default_settings
    _default_settings = settings


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise CorrelationVectorError(
            code=CorrelationVectorErrorCodes.READ_FILE,
            message=f"Failed to read settings file: {path}",
            cause=e,
        ) from e
    try:
        data: dict[str, Any] = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise CorrelationVectorError(
            code=CorrelationVectorErrorCodes.PARSE_YAML,
            message=f"Failed to parse YAML: {path}",
            cause=e,
        ) from e
    return data


def load_settings(path: Path) -> CorrelationVectorSettings:
    """YAML ファイルから CorrelationVectorSettings を読み込む。

    correlation_vector セクションがあればその中身を、なければトップレベルを使う。
    """
    data = _read_yaml(path)
    section = data.get(SETTINGS_SECTION, data)
    try:
        return CorrelationVectorSettings.model_validate(section)
    except ValidationError as e:
        raise CorrelationVectorError(
            code=CorrelationVectorErrorCodes.VALIDATION,
            message=f"Settings validation failed: {e}",
            cause=e,
        ) from e
