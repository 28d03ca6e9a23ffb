"""CorrelationVector 本体"""

from __future__ import annotations

import threading
import uuid

import structlog

from .atomic import AtomicInteger
from .clock import RandomBytesSource, TimeSource, default_random_bytes, ticks_since_epoch
from .encoding import to_base64_string
from .errors import ErrorSink, default_error_sink
from .exceptions import InvalidCorrelationVectorError, UnsupportedVersionError
from .headers import MS_CV
from .settings import CorrelationVectorSettings, ErrorPolicy, get_default_settings
from .spin import SpinParameters
from .version import CorrelationVectorVersion

logger = structlog.get_logger(__name__)

DELIMITER = "."
TERMINATOR = "!"
MAX_EXTENSION = 2**31 - 1
# Spin の下位 32 ビットは符号なしで出力される
MAX_SEGMENT = 2**32 - 1


def infer_version(correlation_vector: str | None) -> CorrelationVectorVersion:
    """最初の区切り文字の位置からバージョンを推定する。

    推定できない場合は V1 を返す。
    """
    index = -1 if correlation_vector is None else correlation_vector.find(DELIMITER)
    if index == CorrelationVectorVersion.V2.base_length:
        return CorrelationVectorVersion.V2
    return CorrelationVectorVersion.V1


def validate(correlation_vector: str | None, version: CorrelationVectorVersion) -> None:
    """相関ベクトルの形式を検証する。

    Raises:
        UnsupportedVersionError: version が CorrelationVectorVersion でない場合
        InvalidCorrelationVectorError: 形式が不正な場合
    """
    _check_version(version)
    if (
        correlation_vector is None
        or not correlation_vector.strip()
        or len(correlation_vector) > version.max_length
    ):
        raise InvalidCorrelationVectorError(
            correlation_vector,
            f"The {version.value} correlation vector can not be null or bigger than "
            f"{version.max_length} characters: {correlation_vector!r}",
        )

    parts = correlation_vector.split(DELIMITER)
    if len(parts) < 2 or len(parts[0]) != version.base_length:
        raise InvalidCorrelationVectorError(
            correlation_vector,
            f"Invalid correlation vector {correlation_vector!r}. "
            f"Invalid base value {parts[0]!r}, expected {version.base_length} characters",
        )
    for part in parts[1:]:
        if not _is_valid_segment(part):
            raise InvalidCorrelationVectorError(
                correlation_vector,
                f"Invalid correlation vector {correlation_vector!r}. Invalid extension value {part!r}",
            )


class CorrelationVector:
    """因果関係を識別・計測するための軽量なベクトル。

    値は ``<base>.<extension>`` 形式で、最大長に達すると末尾に ``!`` が付き
    以後変化しなくなる。extension は increment() でのみ進む。

    検証せずに受け取った値が既に最大長を超えている場合も不変になるが、
    値は切り詰めないため ``!`` を含めて最大長を超えることがある。
    """

    HEADER_NAME = MS_CV

    def __init__(
        self,
        version: CorrelationVectorVersion = CorrelationVectorVersion.V1,
        *,
        base_vector: str | None = None,
        extension: int = 0,
        immutable: bool = False,
    ) -> None:
        _check_version(version)
        if base_vector is None:
            base_vector = _unique_value(version)
        self._base_vector = base_vector
        self._version = version
        self._extension = AtomicInteger(extension)
        self._immutable = threading.Event()
        if immutable or _is_oversized(base_vector, extension, version):
            self._immutable.set()

    @classmethod
    def from_uuid(cls, vector_base: uuid.UUID) -> CorrelationVector:
        """指定した UUID をベースにした V2 の相関ベクトルを生成する。"""
        return cls(CorrelationVectorVersion.V2, base_vector=_base_from_uuid(vector_base))

    @classmethod
    def extend(
        cls,
        correlation_vector: str | None,
        *,
        settings: CorrelationVectorSettings | None = None,
        error_sink: ErrorSink | None = None,
    ) -> CorrelationVector:
        """受信した値を拡張して新しい相関ベクトルを生成する。

        操作のエントリーポイントで呼び出す。結果の値は ``<correlation_vector>.0``。

        Args:
            correlation_vector: MS-CV ヘッダーから取得した値
            settings: 検証設定。省略時はプロセス既定の設定
            error_sink: REPORT ポリシー時の報告先。省略時は default_error_sink

        Raises:
            InvalidCorrelationVectorError: 検証が有効かつ THROW ポリシーで形式が不正な場合
        """
        if correlation_vector and correlation_vector.endswith(TERMINATOR):
            return cls.parse(correlation_vector)

        version = _version_for_creation(correlation_vector, settings, error_sink)
        base_vector = correlation_vector or ""
        if _is_oversized(base_vector, 0, version):
            return cls._freeze(base_vector)
        return cls(version, base_vector=base_vector)

    @classmethod
    def spin(
        cls,
        correlation_vector: str | None,
        parameters: SpinParameters | None = None,
        *,
        settings: CorrelationVectorSettings | None = None,
        error_sink: ErrorSink | None = None,
        time_source: TimeSource | None = None,
        random_bytes: RandomBytesSource | None = None,
    ) -> CorrelationVector:
        """Spin 演算子を適用して新しい相関ベクトルを生成する。

        時刻由来のカウンターと乱数を組み合わせた値を新しい階層として追加する。

        Args:
            correlation_vector: MS-CV ヘッダーから取得した値
            parameters: Spin のパラメータ。省略時は COARSE / SHORT / TWO
            settings: 検証設定。省略時はプロセス既定の設定
            error_sink: REPORT ポリシー時の報告先
            time_source: 100ns 単位の ticks を返す関数
            random_bytes: 指定バイト数の乱数を返す関数

        Raises:
            InvalidCorrelationVectorError: 検証が有効かつ THROW ポリシーで形式が不正な場合
        """
        if correlation_vector and correlation_vector.endswith(TERMINATOR):
            return cls.parse(correlation_vector)

        if parameters is None:
            parameters = SpinParameters()
        version = _version_for_creation(correlation_vector, settings, error_sink)
        base_vector = correlation_vector or ""

        value = (time_source or ticks_since_epoch)() >> parameters.ticks_bits_to_drop
        for byte in (random_bytes or default_random_bytes)(parameters.entropy_bytes):
            value = (value << 8) | byte
        value &= (1 << parameters.total_bits) - 1

        segment = str(value)
        if parameters.total_bits > 32:
            segment = f"{value >> 32}{DELIMITER}{value & 0xFFFFFFFF}"

        spun = f"{base_vector}{DELIMITER}{segment}"
        if _is_oversized(spun, 0, version):
            return cls._freeze(base_vector)
        return cls(version, base_vector=spun)

    @classmethod
    def parse(cls, correlation_vector: str | None) -> CorrelationVector:
        """文字列表現から相関ベクトルを生成する。

        解析できない場合は新しい V1 の相関ベクトルを返す（例外は送出しない）。
        """
        if correlation_vector is not None and correlation_vector.strip():
            index = correlation_vector.rfind(DELIMITER)
            if index > 0:
                immutable = correlation_vector.endswith(TERMINATOR)
                end = len(correlation_vector) - 1 if immutable else len(correlation_vector)
                extension = _parse_extension(correlation_vector[index + 1 : end])
                if extension is not None:
                    return cls(
                        infer_version(correlation_vector),
                        base_vector=correlation_vector[:index],
                        extension=extension,
                        immutable=immutable,
                    )
        return cls()

    @classmethod
    def _freeze(cls, correlation_vector: str) -> CorrelationVector:
        logger.debug("Correlation vector reached its maximum length", correlation_vector=correlation_vector)
        return cls.parse(correlation_vector + TERMINATOR)

    @property
    def value(self) -> str:
        """相関ベクトルの文字列表現。"""
        value = f"{self._base_vector}{DELIMITER}{self._extension.get()}"
        if self._immutable.is_set():
            return value + TERMINATOR
        return value

    @property
    def base_vector(self) -> str:
        return self._base_vector

    @property
    def extension(self) -> int:
        return self._extension.get()

    @property
    def version(self) -> CorrelationVectorVersion:
        return self._version

    @property
    def immutable(self) -> bool:
        return self._immutable.is_set()

    def increment(self) -> str:
        """extension を 1 進めて新しい値を返す。

        送信メッセージのヘッダーに設定する直前に呼び出す。最大長を超える場合は
        相関ベクトルを不変にし、末尾に ``!`` を付けた現在の値を返す。
        """
        while True:
            if self._immutable.is_set():
                return self.value
            current = self._extension.get()
            if current == MAX_EXTENSION:
                return self.value
            next_value = current + 1
            if _is_oversized(self._base_vector, next_value, self._version):
                self._immutable.set()
                logger.debug(
                    "Correlation vector became immutable",
                    correlation_vector=self._base_vector,
                    version=self._version.value,
                )
                return self.value
            if self._extension.compare_and_set(current, next_value):
                return f"{self._base_vector}{DELIMITER}{next_value}"

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"CorrelationVector({self.value!r}, version={self._version.value})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CorrelationVector):
            return NotImplemented
        return self.value == other.value

    __hash__ = None  # type: ignore[assignment]


def _check_version(version: object) -> None:
    if not isinstance(version, CorrelationVectorVersion):
        raise UnsupportedVersionError(version)


def _version_for_creation(
    correlation_vector: str | None,
    settings: CorrelationVectorSettings | None,
    error_sink: ErrorSink | None,
) -> CorrelationVectorVersion:
    if settings is None:
        settings = get_default_settings()
    version = infer_version(correlation_vector)
    if not settings.validate_during_creation:
        return version

    index = -1 if correlation_vector is None else correlation_vector.find(DELIMITER)
    if index not in (CorrelationVectorVersion.V1.base_length, CorrelationVectorVersion.V2.base_length):
        _handle_invalid(
            InvalidCorrelationVectorError(
                correlation_vector,
                f"Invalid correlation vector {correlation_vector!r}. Cannot infer version",
            ),
            settings,
            error_sink,
        )
    try:
        validate(correlation_vector, version)
    except InvalidCorrelationVectorError as e:
        _handle_invalid(e, settings, error_sink)
    return version


def _handle_invalid(
    error: InvalidCorrelationVectorError,
    settings: CorrelationVectorSettings,
    error_sink: ErrorSink | None,
) -> None:
    if settings.error_policy is ErrorPolicy.THROW:
        raise error
    logger.warning(
        "Invalid correlation vector reported",
        correlation_vector=error.correlation_vector,
        error=str(error),
    )
    if error_sink is None:
        error_sink = default_error_sink
        if error_sink.max_saved_errors != settings.max_saved_errors:
            error_sink.max_saved_errors = settings.max_saved_errors
    error_sink.report(error)


def _parse_extension(segment: str) -> int | None:
    if not segment.isascii() or not segment.isdigit():
        return None
    value = int(segment)
    if value > MAX_EXTENSION:
        return None
    return value


def _is_valid_segment(segment: str) -> bool:
    if not segment.isascii() or not segment.isdigit():
        return False
    if len(segment) > 1 and segment.startswith("0"):
        return False
    return int(segment) <= MAX_SEGMENT


def _is_oversized(base_vector: str, extension: int, version: CorrelationVectorVersion) -> bool:
    size = len(base_vector) + len(DELIMITER) + len(str(extension))
    return size > version.max_length


def _unique_value(version: CorrelationVectorVersion) -> str:
    if version is CorrelationVectorVersion.V1:
        return to_base64_string(uuid.uuid4().bytes[:12])
    return _base_from_uuid(uuid.uuid4())


def _base_from_uuid(vector_base: uuid.UUID) -> str:
    return to_base64_string(vector_base.bytes)[: CorrelationVectorVersion.V2.base_length]
