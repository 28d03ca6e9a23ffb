"""correlation vector ライブラリの例外型定義"""

from __future__ import annotations


class CorrelationVectorError(Exception):
    """correlation vector ライブラリのエラー基底クラス。"""

    def __init__(
        self,
        code: str,
        message: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.code}: {super().__str__()}"


class CorrelationVectorErrorCodes:
    """CorrelationVectorError のエラーコード定数。"""

    INVALID_CORRELATION_VECTOR: str = "INVALID_CORRELATION_VECTOR"
    UNSUPPORTED_VERSION: str = "UNSUPPORTED_VERSION"
    AGGREGATE: str = "AGGREGATE"
    READ_FILE: str = "READ_FILE_ERROR"
    PARSE_YAML: str = "PARSE_YAML_ERROR"
    VALIDATION: str = "VALIDATION_ERROR"


class InvalidCorrelationVectorError(CorrelationVectorError, ValueError):
    """不正な形式の相関ベクトルを受け取った場合のエラー。"""

    def __init__(self, correlation_vector: str | None, message: str) -> None:
        super().__init__(
            code=CorrelationVectorErrorCodes.INVALID_CORRELATION_VECTOR,
            message=message,
        )
        self.correlation_vector = correlation_vector


class UnsupportedVersionError(CorrelationVectorError, ValueError):
    """サポートされていないバージョンが指定された場合のエラー。"""

    def __init__(self, version: object) -> None:
        super().__init__(
            code=CorrelationVectorErrorCodes.UNSUPPORTED_VERSION,
            message=f"Unsupported correlation vector version: {version!r}",
        )
        self.version = version


class AggregateError(CorrelationVectorError):
    """ErrorSink に蓄積されたエラーをまとめて送出するエラー。"""

    def __init__(self, errors: list[Exception]) -> None:
        super().__init__(
            code=CorrelationVectorErrorCodes.AGGREGATE,
            message=f"{len(errors)} correlation vector error(s) occurred",
        )
        self.errors = errors
