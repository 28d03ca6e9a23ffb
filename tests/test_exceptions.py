"""例外型のユニットテスト"""

from k1s0_correlation_vector import (
    AggregateError,
    CorrelationVectorError,
    CorrelationVectorErrorCodes,
    InvalidCorrelationVectorError,
    UnsupportedVersionError,
)


def test_correlation_vector_error_str() -> None:
    """str 表現がコードとメッセージを含むこと。"""
    cause = OSError("boom")
    error = CorrelationVectorError(code="READ_FILE_ERROR", message="failed", cause=cause)
    assert str(error) == "READ_FILE_ERROR: failed"
    assert error.__cause__ is cause


def test_invalid_correlation_vector_error() -> None:
    """InvalidCorrelationVectorError が ValueError として扱えること。"""
    error = InvalidCorrelationVectorError("abc.1", "Invalid base value")
    assert isinstance(error, ValueError)
    assert isinstance(error, CorrelationVectorError)
    assert error.code == CorrelationVectorErrorCodes.INVALID_CORRELATION_VECTOR
    assert error.correlation_vector == "abc.1"
    assert str(error) == "INVALID_CORRELATION_VECTOR: Invalid base value"


def test_unsupported_version_error() -> None:
    """UnsupportedVersionError がバージョンを保持すること。"""
    error = UnsupportedVersionError("V3")
    assert isinstance(error, ValueError)
    assert error.version == "V3"
    assert error.code == CorrelationVectorErrorCodes.UNSUPPORTED_VERSION
    assert "'V3'" in str(error)


def test_aggregate_error_holds_errors() -> None:
    """AggregateError が元のエラー一覧を保持すること。"""
    errors: list[Exception] = [ValueError("a"), ValueError("b")]
    error = AggregateError(errors)
    assert error.errors == errors
    assert error.code == CorrelationVectorErrorCodes.AGGREGATE
    assert str(error) == "AGGREGATE: 2 correlation vector error(s) occurred"
