"""k1s0 correlation vector library."""

from .encoding import to_base64_string
from .errors import ErrorSink, default_error_sink
from .exceptions import (
    AggregateError,
    CorrelationVectorError,
    CorrelationVectorErrorCodes,
    InvalidCorrelationVectorError,
    UnsupportedVersionError,
)
from .headers import MS_CV
from .propagation import (
    extract_from_headers,
    get_correlation_vector,
    inject_into_headers,
    reset_correlation_vector,
    set_correlation_vector,
)
from .settings import (
    CorrelationVectorSettings,
    ErrorPolicy,
    get_default_settings,
    load_settings,
    set_default_settings,
)
from .spin import SpinCounterInterval, SpinCounterPeriodicity, SpinEntropy, SpinParameters
from .vector import CorrelationVector, infer_version, validate
from .version import CorrelationVectorVersion

__all__ = [
    "CorrelationVector",
    "CorrelationVectorVersion",
    "infer_version",
    "validate",
    "SpinParameters",
    "SpinCounterInterval",
    "SpinCounterPeriodicity",
    "SpinEntropy",
    "to_base64_string",
    "ErrorSink",
    "default_error_sink",
    "CorrelationVectorSettings",
    "ErrorPolicy",
    "get_default_settings",
    "set_default_settings",
    "load_settings",
    "MS_CV",
    "set_correlation_vector",
    "get_correlation_vector",
    "reset_correlation_vector",
    "extract_from_headers",
    "inject_into_headers",
    "CorrelationVectorError",
    "CorrelationVectorErrorCodes",
    "InvalidCorrelationVectorError",
    "UnsupportedVersionError",
    "AggregateError",
]
