"""Exception hierarchy for the Flux AI service."""

import enum


class ErrorCode(str, enum.Enum):
    rate_limited = "RATE_LIMITED"
    credits_exhausted = "CREDITS_EXHAUSTED"
    upstream_error = "UPSTREAM_ERROR"
    config_error = "CONFIG_ERROR"
    malformed_response = "MALFORMED_RESPONSE"


class FluxError(Exception):
    """Base exception for all Flux AI errors.

    Carries the stable error code, the HTTP status returned to the caller and
    the user-facing message placed in the ``{"error": ...}`` envelope.
    """

    code: ErrorCode = ErrorCode.upstream_error
    status_code: int = 500

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ProviderError(FluxError):
    """Upstream provider failure mapped to a known application error."""

    def __init__(self, code: ErrorCode, status_code: int, message: str) -> None:
        super().__init__(message, status_code=status_code)
        self.code = code


class UpstreamError(FluxError):
    """Upstream returned a non-success status that has no specific mapping."""

    code = ErrorCode.upstream_error
    status_code = 500


class ConfigError(FluxError):
    """Required configuration is missing."""

    code = ErrorCode.config_error
    status_code = 500


class MalformedResponseError(FluxError):
    """Upstream succeeded but returned no usable structured payload.

    Never reaches the caller: each mode catches it and returns its fallback.
    """

    code = ErrorCode.malformed_response
    status_code = 500
