"""Upstream provider error mapping.

Every mode runs the upstream response through here before parsing anything,
so rate-limit and quota failures always surface with the same code and text.
"""

import logging

import httpx

from src.core.exceptions import ErrorCode, ProviderError, UpstreamError

logger = logging.getLogger(__name__)

RATE_LIMITED_MESSAGE = "Rate limit exceeded. Please try again shortly."
CREDITS_EXHAUSTED_MESSAGE = "AI credits exhausted. Please add credits in Settings."
UPSTREAM_ERROR_MESSAGE = "AI gateway error"

_PROVIDER_ERRORS: dict[int, tuple[ErrorCode, str]] = {
    429: (ErrorCode.rate_limited, RATE_LIMITED_MESSAGE),
    402: (ErrorCode.credits_exhausted, CREDITS_EXHAUSTED_MESSAGE),
}


def map_provider_error(response: httpx.Response) -> ProviderError | None:
    """Return the application error for a known provider status, else None."""
    mapped = _PROVIDER_ERRORS.get(response.status_code)
    if mapped is None:
        return None
    code, message = mapped
    return ProviderError(code, response.status_code, message)


async def raise_for_upstream(response: httpx.Response, mode: str) -> None:
    """Raise the mapped provider error, or UpstreamError for any other failure.

    Works for both buffered and streamed responses; a streamed body is read
    only when the status is already known to be an error.
    """
    error = map_provider_error(response)
    if error is not None:
        logger.warning("%s: AI gateway returned %s (%s)", mode, response.status_code, error.code.value)
        raise error

    if not response.is_success:
        body = (await response.aread()).decode(errors="replace")
        logger.error("%s: AI gateway error: %s %s", mode, response.status_code, body)
        raise UpstreamError(UPSTREAM_ERROR_MESSAGE)
