"""Langfuse tracing for the mode entrypoints and the dispatcher.

``observe`` is Langfuse's decorator when LANGFUSE_PUBLIC_KEY is set and a
pass-through otherwise, so call sites never branch on configuration.
"""

import logging
from collections.abc import Callable

from src.core.config import settings

# Langfuse warns on every call when keys are missing
logging.getLogger("langfuse").setLevel(logging.ERROR)


def tracing_enabled() -> bool:
    return bool(settings.langfuse_public_key)


if tracing_enabled():
    from langfuse import observe
else:

    def observe(name: str = "", **kwargs) -> Callable:  # type: ignore[misc]
        """Pass-through used when Langfuse is not configured."""

        def decorator(fn: Callable) -> Callable:
            return fn

        return decorator


__all__ = ["observe", "tracing_enabled"]
