"""Shared logger helpers.

USAGE:
    from spotkit.infrastructure.observability.logger_template import log_operation

    async with log_operation(logger, "token_grant", grant="pkce"):
        token = await exchange()
"""

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any


# Yo, this context manager logs start/end with automatic duration tracking. The **context args
# become extra fields in every log line. On exception it logs the failure and re-raises so the
# caller still gets the typed error. Never pass secrets (tokens, verifiers) as context!
@asynccontextmanager
async def log_operation(
    logger: logging.Logger,
    operation: str,
    **context: Any,
) -> AsyncIterator[None]:
    """Context manager for logging operation start/end with automatic timing.

    Logs:
    - {operation}.started with context fields
    - {operation}.completed with context + duration_ms
    - {operation}.failed with context + duration_ms + error details (if exception)

    Args:
        logger: Module logger
        operation: Operation name (e.g., "token_grant", "token_refresh")
        **context: Additional fields to include in logs (e.g., grant="pkce")
    """
    start = time.monotonic()
    logger.debug(f"{operation}.started", extra=context)

    try:
        yield
    except Exception as e:
        duration_ms = int((time.monotonic() - start) * 1000)
        logger.warning(
            f"{operation}.failed",
            extra={
                **context,
                "duration_ms": duration_ms,
                "error": str(e),
                "error_type": type(e).__name__,
            },
        )
        raise

    duration_ms = int((time.monotonic() - start) * 1000)
    logger.info(
        f"{operation}.completed",
        extra={**context, "duration_ms": duration_ms},
    )
