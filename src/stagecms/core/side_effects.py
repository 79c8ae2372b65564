"""Post-commit hook point for non-fatal side effects.

Audit writes, backing-store teardown and media enrichment must never change
the outcome of the operation that triggered them. They all go through
``best_effort`` so that failures are logged in one consistent place.
"""

from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from stagecms.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


async def best_effort(
    action: str,
    operation: Callable[[], Awaitable[T]],
    on_failure: Callable[[], Awaitable[Any]] | None = None,
    **context: Any,
) -> T | None:
    """Run a side effect, logging and swallowing any failure.

    Cancellation is not intercepted: ``asyncio.CancelledError`` derives from
    ``BaseException`` and propagates to the caller.

    Args:
        action: Short description used in the log entry (e.g. 'record item change').
        operation: Zero-argument callable returning the awaitable to run.
        on_failure: Optional compensation awaited after a failure, such as a
            session rollback. Its own failure is logged too.
        **context: Extra structured log context.

    Returns:
        The operation's result, or None if it failed.
    """
    try:
        return await operation()
    except Exception as e:
        logger.warning(
            f"Best-effort {action} failed",
            error=str(e),
            error_type=type(e).__name__,
            exc_info=True,
            **context,
        )
        if on_failure is not None:
            try:
                await on_failure()
            except Exception as cleanup_error:
                logger.error(
                    f"Cleanup after failed {action} failed",
                    error=str(cleanup_error),
                    **context,
                )
        return None
