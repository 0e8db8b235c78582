"""Retry-with-recovery combinator used by the command executor."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TypeVar


if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


async def retry_with_recovery(
    attempt: Callable[[], Awaitable[T]],
    recover: Callable[[BaseException], Awaitable[None]],
    *,
    retryable_exceptions: tuple[type[Exception], ...] = (Exception,),
    description: str = "operation",
) -> T:
    """Run an attempt, recover once on failure, then attempt exactly once more.

    The pipeline is: attempt -> (on failure) recover -> attempt -> fail. There
    is never more than one retry, so an unreachable peer cannot cause a loop.

    Args:
        attempt: Async function performing the operation. Called at most twice.
        recover: Async function run between the two attempts. It receives the
            exception of the first attempt. If it raises, that exception
            propagates and the second attempt is skipped.
        retryable_exceptions: Exception types that trigger recovery. Anything
            else propagates from the first attempt unchanged.
        description: Label used in log messages.

    Returns:
        Result of the first successful attempt.

    Raises:
        Exception: The recovery failure, or the exception of the second attempt.

    Example:
        async def fetch():
            return await api.get("/led/mode")

        async def relogin(exc):
            session.invalidate()
            await session.ensure_valid_session()

        result = await retry_with_recovery(fetch, relogin, retryable_exceptions=(TwinklyError,))
    """
    try:
        return await attempt()
    except retryable_exceptions as exc:
        _LOGGER.warning("%s failed, recovering and retrying once: %s", description, exc)
        await recover(exc)

    try:
        return await attempt()
    except retryable_exceptions as exc:
        _LOGGER.error("%s failed again after recovery: %s", description, exc)
        raise
