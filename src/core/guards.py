"""Two ways of running a step: fail the request, or log and carry on."""

import logging
from collections.abc import Awaitable, Callable
from typing import Any, Optional, TypeVar

from src.core.errors import WebhookError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def attempt(label: str, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> Optional[T]:
    """Await ``func`` and return its result, or log the failure and return ``None``."""

    try:
        return await func(*args, **kwargs)
    except Exception:
        logger.exception("Best-effort step failed: %s", label)
        return None


def require(
    error_cls: type[WebhookError],
    message: str,
    func: Callable[..., T],
    *args: Any,
    **kwargs: Any,
) -> T:
    """Call ``func``; any failure becomes ``error_cls`` and fails the request."""

    try:
        return func(*args, **kwargs)
    except error_cls:
        raise
    except Exception as exc:
        logger.error("%s: %s", message, exc)
        raise error_cls(message) from exc
