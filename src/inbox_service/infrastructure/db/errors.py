from __future__ import annotations

import functools
from collections.abc import Awaitable, Callable
from typing import ParamSpec, TypeVar

from sqlalchemy.exc import InterfaceError, OperationalError

from inbox_service.application.exceptions import StoreUnavailableError

P = ParamSpec("P")
R = TypeVar("R")


def translate_store_errors(fn: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
    """Re-raise connectivity failures as StoreUnavailableError."""

    @functools.wraps(fn)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return await fn(*args, **kwargs)
        except (OperationalError, InterfaceError, OSError) as exc:
            raise StoreUnavailableError(f"Message store is unreachable: {exc}") from exc

    return wrapper
