"""
Error boundary: report a failure once, then let it propagate unchanged.
"""
from __future__ import annotations

import functools
import inspect
from typing import TYPE_CHECKING, Any, Awaitable, Callable, TypeVar

if TYPE_CHECKING:
    from crewbook.core.errors import ErrorHandler

T = TypeVar("T")


async def _report_awaitable(awaitable: Awaitable[T], handler: "ErrorHandler", context: str | None) -> T:
    try:
        return await awaitable
    except Exception as e:
        handler.handle_error(e, context)
        raise


def with_error_boundary(
    fn: Callable[..., Any],
    handler: "ErrorHandler",
    context: str | None = None,
) -> Callable[..., Any]:
    """Wraps fn so that every failure is logged with `context` and re-raised.

    Synchronous raises are reported immediately. Coroutine functions and
    functions returning an awaitable are reported when the awaited result
    fails. Each failure is reported exactly once.
    """
    if inspect.iscoroutinefunction(fn):
        @functools.wraps(fn)
        async def async_wrapper(*args, **kwargs):
            try:
                return await fn(*args, **kwargs)
            except Exception as e:
                handler.handle_error(e, context)
                raise

        return async_wrapper

    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            result = fn(*args, **kwargs)
        except Exception as e:
            handler.handle_error(e, context)
            raise
        if inspect.isawaitable(result):
            return _report_awaitable(result, handler, context)
        return result

    return wrapper


def error_boundary(context: str) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Method decorator; the handler is looked up on `self.error_handler` per call."""
    def decorator(method: Callable[..., T]) -> Callable[..., T]:
        if inspect.iscoroutinefunction(method):
            @functools.wraps(method)
            async def async_wrapper(self, *args, **kwargs):
                bound = with_error_boundary(method, self.error_handler, context)
                return await bound(self, *args, **kwargs)

            return async_wrapper

        @functools.wraps(method)
        def wrapper(self, *args, **kwargs):
            bound = with_error_boundary(method, self.error_handler, context)
            return bound(self, *args, **kwargs)

        return wrapper

    return decorator


async def safe_async(
    fn: Callable[[], Awaitable[T]],
    handler: "ErrorHandler",
    context: str | None = None,
) -> T | None:
    """Awaits fn(); on failure reports it and returns None instead of raising."""
    try:
        return await fn()
    except Exception as e:
        handler.handle_error(e, context)
        return None
