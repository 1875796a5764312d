# Copyright 2026 pdftrace Contributors
# SPDX-License-Identifier: Apache-2.0

"""traced() decorator: run a function inside its own span.

The span is current (see `pdftrace.context.current_span`) for the duration
of the call and is ended when the function returns or raises, so closure is
implicit at function return. Exceptions are recorded on the span and always
re-raised.

Usage:
    @tracer.traced
    async def summarize(path):
        span = tracer.current_span()
        span.set_attributes(name=path.name)
        ...

    @tracer.traced(name="system_prompt", type="llm")
    def log_prompt():
        ...
"""

from __future__ import annotations

import functools
import inspect
import logging
from typing import TYPE_CHECKING, Any, Callable, TypeVar

from pdftrace.context import span_context
from pdftrace.models import SpanKind

if TYPE_CHECKING:
    from pdftrace.span import Span
    from pdftrace.tracer import Tracer

logger = logging.getLogger("pdftrace")

F = TypeVar("F", bound=Callable[..., Any])


def _make_span_name(func: Callable, custom_name: str | None) -> str:
    if custom_name:
        return custom_name
    return getattr(func, "__qualname__", func.__name__)


def _record_result(span: Span, result: Any) -> None:
    # Output logged explicitly by the function wins over its return value.
    if result is not None and span.output is None:
        span.log(output=result)


def _record_exception(span: Span, exc: BaseException) -> None:
    try:
        span.log(error=f"{type(exc).__name__}: {exc}")
    except Exception:
        logger.debug("Failed to record exception on span %s", span.span_id, exc_info=True)


def _wrap_sync(
    tracer: Tracer,
    func: Callable,
    span_name: str,
    kind: SpanKind | str | None,
    capture_result: bool,
) -> Callable:
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        span = tracer.start_span(span_name, type=kind)
        try:
            with span_context(span):
                result = func(*args, **kwargs)
            if capture_result:
                _record_result(span, result)
            return result
        except Exception as exc:
            _record_exception(span, exc)
            raise
        finally:
            span.end()

    return wrapper


def _wrap_async(
    tracer: Tracer,
    func: Callable,
    span_name: str,
    kind: SpanKind | str | None,
    capture_result: bool,
) -> Callable:
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        span = tracer.start_span(span_name, type=kind)
        try:
            with span_context(span):
                result = await func(*args, **kwargs)
            if capture_result:
                _record_result(span, result)
            return result
        except Exception as exc:
            _record_exception(span, exc)
            raise
        finally:
            span.end()

    return wrapper


def traced(
    tracer: Tracer,
    func: F | None = None,
    *,
    name: str | None = None,
    type: SpanKind | str | None = None,
    capture_result: bool = True,
) -> F | Callable[[F], F]:
    """Wrap `func` so every call runs inside a new span of `tracer`.

    Args:
        tracer: Tracer that creates the spans.
        func: The function to decorate (auto-filled when used bare).
        name: Span name. Defaults to the function's qualified name.
        type: Span kind.
        capture_result: Log a non-None return value as the span output
            unless the function already logged one.
    """

    def decorator(fn: F) -> F:
        span_name = _make_span_name(fn, name)
        if inspect.iscoroutinefunction(fn):
            wrapped = _wrap_async(tracer, fn, span_name, type, capture_result)
        else:
            wrapped = _wrap_sync(tracer, fn, span_name, type, capture_result)
        return wrapped  # type: ignore[return-value]

    if func is not None:
        return decorator(func)
    return decorator
