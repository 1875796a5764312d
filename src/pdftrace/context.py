# Copyright 2026 pdftrace Contributors
# SPDX-License-Identifier: Apache-2.0

"""Async-safe tracking of the currently active span.

Uses `contextvars` so each asyncio task sees its own stack of active spans.
Only the "current span" lookup rides on this; parent/child links are always
made explicitly through exported identifiers (see `pdftrace.linker`).

Usage:
    with span_context(span):
        assert current_span() is span
"""

from __future__ import annotations

import contextvars
from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from pdftrace.span import Span

_span_stack_var: contextvars.ContextVar[tuple[Span, ...]] = contextvars.ContextVar(
    "pdftrace_span_stack", default=()
)


def current_span() -> Span | None:
    """Return the innermost active span, or None outside any traced scope."""
    stack = _span_stack_var.get()
    return stack[-1] if stack else None


@contextmanager
def span_context(span: Span) -> Iterator[Span]:
    """Make `span` the current span for the duration of the block."""
    token = _span_stack_var.set(_span_stack_var.get() + (span,))
    try:
        yield span
    finally:
        _span_stack_var.reset(token)


def clear_context() -> None:
    """Drop all active spans. Primarily for testing."""
    _span_stack_var.set(())
