# Copyright 2026 pdftrace Contributors
# SPDX-License-Identifier: Apache-2.0

"""The live Span: a mutable unit of work that becomes a SpanRecord on end().

Usage:
    span = tracer.start_span("report.pdf")
    span.log(output="- Revenue beat.")
    parent_ref = await span.export()

    child = tracer.start_span("user_prompt")
    child.set_attributes(type="llm", parent=parent_ref)
    child.log(input=[{"role": "user", "content": attachment}])
    child.end()
    span.end()
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Callable, Iterable

from pydantic import TypeAdapter

from pdftrace._internal.clock import (
    duration_ms,
    monotonic_ns,
    next_sequence,
    wall_clock_ns,
)
from pdftrace.linker import SpanComponents, link
from pdftrace.models import Message, SpanKind, SpanRecord

logger = logging.getLogger("pdftrace")

_messages = TypeAdapter(list[Message])


class Span:
    """A single unit of work within a trace.

    Spans are created by the Tracer. Until `end()` every field may be changed:
    `set_attributes()` for name/kind/parent and `log()` for payloads. On
    `end()` the span is frozen into a `SpanRecord` and handed to the span
    processor; after that, mutations are ignored with a warning.

    This class is NOT a Pydantic model. It is a lightweight mutable wrapper;
    validation happens when payloads are logged and when the record is built.
    """

    __slots__ = (
        "id",
        "span_id",
        "root_span_id",
        "span_parents",
        "parent_ref",
        "project_name",
        "name",
        "kind",
        "input",
        "output",
        "metadata",
        "error",
        "start_time_ns",
        "end_time_ns",
        "_start_mono_ns",
        "_end_mono_ns",
        "created_seq",
        "exported_seq",
        "_on_end",
        "_ended",
    )

    def __init__(
        self,
        name: str,
        *,
        project_name: str = "",
        kind: SpanKind | str | None = None,
        parent: str | None = None,
        on_end: Callable[[SpanRecord], None] | None = None,
    ) -> None:
        # Identity. A span starts as the root of its own trace until linked.
        self.id: str = str(uuid.uuid4())
        self.span_id: str = str(uuid.uuid4())
        self.root_span_id: str = self.span_id
        self.span_parents: list[str] = []
        self.parent_ref: str | None = None
        self.project_name: str = project_name

        self.name: str = name
        self.kind: SpanKind | None = SpanKind(kind) if kind is not None else None

        # Payload
        self.input: list[Message] | None = None
        self.output: Any = None
        self.metadata: dict[str, Any] = {}
        self.error: str | None = None

        # Timing
        self.start_time_ns: int = wall_clock_ns()
        self._start_mono_ns: int = monotonic_ns()
        self.end_time_ns: int = 0
        self._end_mono_ns: int = 0
        self.created_seq: int = next_sequence()
        self.exported_seq: int | None = None

        self._on_end = on_end
        self._ended: bool = False

        if parent is not None:
            link(self, parent)

    def set_attributes(
        self,
        *,
        name: str | None = None,
        type: SpanKind | str | None = None,
        parent: str | None = None,
    ) -> None:
        """Update name, kind and/or parent. Last write wins per field."""
        if self._ended:
            logger.warning("Attempting to set attributes on ended span %s", self.span_id)
            return
        if name is not None:
            self.name = name
        if type is not None:
            self.kind = SpanKind(type)
        if parent is not None:
            link(self, parent)

    def log(
        self,
        *,
        input: Iterable[Message | dict[str, Any]] | None = None,
        output: Any = None,
        metadata: dict[str, Any] | None = None,
        error: str | None = None,
    ) -> None:
        """Attach payload to the span.

        `input` and `output` replace any earlier value; `metadata` is merged
        key by key with later values winning.
        """
        if self._ended:
            logger.warning("Attempting to log to ended span %s", self.span_id)
            return
        if input is not None:
            self.input = _messages.validate_python(list(input))
        if output is not None:
            self.output = output
        if metadata:
            self.metadata.update(metadata)
        if error is not None:
            self.error = error

    async def export(self) -> str:
        """Return an identifier usable as another span's parent reference."""
        if self.exported_seq is None:
            self.exported_seq = next_sequence()
        return SpanComponents(
            project_name=self.project_name,
            row_id=self.id,
            span_id=self.span_id,
            root_span_id=self.root_span_id,
        ).to_str()

    def end(self) -> None:
        """Close the span and queue its record for export.

        Idempotent: calls after the first have no effect.
        """
        if self._ended:
            return
        self._ended = True

        self.end_time_ns = wall_clock_ns()
        self._end_mono_ns = monotonic_ns()

        if self._on_end is None:
            return
        try:
            self._on_end(self.to_model())
        except Exception:
            logger.debug("Failed to queue span %s for export", self.span_id, exc_info=True)

    def to_model(self) -> SpanRecord:
        """Freeze the current state into a SpanRecord."""
        return SpanRecord(
            id=self.id,
            span_id=self.span_id,
            root_span_id=self.root_span_id,
            span_parents=list(self.span_parents),
            parent_ref=self.parent_ref,
            project_name=self.project_name,
            name=self.name,
            kind=self.kind,
            input=self.input,
            output=self.output,
            metadata=dict(self.metadata),
            error=self.error,
            start_time=self.start_time_ns,
            end_time=self.end_time_ns,
            duration_ms=duration_ms(self._start_mono_ns, self._end_mono_ns)
            if self._end_mono_ns
            else 0,
        )

    @property
    def is_ended(self) -> bool:
        return self._ended

    def __enter__(self) -> Span:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc is not None:
            self.log(error=f"{type(exc).__name__}: {exc}")
        self.end()

    def __repr__(self) -> str:
        return (
            f"Span(name={self.name!r}, span_id={self.span_id[:8]}..., "
            f"root_span_id={self.root_span_id[:8]}..., ended={self._ended})"
        )
