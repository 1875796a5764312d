# Copyright 2026 pdftrace Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tracer: creates spans for one project and routes finished ones to the sink.

The tracer is an explicit object. Build it once at process start and pass it
to every function that creates spans; there is no module-level singleton.

Usage:
    tracer = Tracer.from_config(config)
    span = tracer.start_span("report.pdf")
    ...
    span.end()
    tracer.flush()
"""

from __future__ import annotations

from typing import Any, Callable

from pdftrace.config import PdfTraceConfig
from pdftrace.context import current_span
from pdftrace.decorator import traced
from pdftrace.exporter import BatchSpanProcessor, build_processor
from pdftrace.models import SpanKind, SpanRecord
from pdftrace.span import Span


class Tracer:
    """Creates spans tagged with `project_name`.

    Args:
        project_name: Project every span is logged under.
        processor: Receives finished records. None disables export.
    """

    def __init__(
        self,
        project_name: str,
        processor: BatchSpanProcessor | None = None,
    ) -> None:
        self.project_name = project_name
        self._processor = processor

    @classmethod
    def from_config(cls, config: PdfTraceConfig) -> Tracer:
        return cls(config.project_name, build_processor(config))

    def start_span(
        self,
        name: str,
        *,
        type: SpanKind | str | None = None,
        parent: str | None = None,
    ) -> Span:
        """Create a new span with a fresh identity.

        Args:
            name: Human-readable label.
            type: Optional span kind.
            parent: Resolved exported identifier of the parent span.
        """
        return Span(
            name,
            project_name=self.project_name,
            kind=type,
            parent=parent,
            on_end=self._on_end,
        )

    def traced(
        self,
        func: Callable | None = None,
        *,
        name: str | None = None,
        type: SpanKind | str | None = None,
        capture_result: bool = True,
    ) -> Any:
        """Decorator running each call of the function in a new span."""
        return traced(self, func, name=name, type=type, capture_result=capture_result)

    @staticmethod
    def current_span() -> Span | None:
        return current_span()

    def _on_end(self, record: SpanRecord) -> None:
        if self._processor is not None:
            self._processor.add(record)

    @property
    def is_enabled(self) -> bool:
        return self._processor is not None

    def flush(self) -> None:
        """Export every span ended so far."""
        if self._processor is not None:
            self._processor.flush()

    def shutdown(self) -> None:
        if self._processor is not None:
            self._processor.shutdown()

    def __repr__(self) -> str:
        return f"Tracer(project={self.project_name!r}, processor={self._processor!r})"
