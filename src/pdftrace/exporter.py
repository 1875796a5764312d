# Copyright 2026 pdftrace Contributors
# SPDX-License-Identifier: Apache-2.0

"""Span exporters and the BatchSpanProcessor that feeds them.

Span.end() hands a SpanRecord to the processor, which queues it and returns
immediately. A background daemon thread drains the queue and passes batches
to the exporter. An atexit hook flushes whatever is left on shutdown.

Flush triggers:
    - Queue reaches batch_size
    - Export interval timer fires
    - Manual flush() call
    - Process exit (atexit hook)

Export failures are logged and counted; they never propagate into the code
that ended the span.
"""

from __future__ import annotations

import atexit
import logging
import threading
from collections import deque
from typing import Protocol

from pdftrace._internal.transport import HttpTransport
from pdftrace.config import PdfTraceConfig
from pdftrace.models import SpanRecord

logger = logging.getLogger("pdftrace")


class SpanExporter(Protocol):
    """Destination for finished span records."""

    def export(self, records: list[SpanRecord]) -> bool: ...

    def shutdown(self) -> None: ...


class InMemorySpanExporter:
    """Keeps exported records in a list. Used for tests and offline runs."""

    def __init__(self) -> None:
        self._records: list[SpanRecord] = []
        self._lock = threading.Lock()

    def export(self, records: list[SpanRecord]) -> bool:
        with self._lock:
            self._records.extend(records)
        return True

    def shutdown(self) -> None:
        pass

    @property
    def records(self) -> list[SpanRecord]:
        with self._lock:
            return list(self._records)

    def by_name(self, name: str) -> list[SpanRecord]:
        return [r for r in self.records if r.name == name]

    def clear(self) -> None:
        with self._lock:
            self._records.clear()


class HttpSpanExporter:
    """Sends records to the trace backend.

    Attachment bytes are uploaded first, so the rows that reference them by
    key never point at a missing blob.
    """

    def __init__(self, transport: HttpTransport) -> None:
        self._transport = transport

    def export(self, records: list[SpanRecord]) -> bool:
        uploaded: set[str] = set()
        for record in records:
            for attachment in record.attachments():
                if attachment.key in uploaded:
                    continue
                result = self._transport.upload(attachment)
                if not result.success:
                    logger.warning(
                        "Failed to upload attachment %s: %s",
                        attachment.filename, result.error,
                    )
                    return False
                uploaded.add(attachment.key)

        result = self._transport.send([r.to_export_dict() for r in records])
        if not result.success:
            logger.warning("Failed to export %d spans: %s", len(records), result.error)
        return result.success

    def shutdown(self) -> None:
        pass


class BatchSpanProcessor:
    """Queues span records and exports them in batches.

    Args:
        exporter: Destination of the batches.
        batch_size: Number of queued records that triggers an immediate flush.
        export_interval_s: Maximum seconds between flushes.
        max_queue_size: Queue capacity; the oldest records are dropped beyond it.
    """

    def __init__(
        self,
        exporter: SpanExporter,
        batch_size: int = 64,
        export_interval_s: float = 5.0,
        max_queue_size: int = 2048,
    ) -> None:
        self._exporter = exporter
        self._batch_size = batch_size
        self._export_interval = export_interval_s
        self._max_queue_size = max_queue_size
        self._queue: deque[SpanRecord] = deque(maxlen=max_queue_size)
        self._queue_lock = threading.Lock()
        self._export_lock = threading.Lock()

        self._shutdown_event = threading.Event()
        self._flush_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._started = False
        self._lock = threading.Lock()

        self._exported_count = 0
        self._failed_count = 0
        self._dropped_count = 0

    def start(self) -> None:
        """Start the background export thread."""
        with self._lock:
            if self._started:
                return
            self._started = True
            self._shutdown_event.clear()
            self._thread = threading.Thread(
                target=self._export_loop,
                name="pdftrace-exporter",
                daemon=True,
            )
            self._thread.start()
            atexit.register(self.shutdown)

    def add(self, record: SpanRecord) -> None:
        """Queue a record for export. Starts the background thread on first use."""
        if not self._started:
            self.start()

        with self._queue_lock:
            if len(self._queue) >= self._max_queue_size:
                self._dropped_count += 1
            self._queue.append(record)
            size = len(self._queue)

        if size >= self._batch_size:
            self._flush_event.set()

    def flush(self) -> None:
        """Export everything queued so far. Blocks until the exporter returns."""
        self._do_flush()

    def _export_loop(self) -> None:
        while not self._shutdown_event.is_set():
            self._flush_event.wait(timeout=self._export_interval)
            self._flush_event.clear()
            self._do_flush()

    def _do_flush(self) -> None:
        with self._export_lock:
            with self._queue_lock:
                records = list(self._queue)
                self._queue.clear()
            if not records:
                return

            try:
                ok = self._exporter.export(records)
            except Exception:
                logger.warning("Span exporter raised", exc_info=True)
                ok = False

            if ok:
                self._exported_count += len(records)
                logger.debug("Exported %d spans (total: %d)", len(records), self._exported_count)
            else:
                self._failed_count += len(records)

    def shutdown(self, timeout_s: float = 5.0) -> None:
        """Flush remaining records and stop the background thread."""
        with self._lock:
            if not self._started:
                return
            self._started = False

        self._shutdown_event.set()
        self._flush_event.set()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=timeout_s)

        self._do_flush()
        self._exporter.shutdown()
        atexit.unregister(self.shutdown)

        logger.debug(
            "Exporter shutdown: exported=%d, failed=%d, dropped=%d",
            self._exported_count, self._failed_count, self._dropped_count,
        )

    @property
    def stats(self) -> dict[str, int]:
        with self._queue_lock:
            buffered = len(self._queue)
        return {
            "exported": self._exported_count,
            "failed": self._failed_count,
            "buffered": buffered,
            "dropped": self._dropped_count,
        }

    def __repr__(self) -> str:
        return (
            f"BatchSpanProcessor(batch_size={self._batch_size}, "
            f"interval={self._export_interval}s, buffered={self.stats['buffered']})"
        )


def build_processor(config: PdfTraceConfig) -> BatchSpanProcessor | None:
    """Create the processor for `config`.

    Returns None when export is disabled. Without an API key spans are kept
    in memory only.
    """
    if not config.enabled:
        return None

    exporter: SpanExporter
    if config.api_key:
        exporter = HttpSpanExporter(HttpTransport(config.api_url, api_key=config.api_key))
    else:
        logger.info("No API key configured; spans are kept in memory only")
        exporter = InMemorySpanExporter()

    return BatchSpanProcessor(
        exporter,
        batch_size=config.batch_size,
        export_interval_s=config.export_interval_ms / 1000.0,
        max_queue_size=config.max_queue_size,
    )
