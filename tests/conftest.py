# Copyright 2026 pdftrace Contributors
# SPDX-License-Identifier: Apache-2.0

"""Shared pytest fixtures for pdftrace tests."""

from __future__ import annotations

import os

import pytest

from pdftrace.config import PdfTraceConfig
from pdftrace.context import clear_context
from pdftrace.exporter import BatchSpanProcessor, InMemorySpanExporter
from pdftrace.manifest import get_pdf_files
from pdftrace.tracer import Tracer

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\n%%EOF\n"
SUMMARY = "- Revenue beat.\n- Guidance raised."


class RecordingTracer(Tracer):
    """Tracer that also keeps the live Span objects it created."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.spans = []

    def start_span(self, name, **kwargs):
        span = super().start_span(name, **kwargs)
        self.spans.append(span)
        return span


class FakeCompletions:
    """Completion service stub returning a fixed result or raising."""

    def __init__(self, result: str | None = SUMMARY, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def summarize(self, filename: str, base64_data: str) -> str | None:
        self.calls.append((filename, base64_data))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture(autouse=True)
def reset_env():
    """Clear pdftrace environment variables and context around each test."""
    clear_context()
    saved = {k: v for k, v in os.environ.items() if k.startswith("PDFTRACE_")}
    for key in saved:
        del os.environ[key]
    yield
    clear_context()
    for key in [k for k in os.environ if k.startswith("PDFTRACE_")]:
        del os.environ[key]
    os.environ.update(saved)


@pytest.fixture
def exporter():
    return InMemorySpanExporter()


@pytest.fixture
def processor(exporter):
    processor = BatchSpanProcessor(exporter, batch_size=1000, export_interval_s=60.0)
    yield processor
    processor.shutdown(timeout_s=1.0)


@pytest.fixture
def tracer(processor):
    return RecordingTracer("test-project", processor)


@pytest.fixture
def pdf_dir(tmp_path):
    """A pdfs/ directory holding report.pdf and second.pdf."""
    directory = tmp_path / "pdfs"
    directory.mkdir()
    (directory / "report.pdf").write_bytes(PDF_BYTES)
    (directory / "second.pdf").write_bytes(b"%PDF-1.7 second")
    return directory


@pytest.fixture
def manifest():
    return [
        {"filename": "report.pdf", "url": "https://example.com/report.pdf"},
        {"filename": "second.pdf", "url": "https://example.com/second.pdf"},
    ]


@pytest.fixture
def pdf_files(pdf_dir, manifest):
    return get_pdf_files(pdf_dir, manifest)


@pytest.fixture
def config(pdf_dir):
    return PdfTraceConfig(project_name="test-project", pdf_dir=pdf_dir, enabled=True)
