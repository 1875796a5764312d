# Copyright 2026 pdftrace Contributors
# SPDX-License-Identifier: Apache-2.0

"""pdftrace: summarize PDFs with an LLM and trace each run with attachments.

Quick Start:
    import asyncio
    from pdftrace import PdfTraceConfig, configure_logging, generate_summary

    config = PdfTraceConfig.from_env()
    configure_logging(config)
    asyncio.run(generate_summary(config))

Public API:
    - Tracer / Span: manual span creation, logging and export
    - Attachment: immutable bytes + filename + content type
    - link: attach a span below an exported parent identifier
    - generate_summary / process_pdf: the summarization run
"""

from __future__ import annotations

__version__ = "0.1.0"
__all__ = [
    "Attachment",
    "PdfTraceConfig",
    "Span",
    "SpanKind",
    "SpanRecord",
    "Tracer",
    "configure_logging",
    "generate_summary",
    "link",
    "process_pdf",
    "__version__",
]

import logging

from pdftrace.config import PdfTraceConfig
from pdftrace.linker import link
from pdftrace.models import Attachment, SpanKind, SpanRecord
from pdftrace.orchestrator import generate_summary, process_pdf
from pdftrace.span import Span
from pdftrace.tracer import Tracer

_LOG_FORMAT = "[pdftrace] %(levelname)s %(name)s: %(message)s"


def configure_logging(config: PdfTraceConfig) -> None:
    """Set the pdftrace log level and attach a console handler once."""
    level = logging.DEBUG if config.debug else getattr(logging, config.log_level, logging.INFO)
    pdftrace_logger = logging.getLogger("pdftrace")
    pdftrace_logger.setLevel(level)

    if not pdftrace_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        pdftrace_logger.addHandler(handler)
