# Copyright 2026 pdftrace Contributors
# SPDX-License-Identifier: Apache-2.0

"""pdftrace configuration loaded from environment variables.

All configuration is read from PDFTRACE_* environment variables with sensible
defaults. The config is built once at process start and passed by reference
into the tracer, the completion client and the orchestrator.
"""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any


def _env(key: str, default: str = "") -> str:
    """Read an environment variable with a default."""
    return os.environ.get(key, default)


def _env_bool(key: str, default: bool = True) -> bool:
    """Read a boolean environment variable."""
    val = os.environ.get(key)
    if val is None:
        return default
    return val.lower() in ("true", "1", "yes")


def _env_int(key: str, default: int = 0) -> int:
    """Read an integer environment variable."""
    val = os.environ.get(key)
    if val is None:
        return default
    try:
        return int(val)
    except ValueError:
        return default


@dataclass(frozen=True)
class PdfTraceConfig:
    """Immutable run configuration.

    Attributes:
        api_key: Key for both the trace backend and the LLM proxy.
        project_name: Project the spans are logged under.
        api_url: Base URL of the trace backend.
        llm_base_url: Base URL of the OpenAI-compatible completion endpoint.
        model: Chat model used for summarization.
        max_tokens: Upper bound on the completion length.
        pdf_dir: Directory holding the manifest PDFs. None means <cwd>/pdfs.
        process_all: Process every manifest entry instead of only the first.
        enabled: Master switch for span export.
        batch_size: Number of spans that triggers an immediate flush.
        export_interval_ms: Maximum milliseconds between flushes.
        max_queue_size: Capacity of the in-memory span queue.
        log_level: Python logging level name.
        debug: Enable verbose logging.
    """

    api_key: str = ""
    project_name: str = "pdf-attachment-demo"
    api_url: str = "https://api.braintrust.dev"
    llm_base_url: str = "https://braintrustproxy.com/v1"
    model: str = "gpt-4o"
    max_tokens: int = 500
    pdf_dir: Path | None = None
    process_all: bool = False
    enabled: bool = True
    batch_size: int = 64
    export_interval_ms: int = 5000
    max_queue_size: int = 2048
    log_level: str = "INFO"
    debug: bool = False

    @classmethod
    def from_env(cls) -> PdfTraceConfig:
        """Create a config by reading PDFTRACE_* environment variables.

        Environment Variables:
            PDFTRACE_API_KEY: Falls back to BRAINTRUST_API_KEY.
            PDFTRACE_PROJECT_NAME: Default "pdf-attachment-demo".
            PDFTRACE_API_URL: Default "https://api.braintrust.dev".
            PDFTRACE_LLM_BASE_URL: Default "https://braintrustproxy.com/v1".
            PDFTRACE_MODEL: Default "gpt-4o".
            PDFTRACE_MAX_TOKENS: Default 500.
            PDFTRACE_PDF_DIR: Default "<cwd>/pdfs".
            PDFTRACE_PROCESS_ALL: Default "false".
            PDFTRACE_ENABLED: Default "true". Set to "false" to disable export.
            PDFTRACE_BATCH_SIZE: Default 64.
            PDFTRACE_EXPORT_INTERVAL: Default 5000. Milliseconds between flushes.
            PDFTRACE_MAX_QUEUE_SIZE: Default 2048.
            PDFTRACE_LOG_LEVEL: Default "INFO".
            PDFTRACE_DEBUG: Default "false".
        """
        pdf_dir = _env("PDFTRACE_PDF_DIR")
        return cls(
            api_key=_env("PDFTRACE_API_KEY") or _env("BRAINTRUST_API_KEY"),
            project_name=_env("PDFTRACE_PROJECT_NAME", "pdf-attachment-demo"),
            api_url=_env("PDFTRACE_API_URL", "https://api.braintrust.dev"),
            llm_base_url=_env("PDFTRACE_LLM_BASE_URL", "https://braintrustproxy.com/v1"),
            model=_env("PDFTRACE_MODEL", "gpt-4o"),
            max_tokens=_env_int("PDFTRACE_MAX_TOKENS", 500),
            pdf_dir=Path(pdf_dir) if pdf_dir else None,
            process_all=_env_bool("PDFTRACE_PROCESS_ALL", False),
            enabled=_env_bool("PDFTRACE_ENABLED", True),
            batch_size=_env_int("PDFTRACE_BATCH_SIZE", 64),
            export_interval_ms=_env_int("PDFTRACE_EXPORT_INTERVAL", 5000),
            max_queue_size=_env_int("PDFTRACE_MAX_QUEUE_SIZE", 2048),
            log_level=_env("PDFTRACE_LOG_LEVEL", "INFO").upper(),
            debug=_env_bool("PDFTRACE_DEBUG", False),
        )

    def with_overrides(self, **overrides: Any) -> PdfTraceConfig:
        """Return a copy with the given fields replaced."""
        return dataclasses.replace(self, **overrides)

    @property
    def resolved_pdf_dir(self) -> Path:
        return self.pdf_dir if self.pdf_dir is not None else Path.cwd() / "pdfs"
