# Copyright 2026 pdftrace Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for environment-driven configuration."""

import logging
from pathlib import Path

from pdftrace import configure_logging
from pdftrace.config import PdfTraceConfig


def test_defaults(monkeypatch):
    monkeypatch.delenv("BRAINTRUST_API_KEY", raising=False)
    config = PdfTraceConfig.from_env()

    assert config.api_key == ""
    assert config.project_name == "pdf-attachment-demo"
    assert config.llm_base_url == "https://braintrustproxy.com/v1"
    assert config.model == "gpt-4o"
    assert config.max_tokens == 500
    assert config.process_all is False
    assert config.enabled is True
    assert config.resolved_pdf_dir == Path.cwd() / "pdfs"


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("PDFTRACE_API_KEY", "key")
    monkeypatch.setenv("PDFTRACE_MODEL", "gpt-4o-mini")
    monkeypatch.setenv("PDFTRACE_MAX_TOKENS", "123")
    monkeypatch.setenv("PDFTRACE_PDF_DIR", str(tmp_path))
    monkeypatch.setenv("PDFTRACE_PROCESS_ALL", "yes")
    monkeypatch.setenv("PDFTRACE_ENABLED", "0")
    monkeypatch.setenv("PDFTRACE_LOG_LEVEL", "debug")

    config = PdfTraceConfig.from_env()

    assert config.api_key == "key"
    assert config.model == "gpt-4o-mini"
    assert config.max_tokens == 123
    assert config.resolved_pdf_dir == tmp_path
    assert config.process_all is True
    assert config.enabled is False
    assert config.log_level == "DEBUG"


def test_api_key_falls_back_to_braintrust_env(monkeypatch):
    monkeypatch.setenv("BRAINTRUST_API_KEY", "bt-key")
    assert PdfTraceConfig.from_env().api_key == "bt-key"
    monkeypatch.setenv("PDFTRACE_API_KEY", "own-key")
    assert PdfTraceConfig.from_env().api_key == "own-key"


def test_invalid_int_uses_default(monkeypatch):
    monkeypatch.setenv("PDFTRACE_BATCH_SIZE", "lots")
    assert PdfTraceConfig.from_env().batch_size == 64


def test_with_overrides_returns_copy():
    base = PdfTraceConfig()
    changed = base.with_overrides(model="other", process_all=True)
    assert base.model == "gpt-4o"
    assert changed.model == "other"
    assert changed.process_all


def test_configure_logging_adds_single_handler():
    pdftrace_logger = logging.getLogger("pdftrace")
    saved = list(pdftrace_logger.handlers)
    pdftrace_logger.handlers.clear()
    try:
        configure_logging(PdfTraceConfig(debug=True))
        configure_logging(PdfTraceConfig(log_level="WARNING"))
        assert len(pdftrace_logger.handlers) == 1
        assert pdftrace_logger.level == logging.WARNING
    finally:
        pdftrace_logger.handlers[:] = saved
        pdftrace_logger.setLevel(logging.NOTSET)
