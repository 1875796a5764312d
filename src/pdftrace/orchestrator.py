# Copyright 2026 pdftrace Contributors
# SPDX-License-Identifier: Apache-2.0

"""Summarize manifest PDFs and record each run as a three-span trace.

For every processed file the trace looks like:

    <filename>            root, output = summary
    ├── system_prompt     llm, input = system instruction
    └── user_prompt       llm, input = user text + PDF Attachment,
                          metadata = filename, url, base64String

Children are linked to the root through the root's exported identifier,
which is always resolved before either child is created. Files are handled
one at a time and each file gets its own root span.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from pdftrace import attachments
from pdftrace.config import PdfTraceConfig
from pdftrace.llm import SYSTEM_PROMPT, USER_PROMPT, CompletionClient
from pdftrace.manifest import PdfFile, get_pdf_files
from pdftrace.models import SpanKind
from pdftrace.tracer import Tracer

logger = logging.getLogger("pdftrace")


class Summarizer(Protocol):
    async def summarize(self, filename: str, base64_data: str) -> str | None: ...


async def process_pdf(
    pdf_file: PdfFile,
    *,
    tracer: Tracer,
    completions: Summarizer,
) -> str | None:
    """Summarize one PDF and log its trace.

    Returns the summary, or None when the completion service produced no
    text. File and upstream errors propagate.
    """

    @tracer.traced(name="process_pdf", capture_result=False)
    async def _process() -> str | None:
        logger.info("Processing %s...", pdf_file.filename)
        root_span = tracer.current_span()
        root_span.set_attributes(name=pdf_file.filename)

        pdf = await asyncio.to_thread(
            attachments.from_file, pdf_file.path, pdf_file.filename
        )
        base64_string = attachments.to_base64(pdf.data)
        root_ref = await root_span.export()

        summary = await completions.summarize(pdf_file.filename, base64_string)
        if not summary:
            logger.warning("No summary generated")
            return None

        logger.info(
            "Earnings Summary for %s: Summary Created! View in the trace UI",
            pdf_file.filename,
        )
        root_span.log(output=summary)

        await log_system_prompt(summary, root_ref, tracer=tracer)
        await log_user_prompt(
            pdf_file,
            USER_PROMPT,
            summary,
            root_ref,
            base64_string,
            tracer=tracer,
        )
        return summary

    return await _process()


async def log_system_prompt(
    summary: str,
    root_ref: str,
    *,
    tracer: Tracer,
) -> None:
    """Log the system instruction as a child span of `root_ref`."""

    @tracer.traced(name="system_prompt", type=SpanKind.LLM, capture_result=False)
    async def _system_span() -> None:
        span = tracer.current_span()
        span.set_attributes(name="system_prompt", type=SpanKind.LLM, parent=str(root_ref))
        span.log(
            input=[{"role": "system", "content": SYSTEM_PROMPT}],
            output=summary,
        )

    await _system_span()


async def log_user_prompt(
    pdf_file: PdfFile,
    user_prompt: str,
    summary: str,
    root_ref: str,
    base64_string: str,
    *,
    tracer: Tracer,
) -> None:
    """Log the user prompt with the PDF attached three ways.

    The binary Attachment goes into the input; the public URL and the
    base64 string go into the metadata. None of them takes precedence.
    """

    @tracer.traced(name="user_prompt", type=SpanKind.LLM, capture_result=False)
    async def _user_span() -> None:
        span = tracer.current_span()
        span.set_attributes(name="user_prompt", type=SpanKind.LLM, parent=str(root_ref))

        attachment = await asyncio.to_thread(
            attachments.from_file,
            pdf_file.path,
            pdf_file.filename,
            attachments.PDF_CONTENT_TYPE,
        )
        span.log(
            input=[
                {"role": "user", "content": user_prompt},
                {"role": "user", "content": attachment},
            ],
            output=summary,
            metadata={
                "filename": pdf_file.filename,
                "url": attachments.url_reference(pdf_file.url),
                "base64String": base64_string,
            },
        )

    await _user_span()


async def generate_summary(
    config: PdfTraceConfig,
    *,
    tracer: Tracer | None = None,
    completions: Summarizer | None = None,
    pdf_files: list[PdfFile] | None = None,
) -> list[str]:
    """Run the whole demo.

    Processes the first manifest entry, or every entry in order when
    `config.process_all` is set. Any error ends the run: it is logged
    together with the upstream response payload when one is attached, and
    the function returns normally.

    Returns:
        The summaries produced before the run finished or failed.
    """
    if pdf_files is None:
        pdf_files = get_pdf_files(config.resolved_pdf_dir)
    logger.info("Found %d PDFs to process", len(pdf_files))

    owns_tracer = tracer is None
    if tracer is None:
        tracer = Tracer.from_config(config)
    if completions is None:
        completions = CompletionClient(config)

    selected = pdf_files if config.process_all else pdf_files[:1]
    summaries: list[str] = []
    try:
        for pdf_file in selected:
            summary = await process_pdf(pdf_file, tracer=tracer, completions=completions)
            if summary is not None:
                summaries.append(summary)
    except Exception as err:
        logger.error("Error in main: %s", err, exc_info=True)
        response_data = getattr(err, "response_data", None)
        if response_data is not None:
            logger.error("Response data: %s", response_data)
    finally:
        if owns_tracer:
            tracer.shutdown()
        else:
            tracer.flush()
    return summaries
