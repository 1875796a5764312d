# Copyright 2026 pdftrace Contributors
# SPDX-License-Identifier: Apache-2.0

"""Completion client: asks an OpenAI-compatible endpoint to summarize a PDF.

The PDF travels inline as a base64 data URL inside a `file` content part,
next to a short text instruction. Every request is attempted exactly once.
"""

from __future__ import annotations

import logging
from typing import Any

from openai import APIStatusError, AsyncOpenAI, OpenAIError

from pdftrace.attachments import PDF_CONTENT_TYPE, to_data_url
from pdftrace.config import PdfTraceConfig
from pdftrace.exceptions import UpstreamServiceError

logger = logging.getLogger("pdftrace")

SYSTEM_PROMPT = """
You are a financial analyst specializing in earnings call analysis. Your task is to provide a quick, bullet-point summary of the key points from earnings call transcripts.

Focus ONLY on these 3-5 key points:
• Revenue and EPS figures vs expectations
• Major business highlights or challenges
• Forward guidance for next quarter

Keep each point to 1-2 sentences maximum. Be extremely concise and focus only on the most important information.
Only output the key points, no other text.
"""

USER_PROMPT = "Please analyze this earnings call transcript"


def build_messages(filename: str, base64_data: str) -> list[dict[str, Any]]:
    """Chat messages for one summarization request."""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {
            "role": "user",
            "content": [
                {
                    "type": "file",
                    "file": {
                        "filename": filename,
                        "file_data": to_data_url(base64_data, PDF_CONTENT_TYPE),
                    },
                },
                {"type": "text", "text": USER_PROMPT},
            ],
        },
    ]


class CompletionClient:
    """Thin wrapper over `openai.AsyncOpenAI`.

    Args:
        config: Supplies the API key, base URL, model and max_tokens.
        client: Pre-built client, mainly for tests. Built lazily otherwise.
    """

    def __init__(self, config: PdfTraceConfig, client: AsyncOpenAI | None = None) -> None:
        self._config = config
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self._config.api_key or None,
                base_url=self._config.llm_base_url,
                max_retries=0,
            )
        return self._client

    async def summarize(self, filename: str, base64_data: str) -> str | None:
        """Return the generated summary, or None when the service sent no text.

        Raises:
            UpstreamServiceError: on any failure of the completion call.
        """
        logger.debug("Requesting summary of %s from %s", filename, self._config.model)
        try:
            completion = await self._get_client().chat.completions.create(
                model=self._config.model,
                messages=build_messages(filename, base64_data),
                max_tokens=self._config.max_tokens,
            )
        except APIStatusError as e:
            raise UpstreamServiceError(
                f"Completion request failed: {e}",
                status_code=e.status_code,
                response_data=e.body,
            ) from e
        except OpenAIError as e:
            raise UpstreamServiceError(
                f"Completion request failed: {e}",
                response_data=getattr(e, "body", None),
            ) from e

        if not completion.choices:
            return None
        return completion.choices[0].message.content or None

    def __repr__(self) -> str:
        return f"CompletionClient(model={self._config.model!r}, base_url={self._config.llm_base_url!r})"
