# Copyright 2026 pdftrace Contributors
# SPDX-License-Identifier: Apache-2.0

"""HTTP transport to the trace backend with retry and exponential backoff.

Two calls are exposed:
    - send(rows): POST gzip-compressed JSON {"rows": [...]} to /logs
    - upload(attachment): PUT the raw attachment bytes to /attachment

Uses stdlib urllib to keep the sink free of extra dependencies.

Retry strategy:
    - 3 attempts with exponential backoff: 1s, 2s, 4s
    - Retries on 5xx, 429 (rate limit), and connection errors
    - Does NOT retry on other 4xx client errors
    - Never raises; returns a TransportResult
"""

from __future__ import annotations

import gzip
import json
import logging
import time
import urllib.error
import urllib.parse
import urllib.request
from typing import Any

from pdftrace.models import Attachment

logger = logging.getLogger("pdftrace")

_MAX_RETRIES = 3
_BACKOFF_BASE_S = 1.0
_BACKOFF_MULTIPLIER = 2.0
_TIMEOUT_S = 30

_RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}

_USER_AGENT = "pdftrace/0.1.0"


class TransportResult:
    """Result of an HTTP transport attempt."""

    __slots__ = ("success", "status_code", "error", "retries_used")

    def __init__(
        self,
        success: bool,
        status_code: int | None = None,
        error: str | None = None,
        retries_used: int = 0,
    ) -> None:
        self.success = success
        self.status_code = status_code
        self.error = error
        self.retries_used = retries_used

    def __repr__(self) -> str:
        return (
            f"TransportResult(success={self.success}, status={self.status_code}, "
            f"retries={self.retries_used})"
        )


class HttpTransport:
    """HTTP client for the trace backend.

    Args:
        api_url: Base URL of the backend (e.g. "https://api.braintrust.dev").
        api_key: Sent as a bearer token.
        timeout_s: Per-request timeout in seconds.
        max_retries: Attempts per request on transient failures.
        backoff_base_s: First backoff delay; doubles on each retry.
    """

    def __init__(
        self,
        api_url: str,
        api_key: str = "",
        timeout_s: float = _TIMEOUT_S,
        max_retries: int = _MAX_RETRIES,
        backoff_base_s: float = _BACKOFF_BASE_S,
    ) -> None:
        self._base_url = api_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout_s
        self._max_retries = max(1, max_retries)
        self._backoff_base = backoff_base_s

    def send(self, rows: list[dict[str, Any]]) -> TransportResult:
        """Send a batch of exported span rows."""
        if not rows:
            return TransportResult(success=True, status_code=200)

        try:
            payload = gzip.compress(json.dumps({"rows": rows}).encode("utf-8"))
        except (TypeError, ValueError) as e:
            logger.debug("Failed to serialize span batch: %s", e)
            return TransportResult(success=False, error=f"Serialization error: {e}")

        return self._request(
            "POST",
            f"{self._base_url}/logs",
            payload,
            {"Content-Type": "application/json", "Content-Encoding": "gzip"},
        )

    def upload(self, attachment: Attachment) -> TransportResult:
        """Store an attachment's bytes under its key."""
        query = urllib.parse.urlencode(
            {
                "key": attachment.key,
                "filename": attachment.filename,
                "content_type": attachment.content_type,
            }
        )
        return self._request(
            "PUT",
            f"{self._base_url}/attachment?{query}",
            attachment.data,
            {"Content-Type": attachment.content_type},
        )

    def _request(
        self,
        method: str,
        url: str,
        body: bytes,
        headers: dict[str, str],
    ) -> TransportResult:
        last_error: str | None = None
        last_status: int | None = None

        for attempt in range(self._max_retries):
            try:
                req = urllib.request.Request(
                    url,
                    data=body,
                    headers={
                        **headers,
                        "Authorization": f"Bearer {self._api_key}",
                        "User-Agent": _USER_AGENT,
                    },
                    method=method,
                )
                with urllib.request.urlopen(req, timeout=self._timeout) as response:  # nosec B310
                    status = response.getcode()

                if 200 <= status < 300:
                    return TransportResult(success=True, status_code=status, retries_used=attempt)
                last_status = status
                last_error = f"Unexpected status: {status}"

            except urllib.error.HTTPError as e:
                last_status = e.code
                last_error = f"HTTP {e.code}: {e.reason}"
                if e.code not in _RETRYABLE_STATUS_CODES:
                    return TransportResult(
                        success=False,
                        status_code=e.code,
                        error=last_error,
                        retries_used=attempt,
                    )

            except (urllib.error.URLError, OSError) as e:
                last_error = f"Connection error: {e}"
                last_status = None

            if attempt < self._max_retries - 1:
                backoff = self._backoff_base * (_BACKOFF_MULTIPLIER ** attempt)
                logger.debug(
                    "Transport retry %d/%d in %.1fs: %s",
                    attempt + 1, self._max_retries, backoff, last_error,
                )
                time.sleep(backoff)

        return TransportResult(
            success=False,
            status_code=last_status,
            error=last_error,
            retries_used=self._max_retries,
        )

    def __repr__(self) -> str:
        return f"HttpTransport(url={self._base_url}, retries={self._max_retries})"
