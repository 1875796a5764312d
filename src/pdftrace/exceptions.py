# Copyright 2026 pdftrace Contributors
# SPDX-License-Identifier: Apache-2.0

"""Exception hierarchy for pdftrace.

File access errors are not wrapped: a missing or unreadable PDF surfaces as
the builtin FileNotFoundError / OSError.
"""

from __future__ import annotations

from typing import Any


class PdfTraceError(Exception):
    """Base class for all pdftrace errors."""


class InvalidSpanReference(PdfTraceError, ValueError):
    """An exported span identifier could not be used as a parent reference."""


class UpstreamServiceError(PdfTraceError):
    """The completion service failed (network, auth, quota, bad request).

    Attributes:
        status_code: HTTP status returned by the service, if any.
        response_data: Decoded response payload, if the service sent one.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        response_data: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data
