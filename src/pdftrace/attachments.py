# Copyright 2026 pdftrace Contributors
# SPDX-License-Identifier: Apache-2.0

"""Three interchangeable ways of carrying a file on a span.

    - from_file(): binary Attachment (bytes + filename + content type)
    - url_reference(): a public URL string, passed through untouched
    - to_base64(): an inline base64 string, optionally as a data URL

The encoders are independent. Callers may log any combination of them on
the same span; nothing here checks that they describe the same file.
"""

from __future__ import annotations

import base64
import mimetypes
from pathlib import Path

from pdftrace.models import Attachment

PDF_CONTENT_TYPE = "application/pdf"
_FALLBACK_CONTENT_TYPE = "application/octet-stream"


def guess_content_type(filename: str) -> str:
    content_type, _ = mimetypes.guess_type(filename)
    return content_type or _FALLBACK_CONTENT_TYPE


def from_file(
    path: str | Path,
    filename: str | None = None,
    content_type: str | None = PDF_CONTENT_TYPE,
) -> Attachment:
    """Read `path` fully into memory and wrap it as an Attachment.

    Args:
        path: File to read.
        filename: Logical name recorded on the attachment. Defaults to the
            file's basename.
        content_type: MIME type. None guesses it from the filename.

    Raises:
        FileNotFoundError: if `path` does not exist.
        OSError: if the file cannot be read.
    """
    path = Path(path)
    data = path.read_bytes()
    name = filename or path.name
    return Attachment(
        data=data,
        filename=name,
        content_type=content_type or guess_content_type(name),
    )


def to_base64(data: bytes) -> str:
    """Standard base64 without line wrapping."""
    return base64.b64encode(data).decode("ascii")


def to_data_url(base64_data: str, content_type: str = PDF_CONTENT_TYPE) -> str:
    """Prefix an already encoded payload, e.g. the output of to_base64()."""
    return f"data:{content_type};base64,{base64_data}"


def url_reference(url: str) -> str:
    """Identity passthrough. The URL is neither fetched nor validated."""
    return url
