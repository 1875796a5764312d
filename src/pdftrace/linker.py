# Copyright 2026 pdftrace Contributors
# SPDX-License-Identifier: Apache-2.0

"""Parent/child linking through exported span identifiers.

A span's exported identifier is an opaque, URL-safe string that encodes the
span's project, row id, span id and root span id. Any span (in this process
or another one) can be attached below it by passing that string to `link()`.

The identifier must already be resolved: `link()` accepts the string itself,
never a pending coroutine or future. Building the child's parent reference
from an unresolved handle is a programming error and raises TypeError.
"""

from __future__ import annotations

import base64
import binascii
import inspect
import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pdftrace.exceptions import InvalidSpanReference

if TYPE_CHECKING:
    from pdftrace.span import Span

logger = logging.getLogger("pdftrace")

_FORMAT_VERSION = 1


@dataclass(frozen=True)
class SpanComponents:
    """The decoded content of an exported span identifier."""

    project_name: str
    row_id: str
    span_id: str
    root_span_id: str

    def to_str(self) -> str:
        """Encode as an opaque URL-safe string without padding."""
        raw = json.dumps(
            {
                "v": _FORMAT_VERSION,
                "p": self.project_name,
                "r": self.row_id,
                "s": self.span_id,
                "t": self.root_span_id,
            },
            separators=(",", ":"),
        ).encode("utf-8")
        return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")

    @classmethod
    def from_str(cls, value: str) -> SpanComponents:
        """Decode an identifier produced by `to_str()`.

        Raises:
            InvalidSpanReference: if the string is not a valid identifier.
        """
        padded = value + "=" * (-len(value) % 4)
        try:
            payload = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")))
        except (binascii.Error, UnicodeError, ValueError) as e:
            raise InvalidSpanReference(f"Malformed span identifier {value!r}") from e

        if not isinstance(payload, dict) or payload.get("v") != _FORMAT_VERSION:
            raise InvalidSpanReference(f"Unsupported span identifier {value!r}")
        try:
            return cls(
                project_name=str(payload["p"]),
                row_id=str(payload["r"]),
                span_id=str(payload["s"]),
                root_span_id=str(payload["t"]),
            )
        except KeyError as e:
            raise InvalidSpanReference(f"Span identifier {value!r} is missing {e}") from e


def link(child: Span, parent_ref: Any) -> SpanComponents:
    """Attach `child` below the span identified by `parent_ref`.

    Siblings may link to the same identifier without coordination; each call
    only reads the identifier and writes the child's own fields.

    Returns:
        The decoded parent components.

    Raises:
        TypeError: if `parent_ref` is not a resolved string.
        InvalidSpanReference: if it is malformed, names the child itself, or
            the child has already been exported.
    """
    if inspect.isawaitable(parent_ref):
        raise TypeError("Parent identifier must be awaited before linking")
    if not isinstance(parent_ref, str):
        raise TypeError(
            f"Parent identifier must be a str, got {type(parent_ref).__name__}"
        )

    # Identifiers already handed out embed the current root_span_id.
    if child.exported_seq is not None:
        raise InvalidSpanReference(
            f"Span {child.span_id} was already exported and cannot be re-parented"
        )

    parent = SpanComponents.from_str(parent_ref)
    if parent.span_id == child.span_id:
        raise InvalidSpanReference(f"Span {child.span_id} cannot be its own parent")
    if parent.project_name != child.project_name:
        logger.debug(
            "Linking span %s to parent %s in project %r",
            child.span_id, parent.span_id, parent.project_name,
        )

    child.parent_ref = parent_ref
    child.span_parents = [parent.span_id]
    child.root_span_id = parent.root_span_id
    return parent
