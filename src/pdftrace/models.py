# Copyright 2026 pdftrace Contributors
# SPDX-License-Identifier: Apache-2.0

"""Pydantic v2 data models for pdftrace spans and attachments.

These models define the shapes handed to the trace sink. The live, mutable
span lives in `pdftrace.span`; on `end()` it is frozen into a `SpanRecord`.
"""

from __future__ import annotations

import base64
import enum
import uuid
from typing import Any, Iterator

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class SpanKind(str, enum.Enum):
    """Category tag of a span. Root spans usually leave it unset."""

    LLM = "llm"
    TASK = "task"
    FUNCTION = "function"
    TOOL = "tool"
    EVAL = "eval"
    SCORE = "score"


class Attachment(BaseModel):
    """An immutable bundle of raw bytes, a logical filename and a MIME type.

    The attachment owns its bytes; the file it was read from may be discarded
    afterwards. Empty payloads are accepted.
    """

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(repr=False)
    filename: str
    content_type: str
    key: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        description="Storage key assigned by the client; the backend stores the blob under it",
    )

    @field_serializer("data", when_used="json")
    def _serialize_data(self, data: bytes) -> str:
        return base64.b64encode(data).decode("ascii")

    def reference(self) -> dict[str, str]:
        """JSON-safe reference that replaces the bytes in exported records."""
        return {
            "type": "attachment",
            "filename": self.filename,
            "content_type": self.content_type,
            "key": self.key,
        }

    def __len__(self) -> int:
        return len(self.data)


class Message(BaseModel):
    """A role-tagged input item. Content is plain text or an Attachment."""

    role: str
    content: str | Attachment


class SpanRecord(BaseModel):
    """Immutable snapshot of a finished span, as handed to the trace sink.

    A record belongs to exactly one trace (`root_span_id`). Children carry the
    exported identifier of their parent in `parent_ref` and the parent's
    span_id in `span_parents`.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Row identifier of this record in the backend")
    span_id: str
    root_span_id: str
    span_parents: list[str] = Field(default_factory=list)
    parent_ref: str | None = Field(
        default=None,
        description="Exported identifier of the parent span; None for root spans",
    )
    project_name: str = ""
    name: str
    kind: SpanKind | None = None
    input: list[Message] | None = None
    output: Any = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    error: str | None = None
    start_time: int = Field(default=0, description="Wall-clock start in ns since epoch")
    end_time: int = Field(default=0, description="Wall-clock end in ns since epoch")
    duration_ms: int = 0

    @property
    def is_root(self) -> bool:
        return self.parent_ref is None

    def attachments(self) -> list[Attachment]:
        """Every Attachment embedded in input, output or metadata."""
        return list(_walk_attachments([self.input, self.output, self.metadata]))

    def to_export_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-safe dict, attachments replaced by references."""
        payload = self.model_dump(mode="json", exclude={"input", "output", "metadata"})
        payload["input"] = _export_value(self.input)
        payload["output"] = _export_value(self.output)
        payload["metadata"] = _export_value(self.metadata)
        return payload


def _export_value(value: Any) -> Any:
    if isinstance(value, Attachment):
        return value.reference()
    if isinstance(value, Message):
        return {"role": value.role, "content": _export_value(value.content)}
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, dict):
        return {str(k): _export_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_export_value(v) for v in value]
    if isinstance(value, bytes):
        return base64.b64encode(value).decode("ascii")
    return value


def _walk_attachments(value: Any) -> Iterator[Attachment]:
    if isinstance(value, Attachment):
        yield value
    elif isinstance(value, Message):
        yield from _walk_attachments(value.content)
    elif isinstance(value, dict):
        for v in value.values():
            yield from _walk_attachments(v)
    elif isinstance(value, (list, tuple)):
        for v in value:
            yield from _walk_attachments(v)
