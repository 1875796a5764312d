# Copyright 2026 pdftrace Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the Attachment, Message and SpanRecord models."""

import json

import pytest
from pydantic import ValidationError

from pdftrace.models import Attachment, Message, SpanKind, SpanRecord


def _record(**overrides):
    fields = {"id": "row-1", "span_id": "span-1", "root_span_id": "span-1", "name": "root"}
    fields.update(overrides)
    return SpanRecord(**fields)


def test_attachment_is_immutable():
    """Test that an Attachment cannot be changed after construction."""
    attachment = Attachment(data=b"abc", filename="a.pdf", content_type="application/pdf")
    with pytest.raises(ValidationError):
        attachment.filename = "b.pdf"


def test_attachment_accepts_empty_data():
    """Test that zero-length payloads are accepted without complaint."""
    attachment = Attachment(data=b"", filename="empty.pdf", content_type="application/pdf")
    assert len(attachment) == 0


def test_attachment_keys_are_unique():
    a = Attachment(data=b"x", filename="a.pdf", content_type="application/pdf")
    b = Attachment(data=b"x", filename="a.pdf", content_type="application/pdf")
    assert a.key != b.key


def test_attachment_reference_has_no_bytes():
    attachment = Attachment(data=b"\xff\x00binary", filename="a.pdf", content_type="application/pdf")
    ref = attachment.reference()
    assert ref == {
        "type": "attachment",
        "filename": "a.pdf",
        "content_type": "application/pdf",
        "key": attachment.key,
    }


def test_message_content_text_or_attachment():
    attachment = Attachment(data=b"x", filename="a.pdf", content_type="application/pdf")
    assert Message(role="user", content="hi").content == "hi"
    assert Message(role="user", content=attachment).content is attachment


def test_record_is_root_without_parent():
    assert _record().is_root
    assert not _record(parent_ref="abc", span_parents=["p"]).is_root


def test_record_collects_attachments_from_input_and_metadata():
    in_input = Attachment(data=b"1", filename="in.pdf", content_type="application/pdf")
    in_meta = Attachment(data=b"2", filename="meta.pdf", content_type="application/pdf")
    record = _record(
        input=[Message(role="user", content="text"), Message(role="user", content=in_input)],
        metadata={"nested": {"files": [in_meta]}},
    )
    assert record.attachments() == [in_input, in_meta]


def test_record_export_dict_is_json_safe():
    """Test that non-UTF8 attachment bytes never reach the exported payload."""
    attachment = Attachment(data=b"\xff\xfe\x00", filename="a.pdf", content_type="application/pdf")
    record = _record(
        kind=SpanKind.LLM,
        input=[Message(role="user", content=attachment)],
        output="summary",
        metadata={"url": "https://example.com/a.pdf"},
    )
    exported = record.to_export_dict()
    json.dumps(exported)

    assert exported["kind"] == "llm"
    assert exported["input"] == [{"role": "user", "content": attachment.reference()}]
    assert exported["output"] == "summary"
    assert exported["metadata"] == {"url": "https://example.com/a.pdf"}
