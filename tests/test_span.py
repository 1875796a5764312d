# Copyright 2026 pdftrace Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for Tracer and Span."""

import pytest
from pydantic import ValidationError

from pdftrace.linker import SpanComponents
from pdftrace.models import Attachment, Message, SpanKind
from pdftrace.span import Span
from pdftrace.tracer import Tracer


def test_span_creation(tracer):
    """Test that a new span is empty and is the root of its own trace."""
    span = tracer.start_span("report.pdf")

    assert span.name == "report.pdf"
    assert span.project_name == "test-project"
    assert span.kind is None
    assert span.parent_ref is None
    assert span.root_span_id == span.span_id
    assert span.input is None
    assert span.output is None
    assert span.metadata == {}
    assert not span.is_ended


def test_set_attributes_last_write_wins(tracer):
    span = tracer.start_span("first")
    span.set_attributes(name="second", type="task")
    span.set_attributes(name="third")
    span.set_attributes(type=SpanKind.LLM)

    assert span.name == "third"
    assert span.kind is SpanKind.LLM


def test_set_attributes_rejects_unknown_kind(tracer):
    with pytest.raises(ValueError):
        tracer.start_span("x").set_attributes(type="banana")


def test_log_merges_disjoint_metadata(tracer):
    span = tracer.start_span("s")
    span.log(metadata={"a": 1})
    span.log(metadata={"b": 2})
    assert span.metadata == {"a": 1, "b": 2}


def test_log_later_metadata_wins(tracer):
    span = tracer.start_span("s")
    span.log(metadata={"a": 1, "keep": True})
    span.log(metadata={"a": 2})
    assert span.metadata == {"a": 2, "keep": True}


def test_log_overwrites_input_and_output(tracer):
    span = tracer.start_span("s")
    span.log(input=[{"role": "user", "content": "first"}], output="one")
    span.log(input=[{"role": "system", "content": "second"}])
    span.log(output="two")

    assert span.input == [Message(role="system", content="second")]
    assert span.output == "two"


def test_log_validates_input_items(tracer):
    with pytest.raises(ValidationError):
        tracer.start_span("s").log(input=[{"content": "missing role"}])


def test_log_accepts_empty_attachment(tracer):
    attachment = Attachment(data=b"", filename="empty.pdf", content_type="application/pdf")
    span = tracer.start_span("s")
    span.log(input=[{"role": "user", "content": attachment}])
    assert span.input[0].content is attachment


def test_log_after_end_is_ignored(tracer):
    span = tracer.start_span("s")
    span.end()
    span.log(output="late")
    span.set_attributes(name="renamed")
    assert span.output is None
    assert span.name == "s"


@pytest.mark.asyncio
async def test_export_identifiers_are_unique(tracer):
    spans = [tracer.start_span(f"s.{i}") for i in range(50)]
    refs = [await s.export() for s in spans]
    assert len(set(refs)) == len(refs)


@pytest.mark.asyncio
async def test_export_is_stable_and_decodable(tracer):
    span = tracer.start_span("s")
    first = await span.export()
    assert await span.export() == first

    components = SpanComponents.from_str(first)
    assert components.row_id == span.id
    assert components.span_id == span.span_id
    assert components.project_name == "test-project"


@pytest.mark.asyncio
async def test_child_created_after_parent_export(tracer):
    root = tracer.start_span("root")
    parent_ref = await root.export()
    child = tracer.start_span("child", parent=parent_ref)

    assert root.exported_seq < child.created_seq
    assert child.parent_ref == parent_ref


def test_end_is_idempotent(tracer, exporter):
    span = tracer.start_span("s")
    span.end()
    span.end()
    tracer.flush()
    assert len(exporter.records) == 1


def test_end_hands_record_to_processor(tracer, exporter):
    span = tracer.start_span("s", type="llm")
    span.log(output="done", metadata={"k": "v"})
    span.end()
    tracer.flush()

    (record,) = exporter.records
    assert record.id == span.id
    assert record.kind is SpanKind.LLM
    assert record.output == "done"
    assert record.metadata == {"k": "v"}
    assert record.end_time >= record.start_time
    assert record.duration_ms >= 0


def test_record_is_a_snapshot(tracer):
    span = tracer.start_span("s")
    span.log(metadata={"a": 1})
    record = span.to_model()
    span.log(metadata={"a": 2})
    assert record.metadata == {"a": 1}


def test_context_manager_ends_and_records_error(tracer, exporter):
    with pytest.raises(RuntimeError):
        with tracer.start_span("boom") as span:
            raise RuntimeError("failed")

    assert span.is_ended
    tracer.flush()
    assert exporter.records[0].error == "RuntimeError: failed"


def test_disabled_tracer_does_not_export():
    tracer = Tracer("p", processor=None)
    span = tracer.start_span("s")
    span.end()
    assert not tracer.is_enabled
    assert span.is_ended


def test_span_without_tracer_can_end():
    span = Span("standalone")
    span.end()
    assert span.is_ended
