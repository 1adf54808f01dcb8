"""Unit tests for typed identifier wrappers."""

from __future__ import annotations

import pytest

from cluster_validation.domain.base import MessageParseError
from cluster_validation.domain.ids import ExecutorID, FrameworkID, SlaveID, TaskID

_ID_TYPES = (TaskID, ExecutorID, SlaveID, FrameworkID)


@pytest.mark.parametrize("id_type", _ID_TYPES)
def test_typed_id_parses_value_wrapper_and_round_trips(id_type: type[TaskID]) -> None:
    parsed = id_type.from_dict({"value": "task-1"})

    assert parsed.value == "task-1"
    assert str(parsed) == "task-1"
    assert parsed.to_dict() == {"value": "task-1"}
    assert id_type.from_json(parsed.to_json()) == parsed


@pytest.mark.parametrize("id_type", _ID_TYPES)
def test_typed_id_keeps_empty_and_unsafe_values_for_validation(id_type: type[TaskID]) -> None:
    # Parsing never judges content; the validators do.
    assert id_type.from_dict({"value": ""}).value == ""
    assert id_type.from_dict({"value": "a/b"}).value == "a/b"


@pytest.mark.parametrize("id_type", _ID_TYPES)
def test_typed_id_parses_values_past_the_text_limit(id_type: type[TaskID]) -> None:
    # Length is judged by validate_id, not by the parser.
    assert len(id_type.from_dict({"value": "a" * 70000}).value) == 70000


def test_typed_id_rejects_malformed_documents() -> None:
    with pytest.raises(MessageParseError, match="TaskID: missing required fields"):
        TaskID.from_dict({})

    with pytest.raises(MessageParseError, match="unexpected fields"):
        SlaveID.from_dict({"value": "s1", "extra": 1})

    with pytest.raises(MessageParseError, match=r"FrameworkID\.value: expected string"):
        FrameworkID.from_dict({"value": 7})

    with pytest.raises(MessageParseError, match="expected object"):
        ExecutorID.from_dict("exec-1")


def test_typed_id_constructor_checks_python_type() -> None:
    with pytest.raises(TypeError, match="TaskID.value"):
        TaskID(value=42)  # type: ignore[arg-type]


def test_typed_ids_of_different_kinds_are_distinct_types() -> None:
    assert TaskID("x") != SlaveID("x")
    assert TaskID("x") == TaskID("x")
    assert hash(TaskID("x")) == hash(TaskID("x"))
