"""Unit tests for the message kind registry."""

from __future__ import annotations

import base64

import pytest

from cluster_validation.domain.base import MessageParseError
from cluster_validation.validation import (
    MESSAGE_KINDS,
    UnknownKindError,
    ValidationError,
    validate_message,
)


def test_registry_lists_every_message_kind() -> None:
    assert sorted(MESSAGE_KINDS) == [
        "command_info",
        "container_info",
        "environment",
        "executor_id",
        "framework_id",
        "id",
        "resources",
        "secret",
        "slave_id",
        "task_id",
        "volume",
    ]
    assert all(kind.description for kind in MESSAGE_KINDS.values())


def test_registry_is_read_only() -> None:
    with pytest.raises(TypeError):
        MESSAGE_KINDS["extra"] = MESSAGE_KINDS["id"]  # type: ignore[index]


@pytest.mark.parametrize(
    ("kind", "payload"),
    [
        ("id", "my-task_1"),
        ("id", {"value": "my-task_1"}),
        ("task_id", {"value": "t1"}),
        ("executor_id", {"value": "e1"}),
        ("slave_id", {"value": "s1"}),
        ("framework_id", {"value": "f1"}),
        ("secret", {"type": "REFERENCE", "reference": {"name": "db"}}),
        ("environment", {"variables": [{"name": "A", "value": "1"}]}),
        ("command_info", {"value": "true"}),
        ("volume", {"container_path": "/data", "host_path": "/srv"}),
        ("container_info", {"type": "MESOS", "volumes": []}),
        ("resources", [{"name": "gpus", "type": "SCALAR", "scalar": {"value": 3}}]),
    ],
)
def test_valid_payloads_pass(kind: str, payload: object) -> None:
    assert validate_message(kind, payload) is None


def test_invalid_payload_returns_error_value() -> None:
    error = validate_message(
        "environment",
        {
            "variables": [
                {
                    "name": "X",
                    "type": "SECRET",
                    "value": "literal",
                    "secret": {"type": "REFERENCE", "reference": {"name": "x"}},
                }
            ]
        },
    )
    assert error == ValidationError(
        "Environment variable 'X' of type 'SECRET' must not have a value set"
    )


def test_inline_secret_bytes_are_decoded_from_base64() -> None:
    data = base64.b64encode(b"a\x00b").decode("ascii")
    error = validate_message(
        "environment",
        {
            "variables": [
                {
                    "name": "TOKEN",
                    "type": "SECRET",
                    "secret": {"type": "VALUE", "value": {"data": data}},
                }
            ]
        },
    )
    assert error is not None
    assert "null bytes" in error.message


def test_name_max_is_forwarded_to_identifier_kinds() -> None:
    assert validate_message("task_id", {"value": "abcde"}, name_max=4) == ValidationError(
        "ID must not be greater than 4 characters"
    )
    assert validate_message("id", "abcd", name_max=4) is None


@pytest.mark.parametrize("kind", ["task_id", "executor_id", "slave_id", "framework_id", "id"])
def test_very_long_identifier_reaches_the_length_rule(kind: str) -> None:
    assert validate_message(kind, {"value": "a" * 70000}) == ValidationError(
        "ID must not be greater than 255 characters"
    )


def test_fractional_gpu_resources_are_rejected() -> None:
    error = validate_message(
        "resources",
        [
            {"name": "gpus", "type": "SCALAR", "scalar": 1.5},
            {"name": "gpus", "type": "SCALAR", "scalar": 1.0},
        ],
    )
    assert error == ValidationError("The 'gpus' resource must be an unsigned integer")


def test_unknown_kind_lists_alternatives() -> None:
    with pytest.raises(UnknownKindError, match="unknown message kind 'agent'; expected one of:"):
        validate_message("agent", {})


def test_malformed_payload_raises_parse_error() -> None:
    with pytest.raises(MessageParseError, match="Volume: expected object"):
        validate_message("volume", ["not", "an", "object"])
