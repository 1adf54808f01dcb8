"""
cluster-validation: unit tests for message models

File: tests/unit/domain/test_models.py
Last updated: 2026-10-18

Purpose
- Validate strict document parsing and canonical serialization of message models.

What this test file should cover
- Wire defaults (secret type, variable type, volume source type).
- Base64 and raw-bytes secret payloads.
- Open volume source type vs closed enums.
- Dotted-path parse errors for malformed documents.
"""

from __future__ import annotations

import base64

import pytest

from cluster_validation.domain.base import MessageParseError
from cluster_validation.domain.models import (
    CommandInfo,
    ContainerInfo,
    ContainerType,
    Environment,
    Image,
    SandboxPathType,
    Secret,
    SecretReference,
    SecretType,
    SecretValue,
    Variable,
    VariableType,
    Volume,
    VolumeMode,
    VolumeSource,
    VolumeSourceType,
    parse_identifier,
)


def test_secret_type_defaults_to_unknown_when_absent() -> None:
    assert Secret.from_dict({}).type is SecretType.UNKNOWN


def test_secret_value_accepts_base64_and_raw_bytes() -> None:
    encoded = base64.b64encode(b"s3cr\x00t").decode("ascii")

    from_json = Secret.from_dict({"type": "VALUE", "value": {"data": encoded}})
    from_yaml = Secret.from_dict({"type": "VALUE", "value": {"data": b"s3cr\x00t"}})

    assert from_json == from_yaml
    assert from_json.value is not None
    assert from_json.value.data == b"s3cr\x00t"
    assert from_json.to_dict() == {"type": "VALUE", "value": {"data": encoded}}


def test_secret_value_rejects_invalid_base64() -> None:
    with pytest.raises(MessageParseError, match=r"Secret\.value\.data: invalid base64"):
        Secret.from_dict({"type": "VALUE", "value": {"data": "not base64!"}})


def test_secret_value_repr_hides_payload() -> None:
    rendered = repr(SecretValue(data=b"hunter2"))
    assert "hunter2" not in rendered
    assert "7 bytes" in rendered


def test_secret_reference_round_trip_omits_unset_key() -> None:
    secret = Secret(type=SecretType.REFERENCE, reference=SecretReference(name="db"))
    assert secret.to_dict() == {"type": "REFERENCE", "reference": {"name": "db"}}
    assert Secret.from_json(secret.to_json()) == secret


def test_secret_rejects_unknown_type_name_at_parse_time() -> None:
    with pytest.raises(MessageParseError, match=r"Secret\.type: invalid value 'FILE'"):
        Secret.from_dict({"type": "FILE"})


def test_closed_enum_outside_members_survives_direct_construction() -> None:
    secret = Secret(type="FILE")  # type: ignore[arg-type]
    variable = Variable(name="X", type="BOGUS")  # type: ignore[arg-type]

    assert secret.type == "FILE"
    assert variable.type == "BOGUS"


def test_wire_names_are_coerced_to_enum_members_on_construction() -> None:
    secret = Secret(type="REFERENCE")  # type: ignore[arg-type]
    assert secret.type is SecretType.REFERENCE


def test_variable_type_defaults_to_value() -> None:
    variable = Variable.from_dict({"name": "PATH", "value": "/bin"})
    assert variable.type is VariableType.VALUE
    assert Variable(name="PATH").type is VariableType.VALUE


def test_environment_parses_nested_secret_variables_with_paths() -> None:
    environment = Environment.from_dict(
        {
            "variables": [
                {"name": "A", "value": "1"},
                {
                    "name": "B",
                    "type": "SECRET",
                    "secret": {"type": "REFERENCE", "reference": {"name": "b"}},
                },
            ]
        }
    )
    assert [item.name for item in environment.variables] == ["A", "B"]
    assert environment.variables[1].secret is not None

    with pytest.raises(MessageParseError, match=r"Environment\.variables\[1\]\.name"):
        Environment.from_dict({"variables": [{"name": "A"}, {"name": 3}]})


def test_null_fields_are_treated_as_absent() -> None:
    variable = Variable.from_dict({"name": "A", "value": "1", "secret": None})
    assert variable.secret is None


def test_command_info_parses_optional_environment() -> None:
    bare = CommandInfo.from_dict({"value": "echo hi", "shell": True})
    assert bare.environment is None
    assert bare.arguments == ()

    full = CommandInfo.from_dict(
        {
            "value": "/bin/run",
            "shell": False,
            "arguments": ["/bin/run", "--fast"],
            "user": "nobody",
            "environment": {"variables": [{"name": "A", "value": "1"}]},
        }
    )
    assert full.arguments == ("/bin/run", "--fast")
    assert full.environment is not None

    with pytest.raises(MessageParseError, match=r"CommandInfo\.shell: expected boolean"):
        CommandInfo.from_dict({"shell": "yes"})


def test_volume_source_keeps_unknown_type_strings() -> None:
    source = VolumeSource.from_dict({"type": "CSI_VOLUME"})
    assert source.type == "CSI_VOLUME"
    assert not isinstance(source.type, VolumeSourceType)

    known = VolumeSource.from_dict({"type": "SANDBOX_PATH", "sandbox_path": {"path": "d"}})
    assert known.type is VolumeSourceType.SANDBOX_PATH


def test_volume_source_type_defaults_to_unknown() -> None:
    assert VolumeSource.from_dict({}).type is VolumeSourceType.UNKNOWN


def test_volume_parses_every_mechanism() -> None:
    volume = Volume.from_dict(
        {
            "container_path": "/data",
            "mode": "RO",
            "host_path": "/srv/data",
            "image": {"type": "DOCKER", "name": "busybox"},
            "source": {
                "type": "SANDBOX_PATH",
                "sandbox_path": {"type": "PARENT", "path": "shared"},
            },
        }
    )
    assert volume.mode is VolumeMode.RO
    assert volume.image == Image(type="DOCKER", name="busybox")
    assert volume.source is not None
    assert volume.source.sandbox_path is not None
    assert volume.source.sandbox_path.type is SandboxPathType.PARENT


def test_volume_requires_container_path() -> None:
    with pytest.raises(MessageParseError, match="missing required fields: \\['container_path'\\]"):
        Volume.from_dict({"host_path": "/srv"})


def test_container_info_round_trips_through_json() -> None:
    container = ContainerInfo(
        type=ContainerType.MESOS,
        hostname="box",
        volumes=(Volume(container_path="/a", host_path="/b"),),
    )
    assert ContainerInfo.from_json(container.to_json()) == container
    assert container.to_dict()["volumes"] == [{"container_path": "/a", "host_path": "/b"}]


def test_container_info_reports_bad_volume_path() -> None:
    with pytest.raises(MessageParseError, match=r"ContainerInfo\.volumes\[0\]\.mode"):
        ContainerInfo.from_dict({"volumes": [{"container_path": "/a", "mode": "RX"}]})


def test_parse_identifier_accepts_bare_string_and_wrapper() -> None:
    assert parse_identifier("abc") == "abc"
    assert parse_identifier({"value": "abc"}) == "abc"

    with pytest.raises(MessageParseError, match="id: expected string or object"):
        parse_identifier(12)


def test_from_json_rejects_invalid_json() -> None:
    with pytest.raises(MessageParseError, match="Volume: invalid JSON"):
        Volume.from_json("{not json")
