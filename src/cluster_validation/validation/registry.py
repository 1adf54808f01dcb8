"""Kind registry: decode a document payload and run the matching validator."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Final

from cluster_validation.constants import NAME_MAX
from cluster_validation.domain.ids import ExecutorID, FrameworkID, SlaveID, TaskID
from cluster_validation.domain.models import (
    CommandInfo,
    ContainerInfo,
    Environment,
    Secret,
    Volume,
    parse_identifier,
)
from cluster_validation.domain.resources import Resources
from cluster_validation.validation import validators
from cluster_validation.validation.errors import ValidationError

__all__ = [
    "MESSAGE_KINDS",
    "MessageKind",
    "UnknownKindError",
    "validate_message",
]


class UnknownKindError(LookupError):
    """Raised when no message kind is registered under the requested name."""


@dataclass(frozen=True, slots=True)
class MessageKind:
    name: str
    description: str
    parse: Callable[[object], object]
    validate: Callable[[object, int], ValidationError | None]


def _id_kind(
    name: str,
    description: str,
    parse: Callable[[object], object],
    validate: Callable[..., ValidationError | None],
) -> MessageKind:
    return MessageKind(
        name=name,
        description=description,
        parse=parse,
        validate=lambda message, name_max: validate(message, name_max=name_max),
    )


def _plain_kind(
    name: str,
    description: str,
    parse: Callable[[object], object],
    validate: Callable[..., ValidationError | None],
) -> MessageKind:
    return MessageKind(
        name=name,
        description=description,
        parse=parse,
        validate=lambda message, _name_max: validate(message),
    )


_KINDS: tuple[MessageKind, ...] = (
    _id_kind("id", "bare identifier string", parse_identifier, validators.validate_id),
    _id_kind("task_id", "TaskID", TaskID.from_dict, validators.validate_task_id),
    _id_kind("executor_id", "ExecutorID", ExecutorID.from_dict, validators.validate_executor_id),
    _id_kind("slave_id", "SlaveID (agent)", SlaveID.from_dict, validators.validate_slave_id),
    _id_kind(
        "framework_id", "FrameworkID", FrameworkID.from_dict, validators.validate_framework_id
    ),
    _plain_kind("secret", "Secret", Secret.from_dict, validators.validate_secret),
    _plain_kind(
        "environment", "Environment", Environment.from_dict, validators.validate_environment
    ),
    _plain_kind(
        "command_info", "CommandInfo", CommandInfo.from_dict, validators.validate_command_info
    ),
    _plain_kind("volume", "Volume", Volume.from_dict, validators.validate_volume),
    _plain_kind(
        "container_info",
        "ContainerInfo",
        ContainerInfo.from_dict,
        validators.validate_container_info,
    ),
    _plain_kind(
        "resources", "list of Resource entries", Resources.from_list, validators.validate_gpus
    ),
)

MESSAGE_KINDS: Final[Mapping[str, MessageKind]] = MappingProxyType(
    {kind.name: kind for kind in _KINDS}
)


def validate_message(
    kind: str, payload: object, *, name_max: int = NAME_MAX
) -> ValidationError | None:
    """Materialize ``payload`` as a ``kind`` message and validate it.

    Raises ``UnknownKindError`` for an unregistered kind and
    ``MessageParseError`` when the payload does not describe that message.
    """
    try:
        selected = MESSAGE_KINDS[kind]
    except KeyError:
        allowed = ", ".join(sorted(MESSAGE_KINDS))
        raise UnknownKindError(
            f"unknown message kind {kind!r}; expected one of: {allowed}"
        ) from None
    message = selected.parse(payload)
    return selected.validate(message, name_max)
