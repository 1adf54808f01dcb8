"""Public validation API: pure validators, error values and the kind registry."""

from cluster_validation.validation.errors import (
    InvalidMessageError,
    UnreachableError,
    ValidationError,
    assert_valid,
)
from cluster_validation.validation.registry import (
    MESSAGE_KINDS,
    MessageKind,
    UnknownKindError,
    validate_message,
)
from cluster_validation.validation.validators import (
    validate_command_info,
    validate_container_info,
    validate_environment,
    validate_executor_id,
    validate_framework_id,
    validate_gpus,
    validate_id,
    validate_secret,
    validate_slave_id,
    validate_task_id,
    validate_volume,
)

__all__ = [
    "InvalidMessageError",
    "MESSAGE_KINDS",
    "MessageKind",
    "UnknownKindError",
    "UnreachableError",
    "ValidationError",
    "assert_valid",
    "validate_command_info",
    "validate_container_info",
    "validate_environment",
    "validate_executor_id",
    "validate_framework_id",
    "validate_gpus",
    "validate_id",
    "validate_message",
    "validate_secret",
    "validate_slave_id",
    "validate_task_id",
    "validate_volume",
]
