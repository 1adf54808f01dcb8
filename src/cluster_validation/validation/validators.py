"""Field-level validators for identifiers, secrets, environments, volumes and resources.

Every validator is pure: it returns ``None`` when the message is valid and a
:class:`ValidationError` describing the first problem otherwise. Composite
validators stop at the first invalid member. A tag outside a closed
enumeration raises :class:`UnreachableError`.
"""

from __future__ import annotations

import unicodedata
from collections.abc import Iterable

from cluster_validation.constants import (
    DISALLOWED_IDS,
    NAME_MAX,
    POSIX_PATH_SEPARATOR,
    SCALAR_SCALE,
    WINDOWS_PATH_SEPARATOR,
)
from cluster_validation.domain.ids import ExecutorID, FrameworkID, SlaveID, TaskID
from cluster_validation.domain.models import (
    CommandInfo,
    ContainerInfo,
    Environment,
    Secret,
    SecretType,
    VariableType,
    Volume,
    VolumeSourceType,
)
from cluster_validation.domain.resources import Resource, Resources
from cluster_validation.validation.errors import ValidationError, unreachable

__all__ = [
    "validate_command_info",
    "validate_container_info",
    "validate_environment",
    "validate_executor_id",
    "validate_framework_id",
    "validate_gpus",
    "validate_id",
    "validate_secret",
    "validate_slave_id",
    "validate_task_id",
    "validate_volume",
]


def validate_id(id_str: str, *, name_max: int = NAME_MAX) -> ValidationError | None:
    """Check an identifier is usable as a single path component.

    Rules apply in order and the first failure wins: non-empty, at most
    ``name_max`` bytes of UTF-8, not ``.`` or ``..``, and free of control
    characters and of both ``/`` and ``\\``.
    """
    if not id_str:
        return ValidationError("ID must not be empty")

    if len(id_str.encode("utf-8", errors="surrogatepass")) > name_max:
        return ValidationError(f"ID must not be greater than {name_max} characters")

    if id_str in DISALLOWED_IDS:
        return ValidationError(f"'{id_str}' is disallowed")

    # IDs are likely mapped to directories, hence the separators.
    if any(_is_invalid_id_character(char) for char in id_str):
        return ValidationError(f"'{id_str}' contains invalid characters")

    return None


def _is_invalid_id_character(char: str) -> bool:
    return (
        unicodedata.category(char) == "Cc"
        or char == POSIX_PATH_SEPARATOR
        or char == WINDOWS_PATH_SEPARATOR
    )


# Typed wrappers apply the common rules to the wrapped value.


def validate_task_id(task_id: TaskID, *, name_max: int = NAME_MAX) -> ValidationError | None:
    return validate_id(task_id.value, name_max=name_max)


def validate_executor_id(
    executor_id: ExecutorID, *, name_max: int = NAME_MAX
) -> ValidationError | None:
    return validate_id(executor_id.value, name_max=name_max)


def validate_slave_id(slave_id: SlaveID, *, name_max: int = NAME_MAX) -> ValidationError | None:
    return validate_id(slave_id.value, name_max=name_max)


def validate_framework_id(
    framework_id: FrameworkID, *, name_max: int = NAME_MAX
) -> ValidationError | None:
    return validate_id(framework_id.value, name_max=name_max)


def validate_secret(secret: Secret) -> ValidationError | None:
    """Check the payload present matches the declared secret type.

    ``UNKNOWN`` secrets are accepted so that newer secret kinds pass through
    older validators.
    """
    if secret.type is SecretType.REFERENCE:
        if secret.reference is None:
            return ValidationError(
                "Secret of type REFERENCE must have the 'reference' field set"
            )
        if secret.value is not None:
            return ValidationError(
                f"Secret '{secret.reference.name}' of type REFERENCE "
                "must not have the 'value' field set"
            )
        return None

    if secret.type is SecretType.VALUE:
        if secret.value is None:
            return ValidationError("Secret of type VALUE must have the 'value' field set")
        if secret.reference is not None:
            return ValidationError(
                "Secret of type VALUE must not have the 'reference' field set"
            )
        return None

    if secret.type is SecretType.UNKNOWN:
        return None

    unreachable("secret type", secret.type)


def validate_environment(environment: Environment) -> ValidationError | None:
    for variable in environment.variables:
        name = variable.name

        if variable.type is VariableType.SECRET:
            if variable.secret is None:
                return ValidationError(
                    f"Environment variable '{name}' of type 'SECRET' must have a secret set"
                )
            if variable.value is not None:
                return ValidationError(
                    f"Environment variable '{name}' of type 'SECRET' must not have a value set"
                )

            error = validate_secret(variable.secret)
            if error is not None:
                return error.wrap(
                    f"Environment variable '{name}' specifies an invalid secret: "
                )

            # Process environments cannot carry embedded NULs.
            inline = variable.secret.value
            if inline is not None and b"\0" in inline.data:
                return ValidationError(
                    f"Environment variable '{name}' specifies a secret containing null "
                    "bytes, which is not allowed in the environment"
                )
            continue

        # Older readers see VALUE for variable types added after them, since
        # VALUE is the wire default.
        if variable.type is VariableType.VALUE:
            if variable.value is None:
                return ValidationError(
                    f"Environment variable '{name}' of type 'VALUE' must have a value set"
                )
            if variable.secret is not None:
                return ValidationError(
                    f"Environment variable '{name}' of type 'VALUE' must not have a secret set"
                )
            continue

        if variable.type is VariableType.UNKNOWN:
            return ValidationError("Environment variable of type 'UNKNOWN' is not allowed")

        unreachable("environment variable type", variable.type)

    return None


def validate_command_info(command: CommandInfo) -> ValidationError | None:
    """Validate a command. Only the environment is checked."""
    if command.environment is None:
        return None
    return validate_environment(command.environment)


def validate_volume(volume: Volume) -> ValidationError | None:
    # Path contents (host or container) are not validated here.
    mechanisms = (volume.host_path, volume.image, volume.source)
    if sum(1 for item in mechanisms if item is not None) != 1:
        return ValidationError(
            "Only one of them should be set: 'host_path', 'image' and 'source'"
        )

    source = volume.source
    if source is None:
        return None

    if source.type == VolumeSourceType.DOCKER_VOLUME:
        if source.docker_volume is None:
            return ValidationError(
                "'source.docker_volume' is not set for DOCKER_VOLUME volume"
            )
    elif source.type == VolumeSourceType.HOST_PATH:
        if source.host_path is None:
            return ValidationError("'source.host_path' is not set for HOST_PATH volume")
    elif source.type == VolumeSourceType.SANDBOX_PATH:
        if source.sandbox_path is None:
            return ValidationError("'source.sandbox_path' is not set for SANDBOX_PATH volume")
    elif source.type == VolumeSourceType.SECRET:
        if source.secret is None:
            return ValidationError("'source.secret' is not set for SECRET volume")
    else:
        # Open enumeration: unknown types arrive from documents.
        return ValidationError("'source.type' is unknown")

    return None


def validate_container_info(container: ContainerInfo) -> ValidationError | None:
    for volume in container.volumes:
        error = validate_volume(volume)
        if error is not None:
            return error.wrap("Invalid volume: ")
    return None


def validate_gpus(resources: Resources | Iterable[Resource]) -> ValidationError | None:
    """Reject a fractional ``gpus`` total.

    Scalar quantities carry three fractional digits, so scaling by
    ``SCALAR_SCALE`` and truncating exposes any fractional remainder.
    """
    collection = resources if isinstance(resources, Resources) else Resources(resources)
    gpus = collection.gpus()
    if gpus is None:
        gpus = 0.0
    if int(gpus * SCALAR_SCALE) % SCALAR_SCALE != 0:
        return ValidationError("The 'gpus' resource must be an unsigned integer")
    return None
