"""Frozen message models for secrets, environments, commands, volumes and containers.

Mutually exclusive payloads are modelled as independent optional fields, the
way the wire messages encode them. Constructors only check Python types, so a
message that breaks the variant rules can still be built and handed to
:mod:`cluster_validation.validation`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from cluster_validation.domain.base import (
    CanonicalModel,
    as_bool,
    as_bytes,
    as_enum,
    as_optional_str,
    as_sequence,
    as_str,
    check_instance,
    check_optional_instance,
    coerce_enum,
    expect_object,
    fail,
)


class SecretType(StrEnum):
    UNKNOWN = "UNKNOWN"
    REFERENCE = "REFERENCE"
    VALUE = "VALUE"


class VariableType(StrEnum):
    UNKNOWN = "UNKNOWN"
    VALUE = "VALUE"
    SECRET = "SECRET"


class VolumeMode(StrEnum):
    RW = "RW"
    RO = "RO"


class VolumeSourceType(StrEnum):
    UNKNOWN = "UNKNOWN"
    DOCKER_VOLUME = "DOCKER_VOLUME"
    HOST_PATH = "HOST_PATH"
    SANDBOX_PATH = "SANDBOX_PATH"
    SECRET = "SECRET"


class SandboxPathType(StrEnum):
    UNKNOWN = "UNKNOWN"
    SELF = "SELF"
    PARENT = "PARENT"


class ContainerType(StrEnum):
    DOCKER = "DOCKER"
    MESOS = "MESOS"


# ---------------------------------------------------------------------------
# Secret
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SecretReference(CanonicalModel):
    name: str
    key: str | None = None

    def __post_init__(self) -> None:
        check_instance(self.name, str, "SecretReference.name")
        check_optional_instance(self.key, str, "SecretReference.key")

    @classmethod
    def from_dict(cls, data: object, path: str = "SecretReference") -> SecretReference:
        parsed = expect_object(data, path, required={"name"}, optional={"key"})
        return cls(
            name=as_str(parsed["name"], f"{path}.name"),
            key=as_optional_str(parsed.get("key"), f"{path}.key"),
        )


@dataclass(frozen=True, slots=True)
class SecretValue(CanonicalModel):
    data: bytes

    def __post_init__(self) -> None:
        if isinstance(self.data, (bytearray, memoryview)):
            object.__setattr__(self, "data", bytes(self.data))
        check_instance(self.data, bytes, "SecretValue.data")

    def __repr__(self) -> str:
        return f"SecretValue(data=<{len(self.data)} bytes>)"

    @classmethod
    def from_dict(cls, data: object, path: str = "SecretValue") -> SecretValue:
        parsed = expect_object(data, path, required={"data"})
        return cls(data=as_bytes(parsed["data"], f"{path}.data"))


@dataclass(frozen=True, slots=True)
class Secret(CanonicalModel):
    """Either a reference to secret material or the inline secret bytes."""

    type: SecretType
    reference: SecretReference | None = None
    value: SecretValue | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", coerce_enum(SecretType, self.type))
        check_optional_instance(self.reference, SecretReference, "Secret.reference")
        check_optional_instance(self.value, SecretValue, "Secret.value")

    @classmethod
    def from_dict(cls, data: object, path: str = "Secret") -> Secret:
        parsed = expect_object(data, path, optional={"type", "reference", "value"})
        reference = parsed.get("reference")
        value = parsed.get("value")
        return cls(
            type=as_enum(SecretType, parsed.get("type", SecretType.UNKNOWN), f"{path}.type"),
            reference=(
                None
                if reference is None
                else SecretReference.from_dict(reference, f"{path}.reference")
            ),
            value=None if value is None else SecretValue.from_dict(value, f"{path}.value"),
        )


# ---------------------------------------------------------------------------
# Environment / CommandInfo
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Variable(CanonicalModel):
    """A single environment variable; ``type`` defaults to ``VALUE`` as on the wire."""

    name: str
    type: VariableType = VariableType.VALUE
    value: str | None = None
    secret: Secret | None = None

    def __post_init__(self) -> None:
        check_instance(self.name, str, "Variable.name")
        object.__setattr__(self, "type", coerce_enum(VariableType, self.type))
        check_optional_instance(self.value, str, "Variable.value")
        check_optional_instance(self.secret, Secret, "Variable.secret")

    @classmethod
    def from_dict(cls, data: object, path: str = "Variable") -> Variable:
        parsed = expect_object(data, path, required={"name"}, optional={"type", "value", "secret"})
        secret = parsed.get("secret")
        return cls(
            name=as_str(parsed["name"], f"{path}.name"),
            type=as_enum(VariableType, parsed.get("type", VariableType.VALUE), f"{path}.type"),
            value=as_optional_str(parsed.get("value"), f"{path}.value"),
            secret=None if secret is None else Secret.from_dict(secret, f"{path}.secret"),
        )


@dataclass(frozen=True, slots=True)
class Environment(CanonicalModel):
    variables: tuple[Variable, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "variables", tuple(self.variables))
        for index, variable in enumerate(self.variables):
            check_instance(variable, Variable, f"Environment.variables[{index}]")

    @classmethod
    def from_dict(cls, data: object, path: str = "Environment") -> Environment:
        parsed = expect_object(data, path, optional={"variables"})
        items = as_sequence(parsed.get("variables", ()), f"{path}.variables")
        return cls(
            variables=tuple(
                Variable.from_dict(item, f"{path}.variables[{index}]")
                for index, item in enumerate(items)
            )
        )


@dataclass(frozen=True, slots=True)
class CommandInfo(CanonicalModel):
    """Command to launch. Only ``environment`` is subject to validation."""

    value: str | None = None
    shell: bool | None = None
    arguments: tuple[str, ...] = ()
    user: str | None = None
    environment: Environment | None = None

    def __post_init__(self) -> None:
        check_optional_instance(self.value, str, "CommandInfo.value")
        check_optional_instance(self.shell, bool, "CommandInfo.shell")
        object.__setattr__(self, "arguments", tuple(self.arguments))
        for index, argument in enumerate(self.arguments):
            check_instance(argument, str, f"CommandInfo.arguments[{index}]")
        check_optional_instance(self.user, str, "CommandInfo.user")
        check_optional_instance(self.environment, Environment, "CommandInfo.environment")

    @classmethod
    def from_dict(cls, data: object, path: str = "CommandInfo") -> CommandInfo:
        parsed = expect_object(
            data, path, optional={"value", "shell", "arguments", "user", "environment"}
        )
        shell = parsed.get("shell")
        environment = parsed.get("environment")
        arguments = as_sequence(parsed.get("arguments", ()), f"{path}.arguments")
        return cls(
            value=as_optional_str(parsed.get("value"), f"{path}.value"),
            shell=None if shell is None else as_bool(shell, f"{path}.shell"),
            arguments=tuple(
                as_str(item, f"{path}.arguments[{index}]") for index, item in enumerate(arguments)
            ),
            user=as_optional_str(parsed.get("user"), f"{path}.user"),
            environment=(
                None
                if environment is None
                else Environment.from_dict(environment, f"{path}.environment")
            ),
        )


# ---------------------------------------------------------------------------
# Volume / ContainerInfo
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DockerVolume(CanonicalModel):
    name: str
    driver: str | None = None

    def __post_init__(self) -> None:
        check_instance(self.name, str, "DockerVolume.name")
        check_optional_instance(self.driver, str, "DockerVolume.driver")

    @classmethod
    def from_dict(cls, data: object, path: str = "DockerVolume") -> DockerVolume:
        parsed = expect_object(data, path, required={"name"}, optional={"driver"})
        return cls(
            name=as_str(parsed["name"], f"{path}.name"),
            driver=as_optional_str(parsed.get("driver"), f"{path}.driver"),
        )


@dataclass(frozen=True, slots=True)
class HostPath(CanonicalModel):
    path: str

    def __post_init__(self) -> None:
        check_instance(self.path, str, "HostPath.path")

    @classmethod
    def from_dict(cls, data: object, path: str = "HostPath") -> HostPath:
        parsed = expect_object(data, path, required={"path"})
        return cls(path=as_str(parsed["path"], f"{path}.path"))


@dataclass(frozen=True, slots=True)
class SandboxPath(CanonicalModel):
    path: str
    type: SandboxPathType | None = None

    def __post_init__(self) -> None:
        check_instance(self.path, str, "SandboxPath.path")
        if self.type is not None:
            object.__setattr__(self, "type", coerce_enum(SandboxPathType, self.type))

    @classmethod
    def from_dict(cls, data: object, path: str = "SandboxPath") -> SandboxPath:
        parsed = expect_object(data, path, required={"path"}, optional={"type"})
        raw_type = parsed.get("type")
        return cls(
            path=as_str(parsed["path"], f"{path}.path"),
            type=None if raw_type is None else as_enum(SandboxPathType, raw_type, f"{path}.type"),
        )


@dataclass(frozen=True, slots=True)
class VolumeSource(CanonicalModel):
    """Typed volume source.

    ``type`` is an open enumeration: a type string this release does not know
    is kept verbatim and reported by validation rather than by parsing.
    """

    type: VolumeSourceType | str = VolumeSourceType.UNKNOWN
    docker_volume: DockerVolume | None = None
    host_path: HostPath | None = None
    sandbox_path: SandboxPath | None = None
    secret: Secret | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", coerce_enum(VolumeSourceType, self.type))
        check_instance(self.type, str, "VolumeSource.type")
        check_optional_instance(self.docker_volume, DockerVolume, "VolumeSource.docker_volume")
        check_optional_instance(self.host_path, HostPath, "VolumeSource.host_path")
        check_optional_instance(self.sandbox_path, SandboxPath, "VolumeSource.sandbox_path")
        check_optional_instance(self.secret, Secret, "VolumeSource.secret")

    @classmethod
    def from_dict(cls, data: object, path: str = "VolumeSource") -> VolumeSource:
        parsed = expect_object(
            data,
            path,
            optional={"type", "docker_volume", "host_path", "sandbox_path", "secret"},
        )
        docker_volume = parsed.get("docker_volume")
        host_path = parsed.get("host_path")
        sandbox_path = parsed.get("sandbox_path")
        secret = parsed.get("secret")
        return cls(
            type=as_str(parsed.get("type", VolumeSourceType.UNKNOWN), f"{path}.type"),
            docker_volume=(
                None
                if docker_volume is None
                else DockerVolume.from_dict(docker_volume, f"{path}.docker_volume")
            ),
            host_path=(
                None if host_path is None else HostPath.from_dict(host_path, f"{path}.host_path")
            ),
            sandbox_path=(
                None
                if sandbox_path is None
                else SandboxPath.from_dict(sandbox_path, f"{path}.sandbox_path")
            ),
            secret=None if secret is None else Secret.from_dict(secret, f"{path}.secret"),
        )


@dataclass(frozen=True, slots=True)
class Image(CanonicalModel):
    """Container image a volume is provisioned from; only presence matters here."""

    type: str
    name: str

    def __post_init__(self) -> None:
        check_instance(self.type, str, "Image.type")
        check_instance(self.name, str, "Image.name")

    @classmethod
    def from_dict(cls, data: object, path: str = "Image") -> Image:
        parsed = expect_object(data, path, required={"type", "name"})
        return cls(
            type=as_str(parsed["type"], f"{path}.type"),
            name=as_str(parsed["name"], f"{path}.name"),
        )


@dataclass(frozen=True, slots=True)
class Volume(CanonicalModel):
    """A mount sourced from exactly one of ``host_path``, ``image`` or ``source``."""

    container_path: str
    mode: VolumeMode | None = None
    host_path: str | None = None
    image: Image | None = None
    source: VolumeSource | None = None

    def __post_init__(self) -> None:
        check_instance(self.container_path, str, "Volume.container_path")
        if self.mode is not None:
            object.__setattr__(self, "mode", coerce_enum(VolumeMode, self.mode))
        check_optional_instance(self.host_path, str, "Volume.host_path")
        check_optional_instance(self.image, Image, "Volume.image")
        check_optional_instance(self.source, VolumeSource, "Volume.source")

    @classmethod
    def from_dict(cls, data: object, path: str = "Volume") -> Volume:
        parsed = expect_object(
            data,
            path,
            required={"container_path"},
            optional={"mode", "host_path", "image", "source"},
        )
        mode = parsed.get("mode")
        image = parsed.get("image")
        source = parsed.get("source")
        return cls(
            container_path=as_str(parsed["container_path"], f"{path}.container_path"),
            mode=None if mode is None else as_enum(VolumeMode, mode, f"{path}.mode"),
            host_path=as_optional_str(parsed.get("host_path"), f"{path}.host_path"),
            image=None if image is None else Image.from_dict(image, f"{path}.image"),
            source=None if source is None else VolumeSource.from_dict(source, f"{path}.source"),
        )


@dataclass(frozen=True, slots=True)
class ContainerInfo(CanonicalModel):
    type: ContainerType | None = None
    hostname: str | None = None
    volumes: tuple[Volume, ...] = ()

    def __post_init__(self) -> None:
        if self.type is not None:
            object.__setattr__(self, "type", coerce_enum(ContainerType, self.type))
        check_optional_instance(self.hostname, str, "ContainerInfo.hostname")
        object.__setattr__(self, "volumes", tuple(self.volumes))
        for index, volume in enumerate(self.volumes):
            check_instance(volume, Volume, f"ContainerInfo.volumes[{index}]")

    @classmethod
    def from_dict(cls, data: object, path: str = "ContainerInfo") -> ContainerInfo:
        parsed = expect_object(data, path, optional={"type", "hostname", "volumes"})
        raw_type = parsed.get("type")
        items = as_sequence(parsed.get("volumes", ()), f"{path}.volumes")
        return cls(
            type=None if raw_type is None else as_enum(ContainerType, raw_type, f"{path}.type"),
            hostname=as_optional_str(parsed.get("hostname"), f"{path}.hostname"),
            volumes=tuple(
                Volume.from_dict(item, f"{path}.volumes[{index}]")
                for index, item in enumerate(items)
            ),
        )


def parse_identifier(data: object, path: str = "id") -> str:
    """Accept a bare identifier string or a ``{"value": ...}`` wrapper."""
    if isinstance(data, str):
        return data
    if isinstance(data, dict):
        parsed = expect_object(data, path, required={"value"})
        return as_str(parsed["value"], f"{path}.value", max_len=None)
    fail(path, f"expected string or object, got {type(data).__name__}")


__all__ = [
    "CommandInfo",
    "ContainerInfo",
    "ContainerType",
    "DockerVolume",
    "Environment",
    "HostPath",
    "Image",
    "SandboxPath",
    "SandboxPathType",
    "Secret",
    "SecretReference",
    "SecretType",
    "SecretValue",
    "Variable",
    "VariableType",
    "Volume",
    "VolumeMode",
    "VolumeSource",
    "VolumeSourceType",
    "parse_identifier",
]
