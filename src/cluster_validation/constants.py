"""Stable constants shared across the validation layers."""

from __future__ import annotations

from typing import Final

# Longest identifier accepted, in bytes. Identifiers are mapped to directory
# names, so this tracks the POSIX ``NAME_MAX`` path-component limit.
NAME_MAX: Final[int] = 255
NAME_MAX_CEILING: Final[int] = 4096

# Both separators are rejected regardless of host platform.
POSIX_PATH_SEPARATOR: Final[str] = "/"
WINDOWS_PATH_SEPARATOR: Final[str] = "\\"
DISALLOWED_IDS: Final[frozenset[str]] = frozenset({".", ".."})

# Scalar resource quantities carry three fractional digits.
SCALAR_PRECISION_DIGITS: Final[int] = 3
SCALAR_SCALE: Final[int] = 10**SCALAR_PRECISION_DIGITS

GPUS_RESOURCE_NAME: Final[str] = "gpus"

CONFIG_SCHEMA_VERSION: Final[int] = 1
DEFAULT_CONFIG_FILE: Final[str] = "validation.toml"
ENV_PREFIX: Final[str] = "CLUSTER_VALIDATION_"

__all__ = [
    "CONFIG_SCHEMA_VERSION",
    "DEFAULT_CONFIG_FILE",
    "DISALLOWED_IDS",
    "ENV_PREFIX",
    "GPUS_RESOURCE_NAME",
    "NAME_MAX",
    "NAME_MAX_CEILING",
    "POSIX_PATH_SEPARATOR",
    "SCALAR_PRECISION_DIGITS",
    "SCALAR_SCALE",
    "WINDOWS_PATH_SEPARATOR",
]
