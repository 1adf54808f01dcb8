"""
cluster-validation: config schema.

File: src/cluster_validation/config/schema.py
Last updated: 2026-10-18

Purpose
- Define the ``validation.toml`` schema, built-in defaults and strict validation.

Functional requirements
- Unknown sections/keys and wrong types are reported with dotted paths.
- All issues are collected before failing, then raised together.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Final

from cluster_validation.constants import CONFIG_SCHEMA_VERSION, NAME_MAX, NAME_MAX_CEILING

ValidationConfig = dict[str, Any]

DEFAULT_CONFIG: Final[ValidationConfig] = {
    "meta": {
        "schema_version": CONFIG_SCHEMA_VERSION,
    },
    "identifiers": {
        "name_max": NAME_MAX,
    },
    "logging": {
        "level": "INFO",
        "log_dir": "logs",
        "log_to_stdout": False,
        "redact_secrets": True,
    },
}

PATH_FIELDS: Final[tuple[tuple[str, ...], ...]] = (("logging", "log_dir"),)

_LOG_LEVELS: Final[frozenset[str]] = frozenset(
    {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
)


@dataclass(frozen=True, slots=True)
class ConfigValidationIssue:
    """Single structured validation failure."""

    path: str
    message: str


@dataclass(frozen=True, slots=True)
class ConfigValidationResult:
    """Validation result with normalized config when no issues were found."""

    config: ValidationConfig | None
    issues: tuple[ConfigValidationIssue, ...]

    @property
    def is_valid(self) -> bool:
        return self.config is not None and not self.issues


class ConfigValidationError(ValueError):
    """Raised when strict config validation fails."""

    def __init__(self, issues: Sequence[ConfigValidationIssue]) -> None:
        self.issues = tuple(issues)
        if not self.issues:
            rendered = "unknown validation failure"
        else:
            rendered = "\n".join(f"- {item.path}: {item.message}" for item in self.issues)
        super().__init__(f"invalid config:\n{rendered}")


class _IssueCollector:
    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[ConfigValidationIssue] = []

    def add(self, path: str, message: str) -> None:
        self._items.append(ConfigValidationIssue(path=path, message=message))

    def items(self) -> tuple[ConfigValidationIssue, ...]:
        return tuple(self._items)

    @property
    def has_issues(self) -> bool:
        return bool(self._items)


def default_config() -> ValidationConfig:
    """Return a deep copy of the built-in defaults."""

    return copy.deepcopy(DEFAULT_CONFIG)


def merge_config(base: Mapping[str, object], overlay: Mapping[str, object]) -> ValidationConfig:
    """Deep-merge ``overlay`` onto a copy of ``base``."""

    merged: ValidationConfig = copy.deepcopy(dict(base))
    _merge_into(merged, overlay)
    return merged


def validate_config(config: object) -> ConfigValidationResult:
    """Validate config and return structured issues with dotted paths."""

    issues = _IssueCollector()
    if not isinstance(config, Mapping):
        issues.add("<root>", f"expected table, got {type(config).__name__}")
        return ConfigValidationResult(config=None, issues=issues.items())

    _check_known_keys(config, "", set(DEFAULT_CONFIG), issues)

    meta = _section(config, "meta", issues)
    identifiers = _section(config, "identifiers", issues)
    logging_section = _section(config, "logging", issues)

    if meta is not None:
        _check_known_keys(meta, "meta", {"schema_version"}, issues)
        version = meta.get("schema_version")
        if not _is_int(version):
            issues.add("meta.schema_version", "must be an integer")
        elif version != CONFIG_SCHEMA_VERSION:
            issues.add(
                "meta.schema_version",
                f"schema version {version} is not supported (expected {CONFIG_SCHEMA_VERSION})",
            )

    if identifiers is not None:
        _check_known_keys(identifiers, "identifiers", {"name_max"}, issues)
        name_max = identifiers.get("name_max")
        if not _is_int(name_max):
            issues.add("identifiers.name_max", "must be an integer")
        elif not 1 <= name_max <= NAME_MAX_CEILING:
            issues.add("identifiers.name_max", f"must be between 1 and {NAME_MAX_CEILING}")

    if logging_section is not None:
        _check_known_keys(
            logging_section,
            "logging",
            {"level", "log_dir", "log_to_stdout", "redact_secrets"},
            issues,
        )
        level = logging_section.get("level")
        if not isinstance(level, str) or level.strip().upper() not in _LOG_LEVELS:
            allowed = ", ".join(sorted(_LOG_LEVELS))
            issues.add("logging.level", f"must be one of: {allowed}")
        log_dir = logging_section.get("log_dir")
        if not isinstance(log_dir, str) or not log_dir.strip():
            issues.add("logging.log_dir", "must be a non-empty string")
        for flag in ("log_to_stdout", "redact_secrets"):
            if not isinstance(logging_section.get(flag), bool):
                issues.add(f"logging.{flag}", "must be a boolean")

    if issues.has_issues:
        return ConfigValidationResult(config=None, issues=issues.items())

    normalized = merge_config({}, config)
    normalized["logging"]["level"] = normalized["logging"]["level"].strip().upper()
    return ConfigValidationResult(config=normalized, issues=())


def assert_valid_config(config: object) -> ValidationConfig:
    """Validate config and raise ``ConfigValidationError`` on failure."""

    result = validate_config(config)
    if result.config is None:
        raise ConfigValidationError(result.issues)
    return result.config


def _section(
    config: Mapping[str, object], name: str, issues: _IssueCollector
) -> Mapping[str, object] | None:
    value = config.get(name)
    if value is None:
        issues.add(name, "section is required")
        return None
    if not isinstance(value, Mapping):
        issues.add(name, f"expected table, got {type(value).__name__}")
        return None
    return value


def _check_known_keys(
    table: Mapping[str, object], path: str, allowed: set[str], issues: _IssueCollector
) -> None:
    for key in sorted(str(item) for item in table):
        if key not in allowed:
            issues.add(f"{path}.{key}" if path else key, "unknown key")


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _merge_into(target: dict[str, Any], overlay: Mapping[str, object]) -> None:
    for key in sorted(overlay):
        value = overlay[key]
        existing = target.get(key)
        if isinstance(value, Mapping) and isinstance(existing, dict):
            _merge_into(existing, value)
        elif isinstance(value, Mapping):
            nested: dict[str, Any] = {}
            _merge_into(nested, value)
            target[key] = nested
        else:
            target[key] = copy.deepcopy(value)


__all__ = [
    "ConfigValidationError",
    "ConfigValidationIssue",
    "ConfigValidationResult",
    "DEFAULT_CONFIG",
    "PATH_FIELDS",
    "ValidationConfig",
    "assert_valid_config",
    "default_config",
    "merge_config",
    "validate_config",
]
