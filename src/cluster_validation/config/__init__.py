"""
cluster-validation config package public API.

File: src/cluster_validation/config/__init__.py
Last updated: 2026-10-18

Purpose
- Export config loading/validation entrypoints and public error types.

Functional requirements
- Support loading from ``validation.toml`` + ``CLUSTER_VALIDATION_`` env overrides.
- Fail fast with clear structured validation/load errors.

Non-functional requirements
- Keep import-time surface small and deterministic.
"""

from cluster_validation.config.loader import (
    ConfigLoadError,
    dump_effective_config,
    load_config,
    normalize_paths,
)
from cluster_validation.config.schema import (
    DEFAULT_CONFIG,
    PATH_FIELDS,
    ConfigValidationError,
    ConfigValidationIssue,
    ConfigValidationResult,
    ValidationConfig,
    assert_valid_config,
    default_config,
    merge_config,
    validate_config,
)

__all__ = [
    "ConfigLoadError",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "ConfigValidationResult",
    "DEFAULT_CONFIG",
    "PATH_FIELDS",
    "ValidationConfig",
    "assert_valid_config",
    "default_config",
    "dump_effective_config",
    "load_config",
    "merge_config",
    "normalize_paths",
    "validate_config",
]
