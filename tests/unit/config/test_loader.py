"""
cluster-validation: unit tests for config loader

File: tests/unit/config/test_loader.py
Last updated: 2026-10-18

Purpose
- Validate deterministic config loading from defaults, TOML, env overrides, and CLI overrides.

What this test file should cover
- Precedence: CLI > env > file > defaults.
- Deterministic env var path mapping and type coercion.
- Path normalization relative to the config file.
- Missing default file vs missing explicit file.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path

import pytest

from cluster_validation.config.loader import (
    ConfigLoadError,
    dump_effective_config,
    load_config,
)
from cluster_validation.config.schema import ConfigValidationError


def _write_config(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def _sha256_json(data: dict[str, object]) -> str:
    payload = json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def test_loader_precedence_default_file_env_cli(tmp_path: Path) -> None:
    config_path = tmp_path / "validation.toml"
    default_path = tmp_path / "default.toml"
    _write_config(default_path, "")
    _write_config(
        config_path,
        """
[identifiers]
name_max = 128
""".strip(),
    )

    default_loaded = load_config(default_path, environ={})
    file_loaded = load_config(config_path, environ={})
    env_loaded = load_config(
        config_path, environ={"CLUSTER_VALIDATION_IDENTIFIERS_NAME_MAX": "64"}
    )
    cli_loaded = load_config(
        config_path,
        environ={"CLUSTER_VALIDATION_IDENTIFIERS_NAME_MAX": "64"},
        cli_overrides={"identifiers.name_max": 32},
    )

    assert default_loaded["identifiers"]["name_max"] == 255
    assert file_loaded["identifiers"]["name_max"] == 128
    assert env_loaded["identifiers"]["name_max"] == 64
    assert cli_loaded["identifiers"]["name_max"] == 32


def test_env_mapping_coerces_bool_and_str(tmp_path: Path) -> None:
    config_path = tmp_path / "validation.toml"
    _write_config(config_path, "")

    loaded = load_config(
        config_path,
        environ={
            "CLUSTER_VALIDATION_LOGGING_LOG_TO_STDOUT": "on",
            "CLUSTER_VALIDATION_LOGGING_REDACT_SECRETS": "0",
            "CLUSTER_VALIDATION_LOGGING_LEVEL": "warning",
        },
    )

    assert loaded["logging"]["log_to_stdout"] is True
    assert loaded["logging"]["redact_secrets"] is False
    assert loaded["logging"]["level"] == "WARNING"


def test_schema_version_is_not_env_overridable(tmp_path: Path) -> None:
    config_path = tmp_path / "validation.toml"
    _write_config(config_path, "")

    loaded = load_config(config_path, environ={"CLUSTER_VALIDATION_META_SCHEMA_VERSION": "9"})

    assert loaded["meta"]["schema_version"] == 1


def test_invalid_env_coercion_raises_actionable_error(tmp_path: Path) -> None:
    config_path = tmp_path / "validation.toml"
    _write_config(config_path, "")

    with pytest.raises(ConfigLoadError, match="CLUSTER_VALIDATION_IDENTIFIERS_NAME_MAX"):
        load_config(
            config_path, environ={"CLUSTER_VALIDATION_IDENTIFIERS_NAME_MAX": "not-an-int"}
        )

    with pytest.raises(ConfigLoadError, match="must be a boolean"):
        load_config(config_path, environ={"CLUSTER_VALIDATION_LOGGING_LOG_TO_STDOUT": "maybe"})


def test_out_of_range_override_fails_validation(tmp_path: Path) -> None:
    config_path = tmp_path / "validation.toml"
    _write_config(config_path, "")

    with pytest.raises(ConfigValidationError, match="identifiers.name_max"):
        load_config(config_path, environ={}, cli_overrides={"identifiers.name_max": 0})


def test_loader_is_deterministic_for_same_inputs(tmp_path: Path) -> None:
    config_path = tmp_path / "validation.toml"
    _write_config(config_path, "")

    env = {"CLUSTER_VALIDATION_IDENTIFIERS_NAME_MAX": "100"}
    cli = {"logging.level": "debug"}

    first = load_config(config_path, environ=env, cli_overrides=cli)
    second = load_config(config_path, environ=env, cli_overrides=cli)

    assert _sha256_json(first) == _sha256_json(second)
    assert dump_effective_config(first) == dump_effective_config(second)


def test_path_normalization_is_relative_to_config_file(tmp_path: Path) -> None:
    config_path = tmp_path / "nested" / "validation.toml"
    _write_config(
        config_path,
        """
[logging]
log_dir = "../logs/validation"
""".strip(),
    )

    loaded = load_config(config_path, environ={})

    expected = tmp_path.resolve() / "logs" / "validation"
    assert loaded["logging"]["log_dir"] == expected.as_posix()


def test_missing_explicit_config_file_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigLoadError, match="config file not found"):
        load_config(tmp_path / "absent.toml", environ={})


def test_missing_default_config_file_uses_defaults(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)

    loaded = load_config(environ={})

    assert loaded["identifiers"]["name_max"] == 255
    assert loaded["logging"]["log_dir"] == (tmp_path.resolve() / "logs").as_posix()


def test_invalid_toml_is_reported(tmp_path: Path) -> None:
    config_path = tmp_path / "validation.toml"
    _write_config(config_path, "[identifiers\nname_max = 3\n")

    with pytest.raises(ConfigLoadError, match="invalid TOML"):
        load_config(config_path, environ={})


def test_unknown_file_keys_are_rejected(tmp_path: Path) -> None:
    config_path = tmp_path / "validation.toml"
    _write_config(config_path, "[identifiers]\nmax = 3\n")

    with pytest.raises(ConfigValidationError, match="identifiers.max: unknown key"):
        load_config(config_path, environ={})


def test_invalid_cli_override_key_is_rejected(tmp_path: Path) -> None:
    config_path = tmp_path / "validation.toml"
    _write_config(config_path, "")

    with pytest.raises(ConfigLoadError, match="invalid CLI override key"):
        load_config(config_path, environ={}, cli_overrides={"...": 1})
