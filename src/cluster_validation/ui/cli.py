"""Command-line interface router for cluster-validation."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from cluster_validation.config import (
    ConfigLoadError,
    ConfigValidationError,
    ValidationConfig,
    dump_effective_config,
    load_config,
)
from cluster_validation.documents import load_document
from cluster_validation.domain.base import MessageParseError
from cluster_validation.observability import correlation_scope, setup_logging, shutdown_logging
from cluster_validation.validation import (
    MESSAGE_KINDS,
    UnknownKindError,
    UnreachableError,
    validate_message,
)

_LOGGER_NAME = "cluster_validation"


@dataclass(frozen=True, slots=True)
class CLIError(RuntimeError):
    """Typed CLI failure with an explicit process exit code."""

    message: str
    exit_code: int = 1

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse command router for all supported CLI workflows."""

    parser = argparse.ArgumentParser(
        prog="cluster-validation",
        description=(
            "cluster-validation: field-level checks for cluster task messages.\n\n"
            "Common workflows:\n"
            "  cluster-validation validate volume vol.yaml   Validate one document\n"
            "  cluster-validation kinds                      List message kinds\n"
            "  cluster-validation config                     Show effective config\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    _add_common_options(parser, default=None)

    # Subcommands accept the same options; SUPPRESS keeps them from
    # clobbering values given before the subcommand name.
    common = argparse.ArgumentParser(add_help=False)
    _add_common_options(common, default=argparse.SUPPRESS)

    subparsers = parser.add_subparsers(dest="command", required=True)

    # validate ------------------------------------------------------------
    validate_parser = subparsers.add_parser(
        "validate",
        parents=[common],
        help="Validate a JSON or YAML message document",
        description="Decode PATH as a KIND message and run its validator.",
    )
    validate_parser.add_argument("kind", help="Message kind (see `cluster-validation kinds`)")
    validate_parser.add_argument("path", help="Path to a .json, .yaml or .yml document")
    validate_parser.add_argument(
        "--json", action="store_true", help="Emit deterministic JSON output"
    )
    validate_parser.set_defaults(handler=_cmd_validate)

    # kinds ---------------------------------------------------------------
    kinds_parser = subparsers.add_parser(
        "kinds",
        parents=[common],
        help="List the message kinds that can be validated",
    )
    kinds_parser.add_argument("--json", action="store_true", help="Emit deterministic JSON output")
    kinds_parser.set_defaults(handler=_cmd_kinds)

    # config --------------------------------------------------------------
    config_parser = subparsers.add_parser(
        "config",
        parents=[common],
        help="Show the effective configuration",
    )
    config_parser.add_argument("--json", action="store_true", help="Emit JSON output")
    config_parser.set_defaults(handler=_cmd_config)

    return parser


def _add_common_options(parser: argparse.ArgumentParser, *, default: object) -> None:
    parser.add_argument(
        "--config",
        dest="config_path",
        default=default,
        help="Path to validation TOML config (default: ./validation.toml if present).",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default=default,
        help="Override logging.level (DEBUG, INFO, WARNING, ERROR, CRITICAL).",
    )


# ---------------------------------------------------------------------------
# Entrypoints
# ---------------------------------------------------------------------------


def run_cli(argv: Sequence[str] | None = None) -> int:
    """Parse argv, route to a command handler, and return process exit code."""

    parser = build_parser()
    namespace = parser.parse_args(list(argv) if argv is not None else None)
    handler = getattr(namespace, "handler", None)
    if not callable(handler):
        parser.print_help(sys.stderr)
        return 2

    try:
        result = handler(namespace)
    except CLIError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return exc.exit_code
    return int(result)


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _cmd_validate(args: argparse.Namespace) -> int:
    config = _load_effective_config(args)
    kind = _require_str(getattr(args, "kind", None), "kind")
    document = Path(_require_str(getattr(args, "path", None), "path"))
    name_max = int(config["identifiers"]["name_max"])

    handle = setup_logging(config["logging"], logger_name=_LOGGER_NAME)
    logger = logging.getLogger(_LOGGER_NAME)
    try:
        with correlation_scope(document=str(document), kind=kind):
            logger.debug("validating document", extra={"fields": {"name_max": name_max}})
            try:
                payload = load_document(document)
                logger.debug("document decoded", extra={"fields": {"payload": payload}})
                error = validate_message(kind, payload, name_max=name_max)
            except UnknownKindError as exc:
                logger.error("unknown message kind")
                raise CLIError(str(exc), exit_code=2) from exc
            except MessageParseError as exc:
                logger.error(
                    "document rejected before validation", extra={"fields": {"reason": str(exc)}}
                )
                raise CLIError(str(exc), exit_code=2) from exc
            except UnreachableError:
                logger.exception("validator reached an unhandled variant")
                raise

            if error is None:
                logger.info("message valid")
            else:
                logger.warning("message invalid", extra={"fields": {"reason": error.message}})
    finally:
        shutdown_logging(handle)

    payload_out: dict[str, object] = {
        "command": "validate",
        "kind": kind,
        "document": str(document),
        "valid": error is None,
        "error": None if error is None else error.message,
    }
    if _flag(args, "json"):
        _emit_json(payload_out)
    elif error is None:
        print(f"valid: {kind} {document}")
    else:
        print(f"invalid: {kind} {document}: {error.message}")
    return 0 if error is None else 1


def _cmd_kinds(args: argparse.Namespace) -> int:
    kinds = [
        {"name": kind.name, "description": kind.description}
        for kind in sorted(MESSAGE_KINDS.values(), key=lambda item: item.name)
    ]
    if _flag(args, "json"):
        _emit_json({"command": "kinds", "kinds": kinds})
        return 0

    width = max(len(item["name"]) for item in kinds)
    for item in kinds:
        print(f"{item['name']:<{width}}  {item['description']}")
    return 0


def _cmd_config(args: argparse.Namespace) -> int:
    config = _load_effective_config(args)
    if _flag(args, "json"):
        print(dump_effective_config(config))
        return 0

    print(json.dumps(config, indent=2, sort_keys=True, ensure_ascii=False))
    return 0


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _emit_json(payload: Mapping[str, object]) -> None:
    """Emit a JSON payload to stdout with deterministic formatting."""

    print(json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False))


def _load_effective_config(args: argparse.Namespace) -> ValidationConfig:
    config_path = _optional_str(getattr(args, "config_path", None))
    overrides: dict[str, object] = {}
    log_level = _optional_str(getattr(args, "log_level", None))
    if log_level is not None:
        overrides["logging.level"] = log_level

    try:
        loaded = load_config(config_path, cli_overrides=overrides)
    except (ConfigLoadError, ConfigValidationError) as exc:
        raise CLIError(str(exc), exit_code=2) from exc

    return loaded


def _flag(args: argparse.Namespace, name: str) -> bool:
    return bool(getattr(args, name, False))


def _optional_str(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _require_str(value: object, name: str) -> str:
    resolved = _optional_str(value)
    if resolved is None:
        raise CLIError(f"{name} must be a non-empty string", exit_code=2)
    return resolved


__all__ = ["CLIError", "build_parser", "run_cli"]
