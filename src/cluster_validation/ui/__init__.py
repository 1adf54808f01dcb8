"""Command-line surface for cluster-validation."""

from cluster_validation.ui.cli import CLIError, build_parser, run_cli

__all__ = ["CLIError", "build_parser", "run_cli"]
