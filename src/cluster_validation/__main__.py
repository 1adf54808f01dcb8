"""Module entrypoint for ``python -m cluster_validation``."""

from __future__ import annotations

from cluster_validation.main import cli_entrypoint

if __name__ == "__main__":
    raise SystemExit(cli_entrypoint())
