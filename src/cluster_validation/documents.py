"""Load message documents (JSON or YAML) from disk for validation."""

from __future__ import annotations

from pathlib import Path
from typing import Final, cast

import yaml

from cluster_validation.domain.base import MessageParseError

DOCUMENT_SUFFIXES: Final[frozenset[str]] = frozenset({".json", ".yaml", ".yml"})

__all__ = ["DOCUMENT_SUFFIXES", "DocumentLoadError", "load_document"]


class DocumentLoadError(MessageParseError):
    """Raised when a document file cannot be read or decoded."""


def load_document(path: str | Path) -> object:
    """Decode a ``.json``/``.yaml``/``.yml`` document with ``yaml.safe_load``.

    JSON is a subset of YAML, so one loader covers both; YAML additionally
    allows ``!!binary`` for secret bytes.
    """
    resolved = Path(path)
    if resolved.suffix.lower() not in DOCUMENT_SUFFIXES:
        allowed = ", ".join(sorted(DOCUMENT_SUFFIXES))
        raise DocumentLoadError(f"{resolved}: unsupported document type (expected {allowed})")

    try:
        with resolved.open("r", encoding="utf-8") as handle:
            loaded = cast("object", yaml.safe_load(handle))
    except UnicodeDecodeError as exc:
        raise DocumentLoadError(f"{resolved}: document is not valid UTF-8 ({exc})") from exc
    except yaml.YAMLError as exc:
        raise DocumentLoadError(f"{resolved}: invalid document ({exc})") from exc
    except OSError as exc:
        raise DocumentLoadError(f"{resolved}: unable to read document ({exc})") from exc

    if loaded is None:
        raise DocumentLoadError(f"{resolved}: document is empty")
    return loaded
