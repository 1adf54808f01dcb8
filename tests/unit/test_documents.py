"""Unit tests for JSON/YAML document loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from cluster_validation.documents import DocumentLoadError, load_document
from cluster_validation.domain.base import MessageParseError
from cluster_validation.domain.models import Secret


def _write(path: Path, contents: str) -> Path:
    path.write_text(contents, encoding="utf-8")
    return path


def test_json_document_loads(tmp_path: Path) -> None:
    path = _write(tmp_path / "volume.json", '{"container_path": "/data", "host_path": "/srv"}')
    assert load_document(path) == {"container_path": "/data", "host_path": "/srv"}


def test_yaml_binary_tag_yields_raw_bytes(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "secret.yml",
        "type: VALUE\nvalue:\n  data: !!binary aGVsbG8=\n",
    )
    loaded = load_document(path)

    secret = Secret.from_dict(loaded)
    assert secret.value is not None
    assert secret.value.data == b"hello"


def test_unsupported_suffix_is_rejected(tmp_path: Path) -> None:
    path = _write(tmp_path / "volume.toml", "container_path = '/data'\n")
    with pytest.raises(DocumentLoadError, match="unsupported document type"):
        load_document(path)


def test_invalid_yaml_is_a_parse_error(tmp_path: Path) -> None:
    path = _write(tmp_path / "broken.yaml", "a: [1, 2\n")
    with pytest.raises(MessageParseError, match="invalid document"):
        load_document(path)


def test_empty_document_is_rejected(tmp_path: Path) -> None:
    path = _write(tmp_path / "empty.yaml", "# nothing here\n")
    with pytest.raises(DocumentLoadError, match="document is empty"):
        load_document(path)


def test_missing_document_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(DocumentLoadError, match="unable to read document"):
        load_document(tmp_path / "absent.json")


def test_yaml_safe_load_refuses_python_tags(tmp_path: Path) -> None:
    path = _write(tmp_path / "evil.yaml", "!!python/object/apply:os.system ['true']\n")
    with pytest.raises(DocumentLoadError, match="invalid document"):
        load_document(path)


def test_non_utf8_document_is_a_load_error(tmp_path: Path) -> None:
    path = tmp_path / "task_id.json"
    path.write_bytes(b'{"value": "\xff\xfe"}')
    with pytest.raises(DocumentLoadError, match="document is not valid UTF-8"):
        load_document(path)
