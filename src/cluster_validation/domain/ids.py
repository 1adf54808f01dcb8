"""Typed identifier wrappers for the entities an ID can name."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeVar

from cluster_validation.domain.base import CanonicalModel, as_str, check_instance, expect_object

TID = TypeVar("TID", bound="_TypedID")

__all__ = [
    "ExecutorID",
    "FrameworkID",
    "SlaveID",
    "TaskID",
]


@dataclass(frozen=True, slots=True)
class _TypedID(CanonicalModel):
    value: str

    def __post_init__(self) -> None:
        check_instance(self.value, str, f"{type(self).__name__}.value")

    @classmethod
    def from_dict(cls: type[TID], data: object) -> TID:
        name = cls.__name__
        parsed = expect_object(data, name, required={"value"})
        # Length is a validation rule for identifiers, not a parse limit.
        return cls(value=as_str(parsed["value"], f"{name}.value", max_len=None))

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class TaskID(_TypedID):
    """Names a task."""


@dataclass(frozen=True, slots=True)
class ExecutorID(_TypedID):
    """Names an executor within a framework."""


@dataclass(frozen=True, slots=True)
class SlaveID(_TypedID):
    """Names an agent (``slave`` on the wire)."""


@dataclass(frozen=True, slots=True)
class FrameworkID(_TypedID):
    """Names a framework."""
