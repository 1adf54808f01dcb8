"""Typed resource entries and fixed-point scalar arithmetic over a collection."""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import StrEnum

from cluster_validation.constants import GPUS_RESOURCE_NAME, SCALAR_SCALE
from cluster_validation.domain.base import (
    CanonicalModel,
    as_enum,
    as_float,
    as_int,
    as_sequence,
    as_str,
    check_instance,
    coerce_enum,
    expect_object,
    fail,
)

__all__ = [
    "Resource",
    "ResourceType",
    "Resources",
    "ValueRange",
    "scalar_to_fixed",
]


class ResourceType(StrEnum):
    SCALAR = "SCALAR"
    RANGES = "RANGES"
    SET = "SET"
    TEXT = "TEXT"


def scalar_to_fixed(value: float) -> int:
    """Round a scalar to the nearest representable fixed-point integer."""
    return round(value * SCALAR_SCALE)


@dataclass(frozen=True, slots=True)
class ValueRange(CanonicalModel):
    begin: int
    end: int

    def __post_init__(self) -> None:
        check_instance(self.begin, int, "ValueRange.begin")
        check_instance(self.end, int, "ValueRange.end")

    @classmethod
    def from_dict(cls, data: object, path: str = "ValueRange") -> ValueRange:
        parsed = expect_object(data, path, required={"begin", "end"})
        return cls(
            begin=as_int(parsed["begin"], f"{path}.begin", minimum=0),
            end=as_int(parsed["end"], f"{path}.end", minimum=0),
        )


@dataclass(frozen=True, slots=True)
class Resource(CanonicalModel):
    """A named quantity; only the payload matching ``type`` is meaningful."""

    name: str
    type: ResourceType
    scalar: float | None = None
    ranges: tuple[ValueRange, ...] = ()
    set: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        check_instance(self.name, str, "Resource.name")
        object.__setattr__(self, "type", coerce_enum(ResourceType, self.type))
        check_instance(self.type, ResourceType, "Resource.type")
        if self.scalar is not None:
            if isinstance(self.scalar, bool):
                raise TypeError("Resource.scalar: expected int | float, got bool")
            check_instance(self.scalar, (int, float), "Resource.scalar")
            if not math.isfinite(self.scalar):
                raise ValueError(f"Resource.scalar: must be finite, got {self.scalar!r}")
        object.__setattr__(self, "ranges", tuple(self.ranges))
        object.__setattr__(self, "set", tuple(self.set))

    def is_empty(self) -> bool:
        if self.type is ResourceType.SCALAR:
            return self.scalar is None or scalar_to_fixed(self.scalar) <= 0
        if self.type is ResourceType.RANGES:
            return not self.ranges
        if self.type is ResourceType.SET:
            return not self.set
        return False

    @classmethod
    def from_dict(cls, data: object, path: str = "Resource") -> Resource:
        parsed = expect_object(
            data, path, required={"name", "type"}, optional={"scalar", "ranges", "set"}
        )
        resource_type = as_enum(ResourceType, parsed["type"], f"{path}.type")
        scalar = parsed.get("scalar")
        if resource_type is ResourceType.SCALAR and scalar is None:
            fail(path, "SCALAR resources must carry a 'scalar' value")
        ranges = as_sequence(parsed.get("ranges", ()), f"{path}.ranges")
        items = as_sequence(parsed.get("set", ()), f"{path}.set")
        return cls(
            name=as_str(parsed["name"], f"{path}.name"),
            type=resource_type,
            scalar=None if scalar is None else _scalar_value(scalar, f"{path}.scalar"),
            ranges=tuple(
                ValueRange.from_dict(item, f"{path}.ranges[{index}]")
                for index, item in enumerate(ranges)
            ),
            set=tuple(as_str(item, f"{path}.set[{index}]") for index, item in enumerate(items)),
        )


def _scalar_value(value: object, path: str) -> float:
    # Protobuf JSON nests the scalar as ``{"value": 1.5}``; bare numbers are accepted too.
    if isinstance(value, dict):
        parsed = expect_object(value, path, required={"value"})
        return as_float(parsed["value"], f"{path}.value")
    return as_float(value, path)


class Resources:
    """Collection of non-empty resources with fixed-point scalar sums.

    Scalars are accumulated as integers scaled by ``SCALAR_SCALE`` so sums
    never pick up binary floating-point drift beyond three fractional digits.
    Empty entries are dropped on construction.
    """

    __slots__ = ("_items",)

    def __init__(self, resources: Iterable[Resource] = ()) -> None:
        items: list[Resource] = []
        for index, resource in enumerate(resources):
            check_instance(resource, Resource, f"Resources[{index}]")
            if not resource.is_empty():
                items.append(resource)
        self._items: tuple[Resource, ...] = tuple(items)

    def __iter__(self) -> Iterator[Resource]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def scalar(self, name: str) -> float | None:
        """Sum of the scalar entries named ``name``, or ``None`` when there are none."""
        total: int | None = None
        for item in self._items:
            if item.name != name or item.scalar is None:
                continue
            if item.type is not ResourceType.SCALAR:
                continue
            total = (total or 0) + scalar_to_fixed(item.scalar)
        if total is None:
            return None
        return total / SCALAR_SCALE

    def gpus(self) -> float | None:
        return self.scalar(GPUS_RESOURCE_NAME)

    @classmethod
    def from_list(cls, data: object, path: str = "resources") -> Resources:
        items = as_sequence(data, path)
        return cls(
            Resource.from_dict(item, f"{path}[{index}]") for index, item in enumerate(items)
        )
