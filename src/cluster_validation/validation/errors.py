"""Error values and exceptions raised around the validators."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NoReturn

__all__ = [
    "InvalidMessageError",
    "UnreachableError",
    "ValidationError",
    "assert_valid",
    "unreachable",
]


@dataclass(frozen=True, slots=True)
class ValidationError:
    """Descriptive validation failure returned (never raised) by the validators."""

    message: str

    def __str__(self) -> str:
        return self.message

    def wrap(self, prefix: str) -> ValidationError:
        return ValidationError(f"{prefix}{self.message}")


class InvalidMessageError(ValueError):
    """Raised by :func:`assert_valid` for callers that prefer exceptions."""

    def __init__(self, error: ValidationError) -> None:
        self.error = error
        super().__init__(error.message)


class UnreachableError(AssertionError):
    """A closed enumeration carried a value outside its members.

    Signals a programming error upstream rather than bad user input, so it is
    raised instead of being returned as a :class:`ValidationError`.
    """


def unreachable(what: str, value: object) -> NoReturn:
    raise UnreachableError(f"unreachable: unhandled {what} {value!r}")


def assert_valid(error: ValidationError | None) -> None:
    if error is not None:
        raise InvalidMessageError(error)
