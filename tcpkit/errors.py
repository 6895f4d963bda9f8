"""Exceptions that carry the attempted operation along with an error code."""

from __future__ import annotations

import os
from typing import Callable, Optional, TypeVar

T = TypeVar("T")

ErrorCategory = Callable[[int], Optional[str]]


class TaggedError(OSError):
    """An error code from some category, tagged with the operation that failed.

    ``category`` maps an error code to its human-readable message.
    """

    def __init__(self, category: ErrorCategory, attempt: str, error_code: int) -> None:
        super().__init__(error_code, category(error_code))
        self.attempt = attempt
        self.error_code = error_code

    def __str__(self) -> str:
        return f"{self.attempt}: {self.strerror}"


class UnixError(TaggedError):
    """A failed operating-system call, described by its errno value."""

    def __init__(self, attempt: str, errno_value: int) -> None:
        super().__init__(os.strerror, attempt, errno_value)


def check_system_call(attempt: str, return_value: int) -> int:
    """Return a non-negative result; a negative one is a negated errno and raises."""
    if return_value >= 0:
        return return_value
    raise UnixError(attempt, -return_value)


def notnull(context: str, value: Optional[T]) -> T:
    """Return ``value`` unless it is None, in which case raise RuntimeError."""
    if value is None:
        raise RuntimeError(f"{context}: returned null pointer")
    return value