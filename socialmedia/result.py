"""
Uniform outcome type for mutating post operations.

Every coordinator operation returns a ``Result``: either a success that
carries a value, or a failure that carries a ``Fault`` describing what
kind of error occurred.  Transport layers translate the ``ErrorType`` into
their own response shape (HTTP status codes for REST) and never inspect
exceptions from the storage layers directly.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

# Messages shared by every operation that can fail the same way.
INVALID_INPUT = "Invalid input."
INVALID_ID = "Invalid id."
POST_NOT_FOUND = "Post not found."
UNEXPECTED_PROBLEM = "Something unexpected occurred."


class ErrorType(str, enum.Enum):
    BAD_REQUEST = "bad_request"  # caller error, do not retry as-is
    NOT_FOUND = "not_found"  # no matching resource owned by the caller
    PROBLEM = "problem"  # infrastructure failure, safe to retry


@dataclass(frozen=True)
class Fault:
    error_type: ErrorType
    error_message: str


@dataclass(frozen=True)
class Result(Generic[T]):
    value: T | None = None
    fault: Fault | None = None

    def __post_init__(self) -> None:
        if self.fault is not None and self.value is not None:
            raise ValueError("A failed Result cannot carry a value")

    @property
    def succeeded(self) -> bool:
        return self.fault is None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error_type: ErrorType, message: str) -> "Result[T]":
        return cls(fault=Fault(error_type, message))
