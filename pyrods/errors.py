"""Error kinds and the Result type returned by every pyrods operation."""

from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(Enum):
    CONNECTION = "connection"
    REMOTE = "remote"
    CONTRACT = "contract"
    RESOURCE = "resource"
    CONFIGURATION = "configuration"


class RodsError(Exception):
    """Base class for all pyrods errors.

    ``kind`` tells callers which failure path produced the error, ``message``
    is the human readable text and ``context`` carries whatever extra
    detail was at hand (paths, handles, server status).
    """

    kind = ErrorKind.REMOTE

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, context={self.context!r})"


class ConnectionFailure(RodsError):
    kind = ErrorKind.CONNECTION


class RemoteError(RodsError):
    """The server rejected a request.

    ``status`` is the raw (negative) status the server put in ``intInfo``;
    pyrods does not interpret it beyond success versus failure.
    """

    kind = ErrorKind.REMOTE

    def __init__(self, message: str, status: Optional[int] = None, **context: Any) -> None:
        super().__init__(message, status=status, **context)
        self.status = status


class ContractViolation(RodsError):
    kind = ErrorKind.CONTRACT


class ResourceExhausted(RodsError):
    kind = ErrorKind.RESOURCE


class ConfigurationError(RodsError):
    kind = ErrorKind.CONFIGURATION


class Result(Generic[T]):
    """Either a success payload or a structured error, never both.

    On failure ``value`` still holds the operation's pre-call empty value
    (an empty container for container-bearing calls, otherwise ``None``) so
    callers that ignore the error cannot observe half-filled output.
    """

    __slots__ = ("value", "error")

    def __init__(self, value: Optional[T] = None, error: Optional[RodsError] = None) -> None:
        self.value = value
        self.error = error

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: RodsError, empty: Optional[Callable[[], T]] = None) -> "Result[T]":
        return cls(value=empty() if empty is not None else None, error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value

    def __bool__(self) -> bool:
        return self.ok

    def __repr__(self) -> str:
        if self.ok:
            return f"Result.success({self.value!r})"
        return f"Result.failure({self.error!r})"
