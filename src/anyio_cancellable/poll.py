from __future__ import annotations

import abc
from collections.abc import Callable
from dataclasses import dataclass
from typing import (
    TYPE_CHECKING,
    Any,
    Generic,
    Protocol,
    TypeAlias,
    TypeVar,
    Union,
    final,
)

if TYPE_CHECKING:
    from .cancellable import Cancellable, TryCancellable


_T = TypeVar("_T")
_T_co = TypeVar("_T_co", covariant=True)
_S = TypeVar("_S")


@final
class _Pending:
    __slots__ = ()

    def __repr__(self) -> str:
        return "PENDING"

    def __bool__(self) -> bool:
        return False


PENDING = _Pending()
"""Returned by `poll` while an operation is not done yet."""


@final
@dataclass(frozen=True)
class Ready(Generic[_T]):
    """Returned by `poll` once an operation is done with an output value."""

    value: _T


Poll: TypeAlias = Union[Ready[_T], _Pending]


class Context:
    """Handed to every `poll` call, carries the waker of the current poller.

    An operation that returns `PENDING` keeps `waker` and calls it once it
    may be able to make progress again.
    """

    __slots__ = ("waker",)

    def __init__(self, waker: Callable[[], Any]):
        self.waker = waker

    def wake(self) -> None:
        self.waker()


class Pollable(Protocol[_T_co]):
    def poll(self, cx: Context) -> Poll[_T_co]: ...


def is_pollable(obj: object) -> bool:
    # a class has a callable `poll` too, only instances can be polled.
    if isinstance(obj, type):
        return False
    return callable(getattr(obj, "poll", None))


class Operation(abc.ABC, Generic[_T]):
    """Base class for pollable operations.

    Subclasses must override `poll`. Raising from `poll` means the operation
    is done with a failure.
    """

    @abc.abstractmethod
    def poll(self, cx: Context) -> Poll[_T]:
        raise NotImplementedError

    def cancel_with(self, stopper: Pollable[_S]) -> Cancellable[_T, _S]:
        """Cancel this operation once `stopper` completes

        :param stopper: operation racing against this one.
        :returns: a `Cancellable` resolving to `Finished` or `Cancelled`.
        """
        from .cancellable import Cancellable

        return Cancellable(self, stopper)

    def cancel_with_factory(
        self, factory: Callable[[], Pollable[_S]]
    ) -> Cancellable[_T, _S]:
        """Same as `cancel_with` but builds the stopper by calling `factory` once."""
        return self.cancel_with(factory())

    def try_cancel_with(self, stopper: Pollable[_S]) -> TryCancellable[_T, _S]:
        """Cancel this operation once `stopper` completes, reporting cancellation
        and failure through `CancellableError`

        :param stopper: operation racing against this one.
        :returns: a `TryCancellable` resolving to this operation's value.
        """
        from .cancellable import TryCancellable

        return TryCancellable(self, stopper)

    def try_cancel_with_factory(
        self, factory: Callable[[], Pollable[_S]]
    ) -> TryCancellable[_T, _S]:
        """Same as `try_cancel_with` but builds the stopper by calling `factory` once."""
        return self.try_cancel_with(factory())


class _ReadyOperation(Operation[_T]):
    __slots__ = ("_value",)

    def __init__(self, value: _T):
        self._value = value

    def poll(self, cx: Context) -> Poll[_T]:
        return Ready(self._value)


class _PendingOperation(Operation[Any]):
    __slots__ = ()

    def poll(self, cx: Context) -> Poll[Any]:
        # nothing will ever wake us, so the waker is dropped.
        return PENDING


def ready(value: _T) -> Operation[_T]:
    """An operation that is done with `value` on its first poll."""
    return _ReadyOperation(value)


def pending() -> Operation[Any]:
    """An operation that never completes."""
    return _PendingOperation()


__all__ = (
    "PENDING",
    "Context",
    "Operation",
    "Poll",
    "Pollable",
    "Ready",
    "is_pollable",
    "pending",
    "ready",
)
