from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

_T = TypeVar("_T")
_S = TypeVar("_S")


class _ResultAccessors(Generic[_T, _S]):
    __slots__ = ()

    def is_cancelled(self) -> bool:
        """Check if the primary operation was cancelled"""
        return isinstance(self, Cancelled)

    def finished(self) -> _T | None:
        """Retrieve the result of the primary operation if it was not cancelled"""
        if isinstance(self, Finished):
            return self.value
        return None

    def cancelled(self) -> _S | None:
        """Retrieve the result of the stopper if the primary operation was cancelled"""
        if isinstance(self, Cancelled):
            return self.value
        return None


@dataclass(frozen=True)
class Finished(_ResultAccessors[_T, _S]):
    """The primary operation finished before the stopper"""

    value: _T


@dataclass(frozen=True)
class Cancelled(_ResultAccessors[_T, _S]):
    """The stopper finished first, carrying the stopper's output"""

    value: _S


CancellableResult = Union[Finished[_T, _S], Cancelled[_T, _S]]
"""Result produced by `Cancellable`"""


__all__ = (
    "CancellableResult",
    "Cancelled",
    "Finished",
)
