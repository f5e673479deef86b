from __future__ import annotations

import enum
import logging
import sys
from typing import Generic, Optional, TypeVar, Union

from .errors import OperationCancelled, OperationErrored
from .poll import (
    PENDING,
    Context,
    Operation,
    Poll,
    Pollable,
    Ready,
    _Pending,
    is_pollable,
)
from .result import CancellableResult, Cancelled, Finished

if sys.version_info >= (3, 12):
    from typing import override
else:
    from typing_extensions import override


logger = logging.getLogger(__name__)

_T = TypeVar("_T")
_S = TypeVar("_S")
_O = TypeVar("_O")


class StopperState(enum.Enum):
    ACTIVE = "active"
    # the stopper failed and will never be polled again
    EXHAUSTED = "exhausted"


class _Errored:
    __slots__ = ("error",)

    def __init__(self, error: Exception):
        self.error = error


_Outcome = Union[Finished[_T, _S], Cancelled[_T, _S], _Errored, _Pending]


class _Race(Operation[_O], Generic[_T, _S, _O]):
    """Races a primary operation against a stopper, the stopper completing first
    means the primary operation is treated as cancelled.

    Subclasses only decide how the outcome of a poll is reported to the caller.
    """

    def __init__(self, primary: Pollable[_T], stopper: Pollable[_S]):
        """
        :param primary: the operation whose result is wanted.
        :type primary: Pollable[_T]
        :param stopper: the operation that cancels `primary` when it completes.
        :type stopper: Pollable[_S]

        :raises TypeError: if either argument has no `poll` method.
        """
        if not is_pollable(primary):
            raise TypeError(f"primary operation {primary!r} is not pollable")
        if not is_pollable(stopper):
            raise TypeError(f"stopper {stopper!r} is not pollable")

        self._primary = primary
        self._stopper: Optional[Pollable[_S]] = stopper
        self._stopper_state = StopperState.ACTIVE

    @property
    def primary(self) -> Pollable[_T]:
        return self._primary

    @property
    def stopper(self) -> Optional[Pollable[_S]]:
        """The stopper, `None` once it has failed"""
        return self._stopper

    @property
    def stopper_state(self) -> StopperState:
        return self._stopper_state

    def _race(self, cx: Context) -> _Outcome[_T, _S]:
        failure: Optional[_Errored] = None

        # the primary is always polled first so that it wins ties.
        try:
            state = self._primary.poll(cx)
        except Exception as exc:
            # a stopper that is ready this turn still takes priority over the failure.
            failure = _Errored(exc)
        else:
            if isinstance(state, Ready):
                return Finished(state.value)

        if self._stopper_state is StopperState.ACTIVE:
            try:
                stopped = self._stopper.poll(cx)
            except Exception as exc:
                logger.debug(
                    "stopper %r failed, %r can no longer be cancelled: %r",
                    self._stopper,
                    self._primary,
                    exc,
                )
                self._stopper = None
                self._stopper_state = StopperState.EXHAUSTED
            else:
                if isinstance(stopped, Ready):
                    return Cancelled(stopped.value)

        if failure is not None:
            return failure
        return PENDING

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(primary={self._primary!r}, "
            f"stopper={self._stopper!r}, stopper_state={self._stopper_state.name})"
        )


class Cancellable(_Race[_T, _S, CancellableResult[_T, _S]]):
    """Resolves to `Finished` with the primary's value, or to `Cancelled` with
    the stopper's value if the stopper completed first.

    A failure of the primary operation is raised from `poll` unchanged unless
    the stopper completes during the same poll.
    """

    @override
    def poll(self, cx: Context) -> Poll[CancellableResult[_T, _S]]:
        outcome = self._race(cx)
        if outcome is PENDING:
            return PENDING
        if isinstance(outcome, _Errored):
            raise outcome.error
        return Ready(outcome)


class TryCancellable(_Race[_T, _S, _T]):
    """Resolves to the primary's value. Cancellation and failures of the primary
    operation are raised from `poll` as a `CancellableError`.

    :raises OperationCancelled: if the stopper completed first.
    :raises OperationErrored: if the primary operation failed first.
    """

    @override
    def poll(self, cx: Context) -> Poll[_T]:
        outcome = self._race(cx)
        if outcome is PENDING:
            return PENDING
        if isinstance(outcome, _Errored):
            raise OperationErrored(outcome.error) from outcome.error
        if isinstance(outcome, Cancelled):
            raise OperationCancelled(outcome.value)
        return Ready(outcome.value)


def cancellable(primary: Pollable[_T], stopper: Pollable[_S]) -> Cancellable[_T, _S]:
    """Makes `primary` cancellable by `stopper`

    This is the same as `Operation.cancel_with` but works with any pollable
    object instead of only `Operation` subclasses.

    :param primary: the operation whose result is wanted.
    :type primary: Pollable[_T]
    :param stopper: the operation that cancels `primary` when it completes.
    :type stopper: Pollable[_S]

    :returns: a `Cancellable` resolving to `Finished` or `Cancelled`.
    """
    return Cancellable(primary, stopper)


def try_cancellable(
    primary: Pollable[_T], stopper: Pollable[_S]
) -> TryCancellable[_T, _S]:
    """Same as `cancellable(...)` but reports cancellation and failure
    through `CancellableError` instead of a `CancellableResult`"""
    return TryCancellable(primary, stopper)


__all__ = (
    "Cancellable",
    "StopperState",
    "TryCancellable",
    "cancellable",
    "try_cancellable",
)
