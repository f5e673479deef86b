from __future__ import annotations

import logging
import sys
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import anyio
from anyio.abc import TaskGroup

from .poll import PENDING, Context, Operation, Poll, Pollable, Ready

if sys.version_info >= (3, 11):
    from typing import Unpack
else:
    from typing_extensions import Unpack

if sys.version_info >= (3, 12):
    from typing import override
else:
    from typing_extensions import override

if sys.version_info >= (3, 13):
    from typing import TypeVarTuple
else:
    from typing_extensions import TypeVarTuple


logger = logging.getLogger(__name__)

_T = TypeVar("_T")
_Ts = TypeVarTuple("_Ts", default=Unpack[tuple[()]])

SENTINAL = object()


async def drive(operation: Pollable[_T]) -> _T:
    """Polls `operation` from the current task until it is done.

    The task sleeps between polls until the operation calls the waker it was
    handed, so an operation that never wakes its poller waits forever. Use
    `anyio.fail_after` or `anyio.move_on_after` around it for a deadline.

    :param operation: any pollable operation.
    :type operation: Pollable[_T]

    :returns: the operation's output value.
    :raises Exception: whatever the operation raises from `poll`.
    """
    while True:
        # a fresh event per poll so that stale wake-ups cannot skip a wait.
        woken = anyio.Event()
        state = operation.poll(Context(woken.set))
        if isinstance(state, Ready):
            return state.value
        await woken.wait()


class TaskOperation(Operation[_T]):
    """An anyio task exposed as a pollable operation, created with `spawn(...)`.

    Polling never blocks. Once the task returns its value is `Ready`, once it
    raises the exception is raised from `poll`. Only the waker of the latest
    pending poll is kept and it is woken when the task is done.
    """

    def __init__(self, name: str | None = None):
        self.name = name
        self._result: Any = SENTINAL
        self._error: Exception | None = None
        self._waker: Callable[[], Any] | None = None
        # may be cancelled before the task has started.
        self._scope = anyio.CancelScope()

    @property
    def done(self) -> bool:
        return self._result is not SENTINAL or self._error is not None

    def cancel(self) -> None:
        """Stops the backing task, after which this operation never completes"""
        self._scope.cancel()

    async def _run(
        self,
        func: Callable[[Unpack[_Ts]], Awaitable[_T]],
        args: tuple[Unpack[_Ts]],
    ) -> None:
        with self._scope:
            try:
                self._result = await func(*args)
            except Exception as exc:
                logger.debug("task %r failed: %r", self.name, exc)
                self._error = exc

        if self.done:
            self._wake()
        else:
            self._waker = None

    def _wake(self) -> None:
        waker, self._waker = self._waker, None
        if waker is not None:
            waker()

    @override
    def poll(self, cx: Context) -> Poll[_T]:
        if self._error is not None:
            raise self._error
        if self._result is not SENTINAL:
            return Ready(self._result)
        # a single poller owns this operation, earlier wakers are stale.
        self._waker = cx.waker
        return PENDING

    def __repr__(self) -> str:
        return f"TaskOperation(name={self.name!r}, done={self.done})"


def spawn(
    task_group: TaskGroup,
    func: Callable[[Unpack[_Ts]], Awaitable[_T]],
    *args: Unpack[_Ts],
    name: str | None = None,
) -> TaskOperation[_T]:
    """Starts `func(*args)` in `task_group` and returns it as a pollable operation

    :param task_group: the task group that owns the new task.
    :type task_group: TaskGroup
    :param func: An asynchronous function to run.
    :type func: Callable[[Unpack[_Ts]], Awaitable[_T]]
    :param name: the name of the task, defaults to the name of `func`.

    :returns: a `TaskOperation` resolving to what `func` returns.
    """
    if name is None:
        name = getattr(func, "__qualname__", repr(func))
    operation: TaskOperation[_T] = TaskOperation(name)
    task_group.start_soon(operation._run, func, args, name=name)
    return operation


__all__ = ("TaskOperation", "drive", "spawn")
