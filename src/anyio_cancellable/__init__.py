from .cancellable import (
    Cancellable,
    StopperState,
    TryCancellable,
    cancellable,
    try_cancellable,
)
from .errors import CancellableError, OperationCancelled, OperationErrored
from .poll import PENDING, Context, Operation, Poll, Pollable, Ready, pending, ready
from .result import CancellableResult, Cancelled, Finished
from .runtime import TaskOperation, drive, spawn

__all__ = (
    "PENDING",
    "Cancellable",
    "CancellableError",
    "CancellableResult",
    "Cancelled",
    "Context",
    "Finished",
    "Operation",
    "OperationCancelled",
    "OperationErrored",
    "Poll",
    "Pollable",
    "Ready",
    "StopperState",
    "TaskOperation",
    "TryCancellable",
    "cancellable",
    "drive",
    "pending",
    "ready",
    "spawn",
    "try_cancellable",
)
