from typing import Any, Optional


class CancellableError(Exception):
    """An Exception type raised by `anyio-cancellable` when a `TryCancellable`
    does not finish with its primary operation's value"""

    def is_cancelled(self) -> bool:
        """Check if the primary operation was cancelled"""
        return isinstance(self, OperationCancelled)

    def cancelled(self) -> Optional[Any]:
        """Retrieve the result of the stopper if the primary operation was cancelled"""
        if isinstance(self, OperationCancelled):
            return self.value
        return None

    def errored(self) -> Optional[BaseException]:
        """Retrieve the failure of the primary operation if it was not cancelled"""
        if isinstance(self, OperationErrored):
            return self.error
        return None


class OperationCancelled(CancellableError):
    """The stopper finished before the primary operation,
    `value` is what the stopper produced"""

    def __init__(self, value: Any):
        super().__init__(value)
        self.value = value


class OperationErrored(CancellableError):
    """The primary operation failed while the stopper had not fired yet,
    `error` is the primary's exception"""

    def __init__(self, error: BaseException):
        super().__init__(error)
        self.error = error


__all__ = (
    "CancellableError",
    "OperationCancelled",
    "OperationErrored",
)
