class ExpenseTrackerError(Exception):
    """Base class for errors raised by the expense tracker."""


class ValidationError(ExpenseTrackerError):
    """A create payload is missing a required field or carries a malformed one."""


class PersistenceError(ExpenseTrackerError):
    """The entry store is unreachable or rejected a read or write."""


class TransportError(ExpenseTrackerError):
    """A client call to the API failed before a usable response came back."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
