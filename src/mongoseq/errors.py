from abc import ABC


class SequenceError(ABC, Exception):
    """Base class for sequence generator errors.

    Callers must treat any SequenceError as "no id was issued".
    """


class InvalidArgumentError(SequenceError):
    """Raised when caller input is rejected before any store call."""


class CounterMissingError(SequenceError):
    """Raised when the atomic increment found no counter record."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Counter '{name}' does not exist, use set_initial_value to set up an initial value for '{name}'"
        )


class StoreUnavailableError(SequenceError):
    """Raised when the underlying store fails (network, timeout, serialization)."""

    def __init__(self, message: str = "Store unavailable") -> None:
        super().__init__(message)
