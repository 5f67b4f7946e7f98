"""Error types raised by the core pipeline."""

from __future__ import annotations


class ListblockError(Exception):
    """Base class for listblock errors."""


class PatternValidationError(ListblockError, ValueError):
    """Raised when user input is not a usable pattern."""

    def __init__(self, pattern: str, message: str) -> None:
        super().__init__(message)
        self.pattern = pattern
        self.message = message


class MalformedPersistedPattern(ListblockError, ValueError):
    """Raised when a stored pattern no longer compiles and the policy is strict."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"Persisted pattern {pattern!r} does not compile: {reason}")
        self.pattern = pattern
        self.reason = reason


class DiscoveryFailure(ListblockError, RuntimeError):
    """Raised when the watched container never shows up."""

    def __init__(self, selector: str, timeout: float) -> None:
        super().__init__(f"Container {selector!r} did not appear within {timeout:g}s")
        self.selector = selector
        self.timeout = timeout
