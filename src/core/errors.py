"""
Error taxonomy for the tutor core.

None of these should end a learning session:
- InvalidNotation: learner typed a malformed hand; re-prompt.
- UnknownUnit: caller asked about a unit the curriculum does not define.
  Raised in strict mode, otherwise treated as locked.
- PersistenceFailure: progress document could not be read or written.
  The store falls back to in-memory state and surfaces a warning.
- InvalidStateTransition: engine call made in the wrong state (double
  submit, next before answer). Raised in strict mode, otherwise ignored.
- UnitLocked: a session was requested for a unit that is still locked.
"""
from __future__ import annotations

from pathlib import Path


class LibregtoError(Exception):
    """Base class for all tutor errors."""


class InvalidNotation(LibregtoError, ValueError):
    """Raised when a hand or card string cannot be parsed."""

    def __init__(self, notation: object, reason: str = "unrecognised notation"):
        self.notation = notation
        self.reason = reason
        super().__init__(f"Invalid notation {notation!r}: {reason}")


class UnknownUnit(LibregtoError, KeyError):
    """Raised when a unit or group id is not part of the curriculum."""

    def __init__(self, unit_id: str):
        self.unit_id = unit_id
        super().__init__(unit_id)

    def __str__(self) -> str:
        return f"Unknown curriculum unit: {self.unit_id}"


class PersistenceFailure(LibregtoError):
    """Raised when the progress document cannot be loaded or saved."""

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        super().__init__(message)


class InvalidStateTransition(LibregtoError):
    """Raised when an engine operation is not allowed in the current state."""

    def __init__(self, state: str, action: str):
        self.state = state
        self.action = action
        super().__init__(f"Cannot {action} while engine is {state}")


class UnitLocked(LibregtoError):
    """Raised when a session is requested for a unit the learner has not unlocked."""

    def __init__(self, unit_id: str):
        self.unit_id = unit_id
        super().__init__(f"{unit_id} is locked; complete the earlier units first")
