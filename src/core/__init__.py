"""
Core Module - Shared error taxonomy and logging setup.

Components:
- errors: LibregtoError hierarchy (InvalidNotation, UnknownUnit,
  PersistenceFailure, InvalidStateTransition, UnitLocked)
- log_setup: loguru sink configuration for entry points

All feature packages (src/hands/, src/ranges/, src/engine/, src/progress/)
import their exceptions from here rather than defining their own.
"""

from src.core.errors import (
    InvalidNotation,
    InvalidStateTransition,
    LibregtoError,
    PersistenceFailure,
    UnitLocked,
    UnknownUnit,
)

__all__ = [
    "LibregtoError",
    "InvalidNotation",
    "UnknownUnit",
    "PersistenceFailure",
    "InvalidStateTransition",
    "UnitLocked",
]
