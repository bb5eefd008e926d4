"""Optimistic-concurrency editing of tasks.

A task carries a version that the store increments on every accepted write.
Edits are sent with the version they were made against; when another client
wrote first, the store reports a conflict along with its current state, and
the user picks how to reconcile:

  REFRESH_RETRY    — take the store's version, drop the edit
  MANUAL_MERGE     — take the store's version, keep the edit visible for re-entry
  FORCE_OVERWRITE  — re-send the edit against the store's current version

Resolution is always the user's choice; nothing is merged automatically.
"""

from .controller import (
    ConflictResolutionController,
    Conflicted,
    ControllerSnapshot,
    ControllerState,
    Editing,
    Notice,
    ResolutionStrategy,
    Submitting,
    Viewing,
)
from .session import ConflictRecord, EditSession

__all__ = [
    "ConflictRecord",
    "ConflictResolutionController",
    "Conflicted",
    "ControllerSnapshot",
    "ControllerState",
    "EditSession",
    "Editing",
    "Notice",
    "ResolutionStrategy",
    "Submitting",
    "Viewing",
]
