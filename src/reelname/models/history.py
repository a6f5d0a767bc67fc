"""Undo history and collaborator result models.

RenameHistoryEntry is what the UndoLedger stores and persists. The result
models are the shapes returned by the filesystem service; failures are
reported through ``success=False`` and an optional message, never raised.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from reelname.models.plan import RenamePair


class RenameHistoryEntry(BaseModel):
    """One applied rename batch, recorded for undo."""

    id: str
    timestamp: int
    """Milliseconds since the epoch when the batch was recorded."""

    pairs: List[RenamePair] = Field(default_factory=list)
    """Inverse pairs (new path -> old path), applied by undo."""

    original_pairs: List[RenamePair] = Field(default_factory=list)
    """Forward pairs (old path -> new path) as they were applied."""

    folder: str = ""
    description: str = ""

    @model_validator(mode="after")
    def validate_inverse(self: "RenameHistoryEntry") -> "RenameHistoryEntry":
        """Ensure ``pairs`` is the exact inverse of ``original_pairs``.

        Raises:
            ValueError: If the two lists do not mirror each other.
        """
        expected = [pair.inverse() for pair in self.original_pairs]
        if self.pairs != expected:
            raise ValueError("pairs must be the inverse of original_pairs")
        return self


class ApplyResult(BaseModel):
    success: bool
    error: Optional[str] = None


class UndoResult(BaseModel):
    success: bool
    restored_count: int = 0
    error: Optional[str] = None


class DeleteResult(BaseModel):
    success: bool
    deleted_count: int = 0
    error: Optional[str] = None
