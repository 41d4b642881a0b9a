from __future__ import annotations
from typing import Optional

from .buffer import PCMBuffer
from .config import UNDO_CONFIG
from ..utils.logger import logger


class EditHistory:
    """
    Linear undo/redo history of full buffer snapshots.

    snapshots[0] is the buffer as originally loaded; snapshots[cursor] is the
    current editable buffer. Committing after an undo discards the redo branch.
    """

    def __init__(self, original: PCMBuffer, max_depth: Optional[int] = UNDO_CONFIG.max_depth):
        if max_depth is not None and max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {max_depth}")
        self.snapshots: list[PCMBuffer] = [original]
        self.cursor = 0
        self.max_depth = max_depth

    @property
    def current(self) -> PCMBuffer:
        return self.snapshots[self.cursor]

    @property
    def original(self) -> PCMBuffer:
        return self.snapshots[0]

    @property
    def can_undo(self) -> bool:
        return self.cursor > 0

    @property
    def can_redo(self) -> bool:
        return self.cursor < len(self.snapshots) - 1

    def __len__(self) -> int:
        return len(self.snapshots)

    def commit(self, buffer: PCMBuffer, description: str = "Edit") -> PCMBuffer:
        del self.snapshots[self.cursor + 1:]
        self.snapshots.append(buffer)

        # The original always survives trimming
        if self.max_depth is not None and len(self.snapshots) - 1 > self.max_depth:
            del self.snapshots[1]

        self.cursor = len(self.snapshots) - 1
        logger.debug(f"Snapshot committed: {description} ({self.cursor + 1}/{len(self.snapshots)})")
        return buffer

    def undo(self) -> Optional[PCMBuffer]:
        if not self.can_undo:
            logger.debug("Nothing to undo")
            return None

        self.cursor -= 1
        logger.info(f"Undo -> snapshot {self.cursor}")
        return self.current

    def redo(self) -> Optional[PCMBuffer]:
        if not self.can_redo:
            logger.debug("Nothing to redo")
            return None

        self.cursor += 1
        logger.info(f"Redo -> snapshot {self.cursor}")
        return self.current

    def revert(self) -> PCMBuffer:
        """Commit the original buffer as a new, undoable snapshot."""
        return self.commit(self.original, "Revert to original")

    def clear(self) -> None:
        """Drop every snapshot except the original."""
        del self.snapshots[1:]
        self.cursor = 0
        logger.debug("Edit history cleared")
