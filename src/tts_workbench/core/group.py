"""
Segment/Group model: ties synthesized text pieces to their audio and keeps
each group's merged audio cache in step with its segments.
"""
from __future__ import annotations
from dataclasses import dataclass, replace
import threading
from typing import Iterable, Optional

from .buffer import PCMBuffer
from .config import EXPORT_CONFIG, MergeState
from .merge import merge_buffers
from ..utils.logger import logger


@dataclass(frozen=True)
class Segment:
    """
    One synthesized piece of text.
    Either carries audio or, when synthesis failed, an error message.
    """
    text: str
    buffer: Optional[PCMBuffer] = None
    error: Optional[str] = None
    played: bool = False  # UI hint only

    @classmethod
    def failed(cls, text: str, error: str) -> "Segment":
        return cls(text=text, buffer=None, error=error)

    @property
    def ok(self) -> bool:
        return self.buffer is not None and self.error is None

    @property
    def duration_seconds(self) -> float:
        return self.buffer.duration_seconds if self.buffer is not None else 0.0


class Group:
    """
    An ordered list of segments exported together under one label.

    The merged audio is cached. Every mutation goes through a method here and
    marks the cache dirty, so merged() never serves stale audio.
    """

    def __init__(self, label: str, segments: Iterable[Segment] = (), text: str = ""):
        self.label = str(label)
        self.text = text
        self._segments: list[Segment] = list(segments)
        self._merged: Optional[PCMBuffer] = None
        self._lock = threading.Lock()

    @property
    def segments(self) -> tuple[Segment, ...]:
        return tuple(self._segments)

    def __len__(self) -> int:
        return len(self._segments)

    @property
    def names(self) -> list[str]:
        """Output names encoded in the label (several names share one audio)."""
        names = [n.strip() for n in self.label.split(EXPORT_CONFIG.name_delimiter)]
        return [n for n in names if n]

    @property
    def state(self) -> MergeState:
        return MergeState.CLEAN if self._merged is not None else MergeState.DIRTY

    @property
    def is_dirty(self) -> bool:
        return self.state is MergeState.DIRTY

    @property
    def valid_segments(self) -> list[Segment]:
        return [s for s in self._segments if s.ok]

    @property
    def has_valid_segments(self) -> bool:
        return any(s.ok for s in self._segments)

    def get_segment(self, index: int) -> Optional[Segment]:
        """Get segment by index safely."""
        if 0 <= index < len(self._segments):
            return self._segments[index]
        return None

    # --- Mutations (all invalidate the merge cache) ---

    def invalidate(self) -> None:
        with self._lock:
            self._merged = None

    def add_segment(self, segment: Segment) -> int:
        """Append a segment and return its index."""
        self._segments.append(segment)
        self.invalidate()
        return len(self._segments) - 1

    def update_segment(self, index: int, buffer: PCMBuffer, text: Optional[str] = None) -> bool:
        """Replace a segment's audio (edit saved or regenerated), clearing any error."""
        segment = self.get_segment(index)
        if segment is None:
            return False

        self._segments[index] = replace(
            segment,
            buffer=buffer,
            error=None,
            played=False,
            text=segment.text if text is None else text,
        )
        self.invalidate()
        logger.debug(f"Group {self.label!r}: segment {index} updated")
        return True

    def delete_segment(self, index: int) -> Optional[Segment]:
        """Remove segment at index and return it."""
        if not 0 <= index < len(self._segments):
            return None
        segment = self._segments.pop(index)
        self.invalidate()
        return segment

    def move_segment(self, index: int, new_index: int) -> bool:
        """Reorder: move the segment at index to new_index."""
        n = len(self._segments)
        if not (0 <= index < n and 0 <= new_index < n):
            return False
        if index != new_index:
            self._segments.insert(new_index, self._segments.pop(index))
            self.invalidate()
        return True

    def mark_played(self, index: int, played: bool = True) -> None:
        """Set the UI played flag; audio is unchanged so the cache stays valid."""
        segment = self.get_segment(index)
        if segment is not None:
            self._segments[index] = replace(segment, played=played)

    # --- Merge ---

    def merged(self) -> PCMBuffer:
        """
        The group's merged audio, re-merging first when dirty.
        The cache slot is only assigned once the merge has completed.
        """
        with self._lock:
            if self._merged is None:
                self._merged = merge_buffers([s.buffer if s.ok else None for s in self._segments])
                logger.info(f"Group {self.label!r} merged: {self._merged.duration_seconds:.2f}s")
            return self._merged

    def __repr__(self) -> str:
        return f"Group(label={self.label!r}, segments={len(self._segments)}, state={self.state.name})"
