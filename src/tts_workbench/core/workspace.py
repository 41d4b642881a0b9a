"""
Workspace abstraction for TTS Workbench.
Holds the groups produced by a synthesis batch and the shared clipboard.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Union

from .buffer import PCMBuffer
from .clipboard import Clipboard
from .group import Group, Segment
from .session import EditorSession
from .types import SynthesizeFunc
from .wav_codec import decode_wav
from ..utils.logger import logger


@dataclass
class Workspace:
    """
    Ordered groups of synthesized segments.
    Editing sessions opened here share one clipboard.
    """
    name: str = "Untitled Workspace"
    groups: list[Group] = field(default_factory=list)
    clipboard: Clipboard = field(default_factory=Clipboard, repr=False)

    @property
    def segment_count(self) -> int:
        return sum(len(g) for g in self.groups)

    @property
    def failed_count(self) -> int:
        return sum(1 for g in self.groups for s in g.segments if not s.ok)

    def add_group(self, group: Group) -> int:
        """Add a group and return its index."""
        self.groups.append(group)
        return len(self.groups) - 1

    def remove_group(self, index: int) -> Optional[Group]:
        """Remove group at index and return it."""
        if 0 <= index < len(self.groups):
            return self.groups.pop(index)
        return None

    def get_group(self, index: int) -> Optional[Group]:
        """Get group by index safely."""
        if 0 <= index < len(self.groups):
            return self.groups[index]
        return None

    def get_segment(self, group_index: int, segment_index: int) -> Optional[Segment]:
        group = self.get_group(group_index)
        return group.get_segment(segment_index) if group is not None else None

    # --- Segment operations ---

    def open_editor(self, group_index: int, segment_index: int) -> Optional[EditorSession]:
        """Start an editing session on a segment's audio (None for missing or failed segments)."""
        segment = self.get_segment(group_index, segment_index)
        if segment is None or segment.buffer is None:
            return None
        return EditorSession(segment.buffer, clipboard=self.clipboard)

    def apply_edit(self, group_index: int, segment_index: int, audio: Union[bytes, PCMBuffer]) -> bool:
        """
        Store edited audio (a buffer or saved WAV bytes) back into a segment.
        Raises DecodeError when the bytes cannot be decoded.
        """
        group = self.get_group(group_index)
        if group is None:
            return False
        buffer = decode_wav(audio) if isinstance(audio, (bytes, bytearray)) else audio
        return group.update_segment(segment_index, buffer)

    def delete_segment(self, group_index: int, segment_index: int) -> Optional[Segment]:
        """Delete a segment; a group left without segments is removed too."""
        group = self.get_group(group_index)
        if group is None:
            return None
        segment = group.delete_segment(segment_index)
        if segment is not None and len(group) == 0:
            self.groups.pop(group_index)
            logger.info(f"Group {group.label!r} removed (no segments left)")
        return segment

    def move_segment(self, group_index: int, segment_index: int, new_index: int) -> bool:
        group = self.get_group(group_index)
        return group is not None and group.move_segment(segment_index, new_index)

    def regenerate_segment(
        self,
        group_index: int,
        segment_index: int,
        text: str,
        synthesize: SynthesizeFunc
    ) -> Segment:
        """
        Re-synthesize one segment with new text.

        On failure the segment is left untouched and the SynthesisError or
        DecodeError propagates to the caller.
        """
        group = self.get_group(group_index)
        if group is None or group.get_segment(segment_index) is None:
            raise IndexError(f"No segment {segment_index} in group {group_index}")

        buffer = decode_wav(synthesize(text))
        group.update_segment(segment_index, buffer, text=text)
        logger.info(f"Regenerated segment {segment_index} of group {group.label!r}")
        return group.segments[segment_index]

    def clear(self) -> None:
        """Reset workspace to empty state."""
        self.groups.clear()
        self.clipboard.clear()
