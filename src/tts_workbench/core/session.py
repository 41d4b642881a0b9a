from __future__ import annotations
import math
from typing import Optional
from PyQt6.QtCore import QObject, pyqtSignal

from .buffer import PCMBuffer
from .clipboard import Clipboard
from .config import EDIT_CONFIG, UNDO_CONFIG
from .editing import delete_range, extract_range, insert_at, replace_range, scale_range
from .history import EditHistory
from .selection import Selection
from .wav_codec import decode_wav, encode_wav
from ..utils.logger import logger


class EditorSession(QObject):
    """
    Interactive editing of one segment's audio.

    Exposes the control-surface operations (copy, cut, paste, gain, undo,
    redo, save) over an EditHistory. Every edit commits a full new snapshot.
    Operations return True when state changed and False for a no-op
    (no selection, empty clipboard, out-of-range gain), which is never an error.
    Not thread-safe: one session is driven by one UI thread.
    """
    bufferChanged = pyqtSignal(object)
    selectionChanged = pyqtSignal(object)
    historyChanged = pyqtSignal(bool, bool)  # can_undo, can_redo
    saved = pyqtSignal(bytes)

    def __init__(
        self,
        buffer: PCMBuffer,
        clipboard: Optional[Clipboard] = None,
        max_depth: Optional[int] = UNDO_CONFIG.max_depth
    ):
        super().__init__()
        self.history = EditHistory(buffer, max_depth=max_depth)
        self.clipboard = clipboard if clipboard is not None else Clipboard()
        self._selection: Optional[Selection] = None
        self._playhead = 0
        logger.info(f"Editor session opened on {buffer!r}")

    @classmethod
    def from_wav(cls, data: bytes, clipboard: Optional[Clipboard] = None) -> "EditorSession":
        """Open a session on encoded audio. Raises DecodeError on bad input."""
        return cls(decode_wav(data), clipboard=clipboard)

    # --- State ---

    @property
    def buffer(self) -> PCMBuffer:
        return self.history.current

    @property
    def selection(self) -> Optional[Selection]:
        return self._selection

    @property
    def playhead(self) -> int:
        """Insert position (in samples) used by paste when nothing is selected."""
        return self._playhead

    @playhead.setter
    def playhead(self, value: int) -> None:
        self._playhead = max(0, min(int(value), self.buffer.sample_count))

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    @property
    def is_modified(self) -> bool:
        return self.buffer is not self.history.original

    # --- Selection ---

    def set_selection(self, start: int, end: int) -> bool:
        n = self.buffer.sample_count
        if start < 0 or start > end:
            logger.debug(f"Ignoring invalid selection [{start}, {end})")
            return False

        self._selection = Selection(min(start, n), min(end, n))
        self.selectionChanged.emit(self._selection)
        return True

    def set_selection_seconds(self, start_s: float, end_s: float) -> bool:
        sr = self.buffer.samplerate
        return self.set_selection(math.floor(start_s * sr), math.floor(end_s * sr))

    def clear_selection(self) -> bool:
        if self._selection is None:
            return False
        self._selection = None
        self.selectionChanged.emit(None)
        return True

    def _active_selection(self) -> Optional[Selection]:
        if self._selection is None or self._selection.is_empty:
            return None
        return self._selection

    # --- Editing ---

    def _commit(self, buffer: PCMBuffer, description: str) -> None:
        self.history.commit(buffer, description)
        self.playhead = self._playhead
        self.bufferChanged.emit(buffer)
        self.historyChanged.emit(self.can_undo, self.can_redo)
        logger.info(f"{description}: {buffer.sample_count} samples")

    def copy(self) -> bool:
        sel = self._active_selection()
        if sel is None:
            logger.debug("Copy ignored: no selection")
            return False
        self.clipboard.put(extract_range(self.buffer, sel.start, sel.end))
        return True

    def cut(self) -> bool:
        sel = self._active_selection()
        if sel is None:
            logger.debug("Cut ignored: no selection")
            return False

        current = self.buffer
        self.clipboard.put(extract_range(current, sel.start, sel.end))
        self._playhead = sel.start
        self._commit(delete_range(current, sel.start, sel.end), f"Cut [{sel.start}, {sel.end})")
        self.clear_selection()
        return True

    def paste(self) -> bool:
        """Insert the clipboard at the selection start, or at the playhead."""
        clip = self.clipboard.content
        if clip is None or clip.is_empty:
            logger.debug("Paste ignored: clipboard empty")
            return False

        position = self._selection.start if self._selection is not None else self._playhead
        self._commit(insert_at(self.buffer, clip, position), f"Paste at {position}")
        return True

    def paste_over(self) -> bool:
        """Replace the selected range with the clipboard."""
        clip = self.clipboard.content
        sel = self._selection
        if clip is None or sel is None:
            logger.debug("Paste-over ignored: needs both a selection and clipboard content")
            return False

        self._commit(replace_range(self.buffer, clip, sel.start, sel.end), f"Replace [{sel.start}, {sel.end})")
        self.clear_selection()
        return True

    def adjust_gain(self, gain: float) -> bool:
        """Scale the selection (or the whole buffer when nothing is selected)."""
        if not EDIT_CONFIG.min_gain <= gain <= EDIT_CONFIG.max_gain:
            logger.debug(f"Gain {gain} outside [{EDIT_CONFIG.min_gain}, {EDIT_CONFIG.max_gain}]")
            return False
        if self.buffer.is_empty:
            return False

        if self._selection is None:
            self._commit(scale_range(self.buffer, gain), f"Gain x{gain:g}")
            return True

        sel = self._active_selection()
        if sel is None:
            return False
        self._commit(scale_range(self.buffer, gain, sel.start, sel.end),
                     f"Gain x{gain:g} on [{sel.start}, {sel.end})")
        return True

    # --- History ---

    def _restored(self) -> None:
        buffer = self.buffer
        if self._selection is not None and not self._selection.fits(buffer.sample_count):
            self.clear_selection()
        self.playhead = self._playhead
        self.bufferChanged.emit(buffer)
        self.historyChanged.emit(self.can_undo, self.can_redo)

    def undo(self) -> bool:
        if self.history.undo() is None:
            return False
        self._restored()
        return True

    def redo(self) -> bool:
        if self.history.redo() is None:
            return False
        self._restored()
        return True

    def revert(self) -> bool:
        """Return to the originally loaded audio as an undoable step."""
        if not self.is_modified:
            return False
        self.history.revert()
        self._restored()
        return True

    # --- Output ---

    def save(self) -> bytes:
        """Encode the current buffer as WAV."""
        data = encode_wav(self.buffer)
        self.saved.emit(data)
        logger.info(f"Session saved ({len(data)} bytes)")
        return data
