from __future__ import annotations
from typing import Optional

from .buffer import PCMBuffer
from ..utils.logger import logger


class Clipboard:
    """
    Single-slot holder of copied or cut audio.
    Each copy overwrites the slot; reading does not clear it, so paste is repeatable.
    """
    __slots__ = ('_content',)

    def __init__(self) -> None:
        self._content: Optional[PCMBuffer] = None

    @property
    def content(self) -> Optional[PCMBuffer]:
        return self._content

    @property
    def is_empty(self) -> bool:
        return self._content is None

    def put(self, buffer: PCMBuffer) -> None:
        self._content = buffer
        logger.debug(f"Clipboard holds {buffer!r}")

    def clear(self) -> None:
        self._content = None
