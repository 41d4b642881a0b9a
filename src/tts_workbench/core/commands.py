"""
Control-surface command map: discrete editor commands, their default
keyboard shortcuts, and dispatch onto an editing session.
"""
from __future__ import annotations
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional

from ..utils.logger import logger

if TYPE_CHECKING:
    from .playback import PlaybackController
    from .session import EditorSession


class EditorCommand(Enum):
    PLAY_STOP = "play_stop"
    COPY = "copy"
    CUT = "cut"
    PASTE = "paste"
    SAVE = "save"
    UNDO = "undo"
    REDO = "redo"


DEFAULT_KEY_BINDINGS: dict[str, EditorCommand] = {
    "Space": EditorCommand.PLAY_STOP,
    "Ctrl+C": EditorCommand.COPY,
    "Ctrl+X": EditorCommand.CUT,
    "Ctrl+V": EditorCommand.PASTE,
    "Ctrl+S": EditorCommand.SAVE,
    "Ctrl+Z": EditorCommand.UNDO,
    "Ctrl+Y": EditorCommand.REDO,
}


def normalize_key(sequence: str) -> str:
    """'ctrl + c' -> 'Ctrl+C', 'space' -> 'Space'."""
    parts = [p.strip() for p in sequence.split("+") if p.strip()]
    return "+".join(p.upper() if len(p) == 1 else p.capitalize() for p in parts)


class CommandDispatcher:
    """
    Routes commands from a keyboard or toolbar to session/playback operations.
    Play/stop acts on the selected region when there is one.
    """

    def __init__(
        self,
        session: "EditorSession",
        playback: Optional["PlaybackController"] = None,
        on_save: Optional[Callable[[bytes], None]] = None,
        bindings: Optional[dict[str, EditorCommand]] = None
    ):
        self.session = session
        self.playback = playback
        self.on_save = on_save
        self.bindings = {normalize_key(k): v for k, v in (bindings or DEFAULT_KEY_BINDINGS).items()}

    def handle_key(self, sequence: str) -> bool:
        """Run the command bound to a key sequence. Unbound keys are ignored."""
        command = self.bindings.get(normalize_key(sequence))
        if command is None:
            return False
        return self.dispatch(command)

    def dispatch(self, command: EditorCommand) -> bool:
        logger.debug(f"Command: {command.value}")
        session = self.session

        if command is EditorCommand.PLAY_STOP:
            return self._play_stop()
        if command is EditorCommand.COPY:
            return session.copy()
        if command is EditorCommand.CUT:
            return session.cut()
        if command is EditorCommand.PASTE:
            return session.paste()
        if command is EditorCommand.UNDO:
            return session.undo()
        if command is EditorCommand.REDO:
            return session.redo()
        if command is EditorCommand.SAVE:
            data = session.save()
            if self.on_save:
                self.on_save(data)
            return True
        return False

    def _play_stop(self) -> bool:
        playback = self.playback
        if playback is None:
            return False
        if playback.is_playing:
            playback.pause()
            return True

        if playback.buffer is not self.session.buffer:
            playback.load(self.session.buffer)
        playback.set_region(self.session.selection)
        return playback.play()
