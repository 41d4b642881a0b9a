"""
Tests for the command map and dispatcher.
"""
import pytest

from tts_workbench.core.commands import (
    DEFAULT_KEY_BINDINGS, CommandDispatcher, EditorCommand, normalize_key
)


class FakePlayback:
    """Records transport calls instead of opening an audio stream."""

    def __init__(self):
        self.buffer = None
        self.region = None
        self.is_playing = False
        self.calls = []

    def load(self, buffer):
        self.buffer = buffer
        self.calls.append("load")

    def set_region(self, region):
        self.region = region

    def play(self):
        self.is_playing = True
        self.calls.append("play")
        return True

    def pause(self):
        self.is_playing = False
        self.calls.append("pause")


@pytest.fixture
def dispatcher(session) -> CommandDispatcher:
    return CommandDispatcher(session, playback=FakePlayback())


class TestKeyBindings:
    """Tests for the default shortcut map."""

    def test_all_commands_bound(self):
        assert set(DEFAULT_KEY_BINDINGS.values()) == set(EditorCommand)

    @pytest.mark.parametrize("raw,expected", [
        ("ctrl+c", "Ctrl+C"),
        ("Ctrl + z", "Ctrl+Z"),
        ("space", "Space"),
        ("CTRL+Y", "Ctrl+Y"),
    ])
    def test_normalize_key(self, raw, expected):
        assert normalize_key(raw) == expected


class TestDispatcher:
    """Tests for CommandDispatcher."""

    def test_cut_undo_redo_by_keys(self, dispatcher, session):
        session.set_selection(8000, 16000)
        assert dispatcher.handle_key("Ctrl+X")
        assert session.buffer.sample_count == 16000
        assert dispatcher.handle_key("ctrl+z")
        assert session.buffer.sample_count == 24000
        assert dispatcher.handle_key("Ctrl+Y")
        assert session.buffer.sample_count == 16000

    def test_copy_paste_by_keys(self, dispatcher, session):
        session.set_selection(0, 100)
        assert dispatcher.handle_key("Ctrl+C")
        assert dispatcher.handle_key("Ctrl+V")
        assert session.buffer.sample_count == 24100

    def test_noop_reported(self, dispatcher):
        assert not dispatcher.handle_key("Ctrl+C")
        assert not dispatcher.handle_key("Ctrl+Z")

    def test_unbound_key_ignored(self, dispatcher):
        assert not dispatcher.handle_key("Ctrl+Q")

    def test_save_calls_handler(self, session):
        saved = []
        dispatcher = CommandDispatcher(session, on_save=saved.append)
        assert dispatcher.handle_key("Ctrl+S")
        assert saved[0][:4] == b'RIFF'

    def test_play_stop_uses_selection(self, dispatcher, session):
        session.set_selection(100, 200)
        assert dispatcher.handle_key("Space")
        playback = dispatcher.playback
        assert playback.buffer is session.buffer
        assert (playback.region.start, playback.region.end) == (100, 200)
        assert playback.calls == ["load", "play"]

        assert dispatcher.handle_key("Space")
        assert playback.calls[-1] == "pause"

    def test_play_reloads_after_edit(self, dispatcher, session):
        dispatcher.handle_key("Space")
        dispatcher.handle_key("Space")
        session.adjust_gain(2.0)
        dispatcher.handle_key("Space")
        assert dispatcher.playback.calls.count("load") == 2
        assert dispatcher.playback.buffer is session.buffer

    def test_play_without_controller(self, session):
        assert not CommandDispatcher(session).handle_key("Space")

    def test_custom_bindings(self, session):
        dispatcher = CommandDispatcher(session, bindings={"ctrl+k": EditorCommand.SAVE})
        assert dispatcher.handle_key("Ctrl+K")
        assert not dispatcher.handle_key("Ctrl+S")
