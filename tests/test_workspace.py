"""
Tests for Workspace.
"""
import pytest

from tts_workbench.core.buffer import PCMBuffer
from tts_workbench.core.group import Group, Segment
from tts_workbench.core.types import DecodeError, SynthesisError
from tts_workbench.core.wav_codec import encode_wav
from tts_workbench.core.workspace import Workspace
from conftest import SR, sine


@pytest.fixture
def workspace(group) -> Workspace:
    ws = Workspace(name="Test")
    ws.add_group(group)
    ws.add_group(Group("solo", [Segment("only", PCMBuffer(sine(0.5), SR))]))
    return ws


class TestWorkspace:
    """Tests for Workspace functionality."""

    def test_counts(self, workspace):
        assert len(workspace.groups) == 2
        assert workspace.segment_count == 4
        assert workspace.failed_count == 1

    def test_get_group_out_of_range(self, workspace):
        assert workspace.get_group(5) is None
        assert workspace.get_segment(5, 0) is None
        assert workspace.get_segment(0, 9) is None

    def test_remove_group(self, workspace):
        removed = workspace.remove_group(1)
        assert removed.label == "solo"
        assert len(workspace.groups) == 1
        assert workspace.remove_group(7) is None

    def test_open_editor_shares_clipboard(self, workspace):
        first = workspace.open_editor(0, 0)
        second = workspace.open_editor(1, 0)
        assert first.clipboard is workspace.clipboard
        first.set_selection(0, 100)
        first.copy()
        assert second.paste()

    def test_open_editor_on_failed_segment(self, workspace):
        assert workspace.open_editor(0, 1) is None
        assert workspace.open_editor(4, 0) is None

    def test_apply_edit_from_session(self, workspace):
        session = workspace.open_editor(0, 0)
        session.set_selection(0, 4000)
        session.cut()
        group = workspace.get_group(0)
        group.merged()

        assert workspace.apply_edit(0, 0, session.save())
        assert group.is_dirty
        assert group.get_segment(0).buffer.sample_count == 4000
        assert group.merged().sample_count == 4000 + 2 * SR

    def test_apply_edit_buffer(self, workspace):
        buffer = PCMBuffer.silent(10, samplerate=SR)
        assert workspace.apply_edit(1, 0, buffer)
        assert workspace.get_segment(1, 0).buffer is buffer

    def test_apply_edit_bad_bytes(self, workspace):
        with pytest.raises(DecodeError):
            workspace.apply_edit(0, 0, b'garbage')

    def test_delete_segment(self, workspace):
        removed = workspace.delete_segment(0, 1)
        assert removed.text == "two"
        assert len(workspace.get_group(0)) == 2

    def test_delete_last_segment_removes_group(self, workspace):
        workspace.delete_segment(1, 0)
        assert len(workspace.groups) == 1
        assert workspace.groups[0].label == "greeting"

    def test_move_segment(self, workspace):
        assert workspace.move_segment(0, 0, 2)
        assert [s.text for s in workspace.get_group(0).segments] == ["two", "three", "one"]
        assert not workspace.move_segment(3, 0, 0)

    def test_regenerate_replaces_failed_segment(self, workspace):
        calls = []

        def synthesize(text):
            calls.append(text)
            return encode_wav(PCMBuffer(sine(0.25), SR))

        segment = workspace.regenerate_segment(0, 1, "deux", synthesize)
        assert calls == ["deux"]
        assert segment.ok
        assert segment.text == "deux"
        assert workspace.failed_count == 0
        assert workspace.get_group(0).merged().sample_count == int(3.25 * SR)

    def test_regenerate_failure_leaves_segment(self, workspace):
        def synthesize(text):
            raise SynthesisError("server down", status_code=503)

        group = workspace.get_group(0)
        before = group.get_segment(0)
        with pytest.raises(SynthesisError):
            workspace.regenerate_segment(0, 0, "uno", synthesize)
        assert group.get_segment(0) is before

    def test_regenerate_undecodable_audio(self, workspace):
        with pytest.raises(DecodeError):
            workspace.regenerate_segment(0, 0, "uno", lambda text: b'oops')
        assert workspace.get_segment(0, 0).text == "one"

    def test_regenerate_missing_segment(self, workspace):
        with pytest.raises(IndexError):
            workspace.regenerate_segment(0, 9, "x", lambda text: b'')

    def test_clear(self, workspace):
        workspace.clipboard.put(PCMBuffer.silent(1, samplerate=SR))
        workspace.clear()
        assert workspace.groups == []
        assert workspace.clipboard.is_empty
