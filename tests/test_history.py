"""
Tests for EditHistory.
"""
import pytest

from tts_workbench.core.buffer import PCMBuffer
from tts_workbench.core.history import EditHistory


def _buf(n: int) -> PCMBuffer:
    return PCMBuffer.silent(n, samplerate=8000)


@pytest.fixture
def history() -> EditHistory:
    return EditHistory(_buf(1), max_depth=10)


class TestEditHistory:
    """Tests for EditHistory functionality."""

    def test_initial_state(self, history):
        assert history.cursor == 0
        assert len(history) == 1
        assert not history.can_undo
        assert not history.can_redo
        assert history.current is history.original

    def test_commit_advances_cursor(self, history):
        b = _buf(2)
        history.commit(b)
        assert history.current is b
        assert history.cursor == 1
        assert history.can_undo

    def test_undo_at_start_is_noop(self, history):
        assert history.undo() is None
        assert history.cursor == 0
        assert len(history) == 1

    def test_redo_at_end_is_noop(self, history):
        history.commit(_buf(2))
        assert history.redo() is None
        assert history.cursor == 1
        assert len(history) == 2

    def test_undo_redo_cycle(self, history):
        a, b = _buf(2), _buf(3)
        history.commit(a)
        history.commit(b)

        assert history.undo() is a
        assert history.undo() is history.original
        assert history.redo() is a
        assert history.redo() is b

    def test_commit_discards_redo_branch(self, history):
        a, b, c = _buf(2), _buf(3), _buf(4)
        history.commit(a)
        history.commit(b)
        history.undo()
        history.undo()

        history.commit(c)
        assert history.snapshots == [history.original, c]
        assert not history.can_redo
        assert history.redo() is None
        assert history.current is c

    def test_max_depth_keeps_original(self):
        original = _buf(1)
        history = EditHistory(original, max_depth=3)
        for n in range(2, 8):
            history.commit(_buf(n))

        assert len(history) == 4
        assert history.original is original
        assert history.current.sample_count == 7
        assert [s.sample_count for s in history.snapshots] == [1, 5, 6, 7]

    def test_invalid_max_depth(self):
        with pytest.raises(ValueError):
            EditHistory(_buf(1), max_depth=0)

    def test_unbounded(self):
        history = EditHistory(_buf(1), max_depth=None)
        for n in range(2, 300):
            history.commit(_buf(n))
        assert len(history) == 299

    def test_revert_is_undoable(self, history):
        edited = _buf(5)
        history.commit(edited)
        history.revert()
        assert history.current is history.original
        assert history.undo() is edited

    def test_clear(self, history):
        history.commit(_buf(2))
        history.clear()
        assert len(history) == 1
        assert history.cursor == 0
