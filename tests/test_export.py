"""
Tests for archive and directory export.
"""
import io
import zipfile

from tts_workbench.core.buffer import PCMBuffer
from tts_workbench.core.group import Group, Segment
from tts_workbench.core.wav_codec import decode_wav
from tts_workbench.services.export import export_archive, export_directory, iter_export_files
from conftest import SR, sine


def _group(label: str, seconds: float = 0.5) -> Group:
    return Group(label, [Segment("text", PCMBuffer(sine(seconds), SR))])


class TestExport:
    """Tests for export helpers."""

    def test_shared_label_gives_identical_files(self):
        files = dict(iter_export_files([_group("a&b")]))
        assert set(files) == {"a.wav", "b.wav"}
        assert files["a.wav"] == files["b.wav"]

    def test_all_failed_group_skipped(self, group):
        failed = Group("broken", [Segment.failed("x", "error")])
        names = [name for name, _ in iter_export_files([failed, group])]
        assert names == ["greeting.wav"]

    def test_merged_audio_exported(self, group):
        (_, data), = iter_export_files([group])
        assert decode_wav(data).sample_count == 3 * SR

    def test_archive_to_stream(self, group):
        stream = io.BytesIO()
        written = export_archive([group, _group("x & y")], stream)
        assert written == ["greeting.wav", "x.wav", "y.wav"]

        with zipfile.ZipFile(io.BytesIO(stream.getvalue())) as zf:
            assert zf.namelist() == written
            info = zf.getinfo("x.wav")
            assert info.compress_type == zipfile.ZIP_DEFLATED
            assert zf.read("x.wav") == zf.read("y.wav")

    def test_archive_to_path(self, tmp_path, group):
        path = tmp_path / "nested" / "out.zip"
        export_archive([group], path)
        with zipfile.ZipFile(path) as zf:
            assert decode_wav(zf.read("greeting.wav")).sample_count == 3 * SR

    def test_empty_archive(self):
        stream = io.BytesIO()
        assert export_archive([], stream) == []

    def test_directory(self, tmp_path):
        paths = export_directory([_group("one&two")], tmp_path / "wavs")
        assert [p.name for p in paths] == ["one.wav", "two.wav"]
        assert all(p.read_bytes()[:4] == b"RIFF" for p in paths)
