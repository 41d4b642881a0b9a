"""
Pytest configuration and fixtures for TTS Workbench tests.
"""
import pytest
import numpy as np

from tts_workbench.core.buffer import PCMBuffer
from tts_workbench.core.clipboard import Clipboard
from tts_workbench.core.group import Group, Segment
from tts_workbench.core.session import EditorSession
from tts_workbench.core.wav_codec import encode_wav

SR = 8000


def sine(seconds: float, freq: float = 440.0, sr: int = SR, amplitude: float = 0.5) -> np.ndarray:
    t = np.arange(int(seconds * sr), dtype=np.float32) / sr
    return (amplitude * np.sin(2 * np.pi * freq * t)).astype(np.float32)


@pytest.fixture
def mono_buffer() -> PCMBuffer:
    """3 seconds of mono 8 kHz audio."""
    return PCMBuffer(sine(3.0), SR)


@pytest.fixture
def stereo_buffer() -> PCMBuffer:
    """1 second of stereo 8 kHz audio with distinct channels."""
    return PCMBuffer(np.column_stack((sine(1.0, 440), sine(1.0, 880))), SR)


@pytest.fixture
def ramp_buffer() -> PCMBuffer:
    """10-sample mono ramp; sample i == i / 10."""
    return PCMBuffer(np.arange(10, dtype=np.float32) / 10, SR)


@pytest.fixture
def session(mono_buffer) -> EditorSession:
    return EditorSession(mono_buffer, clipboard=Clipboard())


@pytest.fixture
def wav_bytes(mono_buffer) -> bytes:
    return encode_wav(mono_buffer)


@pytest.fixture
def group() -> Group:
    """A 1s segment, a failed segment and a 2s segment."""
    return Group("greeting", [
        Segment("one", PCMBuffer(sine(1.0), SR)),
        Segment.failed("two", "backend down"),
        Segment("three", PCMBuffer(sine(2.0), SR)),
    ])
