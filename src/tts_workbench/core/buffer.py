"""
PCM buffer: the fundamental audio container of TTS Workbench.
Holds fixed-length multi-channel float32 samples plus a sample rate.
"""
from __future__ import annotations
import math
from typing import Sequence
import numpy as np

from .config import AUDIO_CONFIG
from .types import AudioArray, ChannelArray


def clamp_samples(data: np.ndarray) -> AudioArray:
    """
    Return a float32 copy with NaN replaced by 0, infinities by +/-1,
    and every sample clamped to [-1, 1].
    """
    out = np.nan_to_num(np.asarray(data, dtype=np.float32), nan=0.0, posinf=1.0, neginf=-1.0)
    np.clip(out, -1.0, 1.0, out=out)
    return out


class PCMBuffer:
    """
    Immutable multi-channel audio buffer.

    Samples are stored as a read-only float32 array of shape (samples, channels),
    so one buffer can be shared by history snapshots, the clipboard and segments
    without any holder being able to perturb the others. Editing operations
    always allocate a new buffer. Every sample is finite and within [-1, 1]:
    the public constructors sanitize their input, and operations only
    recombine samples of buffers that already hold the invariant.
    """
    __slots__ = ('_data', '_samplerate')

    def __init__(self, data: Sequence | np.ndarray, samplerate: int = AUDIO_CONFIG.default_samplerate) -> None:
        """
        Create a buffer from array-like audio.

        Args:
            data: (samples, channels) array, or a 1-D array for mono audio.
                  The samples are copied and sanitized with clamp_samples.
            samplerate: Sample rate in Hz
        """
        self._assign(clamp_samples(data), samplerate)

    def _assign(self, array: np.ndarray, samplerate: int) -> None:
        if array.ndim == 1:
            array = array.reshape(-1, 1)
        if array.ndim != 2 or array.shape[1] == 0:
            raise ValueError(f"Expected (samples, channels) audio, got shape {array.shape}")
        if samplerate <= 0:
            raise ValueError(f"Sample rate must be positive, got {samplerate}")

        array = np.ascontiguousarray(array, dtype=np.float32)
        array.setflags(write=False)
        self._data = array
        self._samplerate = int(samplerate)

    @classmethod
    def _adopt(cls, array: np.ndarray, samplerate: int) -> "PCMBuffer":
        """Wrap a freshly allocated array without copying it. The caller gives up the array."""
        buffer = cls.__new__(cls)
        buffer._assign(array, samplerate)
        return buffer

    # --- Constructors ---

    @classmethod
    def from_channels(cls, channels: Sequence[Sequence[float]], samplerate: int = AUDIO_CONFIG.default_samplerate) -> "PCMBuffer":
        """Build a buffer from one sample sequence per channel."""
        if len(channels) == 0:
            raise ValueError("A buffer needs at least one channel")

        arrays = [np.asarray(c, dtype=np.float32) for c in channels]
        if len({a.shape for a in arrays}) != 1 or arrays[0].ndim != 1:
            raise ValueError("All channels must be 1-D and of equal length")

        return cls._adopt(clamp_samples(np.stack(arrays, axis=1)), samplerate)

    @classmethod
    def silent(cls, sample_count: int, channels: int = 1, samplerate: int = AUDIO_CONFIG.default_samplerate) -> "PCMBuffer":
        """Zero-filled buffer."""
        return cls._adopt(np.zeros((max(0, sample_count), channels), dtype=np.float32), samplerate)

    @classmethod
    def empty(cls, channels: int = 1, samplerate: int = AUDIO_CONFIG.default_samplerate) -> "PCMBuffer":
        """Zero-length buffer."""
        return cls.silent(0, channels, samplerate)

    # --- Properties ---

    @property
    def data(self) -> AudioArray:
        """Read-only (samples, channels) sample array."""
        return self._data

    @property
    def samplerate(self) -> int:
        return self._samplerate

    @property
    def sample_count(self) -> int:
        return self._data.shape[0]

    @property
    def num_channels(self) -> int:
        return self._data.shape[1]

    @property
    def duration_seconds(self) -> float:
        return self.sample_count / self._samplerate

    @property
    def is_empty(self) -> bool:
        return self.sample_count == 0

    def __len__(self) -> int:
        return self.sample_count

    def channel(self, index: int) -> ChannelArray:
        """Read-only view of one channel's samples."""
        return self._data[:, index]

    # --- Utilities ---

    def copy(self) -> "PCMBuffer":
        """Independently owned copy of this buffer."""
        return PCMBuffer._adopt(self._data.copy(), self._samplerate)

    def to_array(self) -> AudioArray:
        """Writable copy of the samples."""
        return self._data.copy()

    def resampled(self, samplerate: int) -> "PCMBuffer":
        """
        Return this audio at another sample rate (librosa, soxr backend).
        Used only to reconcile rates between independently decoded buffers.
        """
        if samplerate == self._samplerate:
            return self
        if self.is_empty:
            return PCMBuffer.empty(self.num_channels, samplerate)

        import librosa

        resampled = librosa.resample(
            np.ascontiguousarray(self._data.T),
            orig_sr=self._samplerate,
            target_sr=samplerate,
            axis=-1,
        )
        return PCMBuffer._adopt(clamp_samples(resampled.T), samplerate)

    def seconds_to_sample(self, seconds: float) -> int:
        """Convert a time position to a sample index (floored, clamped to the buffer)."""
        index = math.floor(seconds * self._samplerate)
        return max(0, min(index, self.sample_count))

    def equals(self, other: "PCMBuffer", atol: float = 0.0) -> bool:
        """Sample-wise comparison with an optional absolute tolerance."""
        if not isinstance(other, PCMBuffer):
            return False
        if self._samplerate != other._samplerate or self._data.shape != other._data.shape:
            return False
        return bool(np.allclose(self._data, other._data, rtol=0.0, atol=atol))

    def __repr__(self) -> str:
        return (f"PCMBuffer(channels={self.num_channels}, samples={self.sample_count}, "
                f"samplerate={self._samplerate}, {self.duration_seconds:.2f}s)")
