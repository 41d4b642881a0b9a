"""
Buffer editing operations for TTS Workbench.
All functions are pure (no side effects): they allocate and return a new
PCMBuffer and never touch their inputs. Invalid ranges, which come from
transient UI selections rather than programming errors, are no-ops that
hand back the input buffer unchanged.
"""
from __future__ import annotations
from typing import Optional
import numpy as np

from .buffer import PCMBuffer, clamp_samples
from .types import AudioArray
from ..utils.logger import logger


def _clamp_offset(value: int, length: int) -> int:
    return max(0, min(int(value), length))


def _fit_channels(insert: PCMBuffer, channels: int) -> AudioArray:
    """
    Shape insert data to the target channel count.
    Missing channels reuse the insert's channel 0; surplus channels are dropped.
    """
    data = insert.data
    if insert.num_channels >= channels:
        return data[:, :channels]

    out = np.empty((insert.sample_count, channels), dtype=np.float32)
    out[:, :insert.num_channels] = data
    out[:, insert.num_channels:] = data[:, :1]
    return out


def extract_range(buffer: PCMBuffer, start: int, end: int) -> PCMBuffer:
    """
    Copy samples [start, end) from every channel.

    Args:
        buffer: Source audio
        start: First sample (inclusive)
        end: Last sample (exclusive)

    Returns:
        New buffer; zero-length when end <= start
    """
    n = buffer.sample_count
    start, end = _clamp_offset(start, n), _clamp_offset(end, n)
    if end <= start:
        return PCMBuffer.empty(buffer.num_channels, buffer.samplerate)
    return PCMBuffer._adopt(buffer.data[start:end].copy(), buffer.samplerate)


def replace_range(buffer: PCMBuffer, insert: PCMBuffer, start: int, end: int) -> PCMBuffer:
    """
    Replace samples [start, end) with the full content of another buffer.

    The result keeps the channel count and sample rate of `buffer`.
    Result length = len(buffer) - (end - start) + len(insert).

    Args:
        buffer: Audio being edited
        insert: Audio placed in the gap
        start: Gap start (inclusive)
        end: Gap end (exclusive)

    Returns:
        New buffer, or `buffer` itself when start is negative or start > end
    """
    if start < 0 or start > end:
        logger.debug("replace_range ignored: invalid range [%d, %d)", start, end)
        return buffer

    n = buffer.sample_count
    start, end = _clamp_offset(start, n), _clamp_offset(end, n)
    if insert.samplerate != buffer.samplerate:
        logger.debug("Inserting %d Hz audio into %d Hz buffer without resampling",
                     insert.samplerate, buffer.samplerate)

    fill = _fit_channels(insert, buffer.num_channels)
    insert_len = fill.shape[0]

    out = np.empty((n - (end - start) + insert_len, buffer.num_channels), dtype=np.float32)
    out[:start] = buffer.data[:start]
    out[start:start + insert_len] = fill
    out[start + insert_len:] = buffer.data[end:]
    return PCMBuffer._adopt(out, buffer.samplerate)


def insert_at(buffer: PCMBuffer, insert: PCMBuffer, position: int) -> PCMBuffer:
    """Insert audio before sample `position`."""
    return replace_range(buffer, insert, position, position)


def delete_range(buffer: PCMBuffer, start: int, end: int) -> PCMBuffer:
    """Remove samples [start, end)."""
    return replace_range(buffer, PCMBuffer.empty(buffer.num_channels, buffer.samplerate), start, end)


def scale_range(
    buffer: PCMBuffer,
    gain: float,
    start: Optional[int] = None,
    end: Optional[int] = None
) -> PCMBuffer:
    """
    Multiply samples in [start, end) by a gain factor, clamping to [-1, 1].

    Args:
        buffer: Source audio
        gain: Linear gain multiplier (1.0 = no change)
        start: Range start; None = beginning of the buffer
        end: Range end; None = end of the buffer

    Returns:
        New buffer; samples outside the range are copied unchanged
    """
    n = buffer.sample_count
    start = 0 if start is None else start
    end = n if end is None else end
    if start < 0 or start > end:
        logger.debug("scale_range ignored: invalid range [%d, %d)", start, end)
        return buffer
    start, end = _clamp_offset(start, n), _clamp_offset(end, n)

    out = buffer.to_array()
    out[start:end] = clamp_samples(out[start:end].astype(np.float64) * gain)
    return PCMBuffer._adopt(out, buffer.samplerate)
