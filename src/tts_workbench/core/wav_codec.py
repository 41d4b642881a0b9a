"""
WAV codec for TTS Workbench.

Encodes PCM buffers to the canonical 44-byte-header, 16-bit PCM WAV layout and
decodes audio bytes back into buffers. Plain 16-bit PCM WAV is parsed directly;
other encodings are handed to soundfile (libsndfile).
"""
from __future__ import annotations
import io
import struct
from pathlib import Path
from typing import Optional, Union
import numpy as np
import soundfile as sf

from .buffer import PCMBuffer, clamp_samples
from .types import DecodeError
from ..utils.logger import logger

WAVE_FORMAT_PCM = 1
BITS_PER_SAMPLE = 16

# RIFF header, fmt subchunk and data subchunk header, all little-endian
_HEADER = struct.Struct('<4sI4s4sIHHIIHH4sI')
HEADER_SIZE = _HEADER.size
_CHUNK = struct.Struct('<4sI')
_FMT = struct.Struct('<HHIIHH')


def encode_wav(buffer: PCMBuffer) -> bytes:
    """
    Serialize a buffer as a 16-bit PCM WAV file.

    Samples are clamped to [-1, 1] and quantized asymmetrically
    (negative * 32768, positive * 32767) so that both ends of the
    signed 16-bit range are reachable without overflow.

    Args:
        buffer: Audio to encode

    Returns:
        Complete WAV file contents
    """
    channels = buffer.num_channels
    samplerate = buffer.samplerate
    block_align = channels * (BITS_PER_SAMPLE // 8)

    samples = clamp_samples(buffer.data).astype(np.float64)
    scaled = np.where(samples < 0, samples * 32768.0, samples * 32767.0)
    # Row-major (samples, channels) order is already frame-interleaved
    payload = np.round(scaled).astype('<i2').tobytes()
    data_size = len(payload)

    header = _HEADER.pack(
        b'RIFF', 36 + data_size, b'WAVE',
        b'fmt ', 16, WAVE_FORMAT_PCM, channels, samplerate,
        samplerate * block_align, block_align, BITS_PER_SAMPLE,
        b'data', data_size,
    )
    return header + payload


def decode_wav(data: bytes, target_samplerate: Optional[int] = None) -> PCMBuffer:
    """
    Decode encoded audio into a PCM buffer.

    Args:
        data: WAV bytes (any other container libsndfile reads is accepted too)
        target_samplerate: Resample the result to this rate when given

    Returns:
        The decoded buffer

    Raises:
        DecodeError: Input is empty, truncated or not audio. Decoding is
            all-or-nothing; no partial buffer is ever returned.
    """
    if not data:
        raise DecodeError("No audio data")

    view = memoryview(data)
    if bytes(view[:4]) == b'RIFF':
        buffer = _decode_riff(view)
    else:
        buffer = _decode_with_soundfile(data)

    if target_samplerate is not None and target_samplerate != buffer.samplerate:
        logger.debug("Resampling decoded audio %d Hz -> %d Hz", buffer.samplerate, target_samplerate)
        buffer = buffer.resampled(target_samplerate)
    return buffer


def _decode_riff(view: memoryview) -> PCMBuffer:
    if len(view) < 12 or bytes(view[8:12]) != b'WAVE':
        raise DecodeError("Missing WAVE marker")

    chunks = _scan_chunks(view)
    if b'fmt ' not in chunks:
        raise DecodeError("Missing fmt chunk")
    if b'data' not in chunks:
        raise DecodeError("Missing data chunk")

    fmt_offset, fmt_size = chunks[b'fmt ']
    if fmt_size < _FMT.size:
        raise DecodeError(f"fmt chunk too short ({fmt_size} bytes)")
    format_tag, channels, samplerate, _byte_rate, _block_align, bits = _FMT.unpack_from(view, fmt_offset)

    if channels == 0 or samplerate == 0:
        raise DecodeError(f"Invalid format: {channels} channels at {samplerate} Hz")

    if format_tag != WAVE_FORMAT_PCM or bits != BITS_PER_SAMPLE:
        logger.debug("WAV format tag %d / %d bits, delegating to soundfile", format_tag, bits)
        return _decode_with_soundfile(view.tobytes())

    data_offset, data_size = chunks[b'data']
    frame_size = channels * 2
    usable = data_size - data_size % frame_size
    if usable != data_size:
        logger.debug("Dropping %d trailing bytes of a partial frame", data_size - usable)

    pcm = np.frombuffer(view[data_offset:data_offset + usable], dtype='<i2').astype(np.float64)
    samples = np.where(pcm < 0, pcm / 32768.0, pcm / 32767.0).astype(np.float32)
    return PCMBuffer._adopt(samples.reshape(-1, channels), samplerate)


def _scan_chunks(view: memoryview) -> dict[bytes, tuple[int, int]]:
    """Map chunk id -> (body offset, body size) for the first occurrence of each chunk."""
    chunks: dict[bytes, tuple[int, int]] = {}
    pos = 12
    total = len(view)

    while pos + _CHUNK.size <= total:
        chunk_id, size = _CHUNK.unpack_from(view, pos)
        body = pos + _CHUNK.size
        if body + size > total:
            if chunk_id in (b'data', b'fmt '):
                raise DecodeError(
                    f"Chunk {chunk_id.decode('ascii', 'replace')!r} declares {size} bytes, "
                    f"only {total - body} available"
                )
            # Truncated trailing metadata
            break
        chunks.setdefault(chunk_id, (body, size))
        pos = body + size + (size & 1)  # Chunks are word aligned

    return chunks


def _decode_with_soundfile(data: bytes) -> PCMBuffer:
    try:
        samples, samplerate = sf.read(io.BytesIO(data), dtype='float32', always_2d=True)
    except (sf.SoundFileError, RuntimeError, ValueError, TypeError) as e:
        raise DecodeError(f"Unsupported or corrupt audio: {e}") from e

    if samples.shape[1] == 0 or samplerate <= 0:
        raise DecodeError("Decoded audio has no channels")
    return PCMBuffer._adopt(clamp_samples(samples), samplerate)


# --- File helpers ---

def read_wav_file(path: Union[str, Path], target_samplerate: Optional[int] = None) -> PCMBuffer:
    """Load an audio file from disk."""
    path = Path(path)
    logger.info(f"Loading file: {path}")
    return decode_wav(path.read_bytes(), target_samplerate)


def write_wav_file(path: Union[str, Path], buffer: PCMBuffer) -> Path:
    """Encode a buffer and write it to disk, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(encode_wav(buffer))
    logger.info(f"Wrote {path} ({buffer.duration_seconds:.2f}s)")
    return path
