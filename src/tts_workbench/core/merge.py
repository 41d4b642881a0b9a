"""
Multi-buffer merge: concatenates independently decoded segment buffers
into one playback-ready buffer.
"""
from __future__ import annotations
from typing import Optional, Sequence
import numpy as np

from .buffer import PCMBuffer
from .config import AUDIO_CONFIG
from ..utils.logger import logger


def merge_buffers(buffers: Sequence[Optional[PCMBuffer]], resample: bool = False) -> PCMBuffer:
    """
    Place buffers end to end, in order, with no gap or crossfade.

    Absent entries (failed segments) contribute nothing. The first present
    buffer fixes the output channel count and sample rate; a later buffer
    lacking channel c contributes its channel 0 there instead.

    Args:
        buffers: Ordered buffers, None for failed segments
        resample: Convert later buffers to the first buffer's sample rate.
                  When False their samples are copied as-is.

    Returns:
        Merged buffer; zero-length mono at the default rate when nothing is present
    """
    present = [b for b in buffers if b is not None]
    if not present:
        logger.debug(f"Merge of {len(buffers)} absent buffers yields empty audio")
        return PCMBuffer.empty(1, AUDIO_CONFIG.default_samplerate)

    channels = present[0].num_channels
    samplerate = present[0].samplerate

    if resample:
        present = [b.resampled(samplerate) for b in present]
    elif any(b.samplerate != samplerate for b in present):
        logger.warning("Merging buffers with mixed sample rates without resampling")

    total = sum(b.sample_count for b in present)
    out = np.empty((total, channels), dtype=np.float32)

    offset = 0
    for buffer in present:
        end = offset + buffer.sample_count
        for c in range(channels):
            source = c if c < buffer.num_channels else 0
            out[offset:end, c] = buffer.data[:, source]
        offset = end

    logger.debug(f"Merged {len(present)} buffers into {total} samples")
    return PCMBuffer._adopt(out, samplerate)
