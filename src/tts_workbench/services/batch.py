"""
Batch synthesis: turns text entries into groups of decoded segments.

Segments can be synthesized by a bounded thread pool, but results are slotted
back by position so group and segment order always match the input, and
progress is reported with a monotonically increasing count.
"""
from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
import threading
from typing import Optional, Sequence

from ..core.config import SYNTHESIS_CONFIG
from ..core.group import Group, Segment
from ..core.types import DecodeError, ProgressCallback, SynthesisError, SynthesizeFunc
from ..core.wav_codec import decode_wav
from ..utils.logger import logger
from .text_input import TextEntry, split_sentences


def synthesize_segment(text: str, synthesize: SynthesizeFunc) -> Segment:
    """Synthesize and decode one segment; failures become a failed segment."""
    try:
        return Segment(text=text, buffer=decode_wav(synthesize(text)))
    except (SynthesisError, DecodeError) as e:
        logger.error(f"Segment failed ({text[:30]!r}): {e}")
        return Segment.failed(text, str(e))


def synthesize_batch(
    entries: Sequence[TextEntry],
    synthesize: SynthesizeFunc,
    split: bool = False,
    max_workers: int = SYNTHESIS_CONFIG.max_workers,
    progress: Optional[ProgressCallback] = None
) -> list[Group]:
    """
    Synthesize every entry into a group.

    Args:
        entries: Input units, one group each
        synthesize: text -> encoded audio (e.g. a SynthesisClient)
        split: Split each entry into sentences, one segment per sentence
        max_workers: Concurrent synthesis calls (1 = strictly sequential)
        progress: Called as (done, total, status) after each segment

    Returns:
        Groups in input order. Failed segments are kept with their error;
        a failure never aborts the batch.
    """
    plan = [(entry, split_sentences(entry.text) if split else [entry.text]) for entry in entries]
    jobs = [(g, s, text) for g, (_, texts) in enumerate(plan) for s, text in enumerate(texts)]
    total = len(jobs)
    results: list[list[Optional[Segment]]] = [[None] * len(texts) for _, texts in plan]

    done = 0
    lock = threading.Lock()

    def run(job: tuple[int, int, str]) -> None:
        nonlocal done
        g, s, text = job
        segment = synthesize_segment(text, synthesize)
        with lock:
            results[g][s] = segment
            done += 1
            if progress:
                progress(done, total, f"Synthesized segment {done} of {total}")

    logger.info(f"Synthesizing {total} segments in {len(plan)} groups (workers={max_workers})")
    if max_workers <= 1:
        for job in jobs:
            run(job)
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            # list() re-raises any unexpected worker exception
            list(pool.map(run, jobs))

    groups = [Group(entry.label, segments, text=entry.text) for (entry, _), segments in zip(plan, results)]
    failed = sum(1 for g in groups for seg in g.segments if not seg.ok)
    logger.info(f"Batch complete: {total - failed} ok, {failed} failed")
    return groups
