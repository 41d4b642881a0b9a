from __future__ import annotations
from dataclasses import dataclass
import math


@dataclass(frozen=True, slots=True)
class Selection:
    """
    A contiguous sample range [start, end) marked for editing or looped playback.
    """
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid selection [{self.start}, {self.end})")

    @classmethod
    def from_seconds(cls, start_s: float, end_s: float, samplerate: int) -> "Selection":
        """Region from time positions; both ends are floored to whole samples."""
        return cls(math.floor(start_s * samplerate), math.floor(end_s * samplerate))

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        return self.end == self.start

    def fits(self, sample_count: int) -> bool:
        """Whether the region lies inside a buffer of the given length."""
        return self.end <= sample_count

    def clamped(self, sample_count: int) -> "Selection":
        return Selection(min(self.start, sample_count), min(self.end, sample_count))

    def to_seconds(self, samplerate: int) -> tuple[float, float]:
        return self.start / samplerate, self.end / samplerate
