"""
Centralized configuration for TTS Workbench.
All magic numbers and default settings in one place.
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class PlaybackState(Enum):
    """Playback state enumeration."""
    STOPPED = auto()
    PLAYING = auto()
    PAUSED = auto()


class MergeState(Enum):
    """Validity of a group's merged audio cache."""
    CLEAN = auto()
    DIRTY = auto()


@dataclass(frozen=True, slots=True)
class AudioConfig:
    """Audio engine configuration."""
    default_samplerate: int = 44100
    playback_blocksize: int = 4096
    playback_channels: int = 2
    default_playback_volume: float = 1.0


@dataclass(frozen=True, slots=True)
class EditConfig:
    """Waveform editing limits."""
    min_gain: float = 0.1
    max_gain: float = 3.0


@dataclass(frozen=True, slots=True)
class UndoConfig:
    """Undo/Redo configuration."""
    max_depth: Optional[int] = 100  # Snapshots kept besides the original


@dataclass(frozen=True, slots=True)
class SynthesisConfig:
    """Synthesis backend client settings."""
    base_url: str = "http://127.0.0.1:6789"
    endpoint: str = "/synthesize"
    timeout_s: float = 60.0
    max_attempts: int = 3
    initial_backoff_s: float = 1.0
    max_workers: int = 1  # Sequential by default to respect backend rate limits

    # Parameter ranges offered to the operator
    speed_range: tuple[float, float] = (0.5, 1.5)
    volume_range: tuple[float, float] = (0.5, 1.5)
    pitch_range: tuple[float, float] = (0.1, 2.0)


@dataclass(frozen=True, slots=True)
class TextConfig:
    """Input parsing settings."""
    sentence_terminators: str = "。？"
    label_column: str = "语料名称"
    text_column: str = "文字内容"


@dataclass(frozen=True, slots=True)
class ExportConfig:
    """Archive export settings."""
    name_delimiter: str = "&"
    archive_name: str = "audio_export.zip"
    file_extension: str = ".wav"


# Global config instances (immutable singletons)
AUDIO_CONFIG = AudioConfig()
EDIT_CONFIG = EditConfig()
UNDO_CONFIG = UndoConfig()
SYNTHESIS_CONFIG = SynthesisConfig()
TEXT_CONFIG = TextConfig()
EXPORT_CONFIG = ExportConfig()
