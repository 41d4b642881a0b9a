"""
Type definitions for the TTS Workbench core module.
Provides type aliases and the exception hierarchy shared by core and services.
"""
from enum import Enum
from typing import Callable, Optional
import numpy as np
from numpy.typing import NDArray

# Audio data types
AudioArray = NDArray[np.float32]  # Shape: (samples, channels)
ChannelArray = NDArray[np.float32]  # Shape: (samples,)

# Callback types
ProgressCallback = Callable[[int, int, str], None]  # (current, total, status)
SynthesizeFunc = Callable[[str], bytes]  # text -> encoded audio


class WorkbenchError(Exception):
    """Base class for all TTS Workbench errors."""


class DecodeErrorKind(Enum):
    MALFORMED = "malformed"


class DecodeError(WorkbenchError):
    """Encoded audio could not be turned into a PCM buffer."""

    def __init__(self, message: str, kind: DecodeErrorKind = DecodeErrorKind.MALFORMED):
        super().__init__(message)
        self.kind = kind


class SynthesisError(WorkbenchError):
    """The synthesis backend failed to return audio."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class InputError(WorkbenchError):
    """Text or spreadsheet input is unusable."""
