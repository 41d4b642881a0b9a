"""
TTS Workbench Core Module

This module contains the audio editing and encoding engine:
- PCMBuffer: Immutable multi-channel sample buffer
- wav_codec: 16-bit PCM WAV encode/decode
- editing: Pure range operations (extract, replace, insert, scale)
- EditHistory / Clipboard: Snapshot undo/redo and copy slot
- merge_buffers: Segment concatenation
- Segment / Group / Workspace: Synthesized audio model with merge cache
- EditorSession: Control-surface entry points over one buffer
- PlaybackController: Audio playback handling
"""
from .buffer import PCMBuffer
from .selection import Selection
from .wav_codec import decode_wav, encode_wav, read_wav_file, write_wav_file
from .editing import delete_range, extract_range, insert_at, replace_range, scale_range
from .history import EditHistory
from .clipboard import Clipboard
from .merge import merge_buffers
from .group import Group, Segment
from .session import EditorSession
from .workspace import Workspace
from .playback import PlaybackController
from .commands import CommandDispatcher, EditorCommand
from .config import (
    AUDIO_CONFIG,
    EDIT_CONFIG,
    UNDO_CONFIG,
    SYNTHESIS_CONFIG,
    TEXT_CONFIG,
    EXPORT_CONFIG,
    MergeState,
    PlaybackState
)
from .types import DecodeError, InputError, SynthesisError, WorkbenchError

__all__ = [
    # Main classes
    'PCMBuffer',
    'Selection',
    'EditHistory',
    'Clipboard',
    'Group',
    'Segment',
    'EditorSession',
    'Workspace',
    'PlaybackController',
    'CommandDispatcher',
    'EditorCommand',
    # Functions
    'decode_wav',
    'encode_wav',
    'read_wav_file',
    'write_wav_file',
    'extract_range',
    'replace_range',
    'insert_at',
    'delete_range',
    'scale_range',
    'merge_buffers',
    # Config
    'AUDIO_CONFIG',
    'EDIT_CONFIG',
    'UNDO_CONFIG',
    'SYNTHESIS_CONFIG',
    'TEXT_CONFIG',
    'EXPORT_CONFIG',
    'MergeState',
    'PlaybackState',
    # Errors
    'WorkbenchError',
    'DecodeError',
    'SynthesisError',
    'InputError',
]
