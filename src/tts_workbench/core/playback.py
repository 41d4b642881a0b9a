"""
Audition of a segment buffer through sounddevice.
Plays the whole buffer or one region of it, optionally looping the region.
"""
from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Callable, Optional
import numpy as np

from .buffer import PCMBuffer
from .config import AUDIO_CONFIG, PlaybackState
from .selection import Selection
from .types import AudioArray

if TYPE_CHECKING:
    import sounddevice as sd

logger = logging.getLogger("TTSWorkbench")

PositionCallback = Callable[[float], None]
StateCallback = Callable[[PlaybackState], None]


class PlaybackController:
    """
    Device playback of one PCMBuffer.

    render_block() does all the mixing and owns the playhead, so looping and
    end-of-audio behaviour can be exercised without opening a stream.
    Callbacks are dropped on cleanup(); a late stream notification after
    that point only updates internal state.
    """
    __slots__ = (
        '_buffer', '_stream', '_frame', '_state', '_region', '_loop',
        '_volume', '_position_cb', '_state_cb', '_closed'
    )

    def __init__(
        self,
        buffer: Optional[PCMBuffer] = None,
        on_position_changed: Optional[PositionCallback] = None,
        on_state_changed: Optional[StateCallback] = None
    ) -> None:
        self._buffer = buffer
        self._stream: Optional["sd.OutputStream"] = None
        self._frame = 0
        self._state = PlaybackState.STOPPED
        self._region: Optional[Selection] = None
        self._loop = False
        self._volume = AUDIO_CONFIG.default_playback_volume
        self._position_cb = on_position_changed
        self._state_cb = on_state_changed
        self._closed = False

    @property
    def buffer(self) -> Optional[PCMBuffer]:
        return self._buffer

    @property
    def current_frame(self) -> int:
        return self._frame

    @property
    def current_time(self) -> float:
        """Playhead in seconds (0 with nothing loaded)."""
        return self._frame / self._buffer.samplerate if self._buffer is not None else 0.0

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def is_playing(self) -> bool:
        return self._state is PlaybackState.PLAYING

    @property
    def region(self) -> Optional[Selection]:
        return self._region

    @property
    def loop(self) -> bool:
        return self._loop

    @property
    def volume(self) -> float:
        return self._volume

    @volume.setter
    def volume(self, value: float) -> None:
        self._volume = float(np.clip(value, 0.0, 1.0))

    @property
    def _length(self) -> int:
        return self._buffer.sample_count if self._buffer is not None else 0

    def _bounds(self) -> tuple[int, int]:
        region = self._region
        return (region.start, region.end) if region is not None else (0, self._length)

    def _enter(self, state: PlaybackState) -> None:
        changed = state is not self._state
        self._state = state
        if changed and not self._closed and self._state_cb is not None:
            self._state_cb(state)

    def _moved(self) -> None:
        if not self._closed and self._position_cb is not None:
            self._position_cb(self.current_time)

    # --- What to play ---

    def load(self, buffer: Optional[PCMBuffer]) -> None:
        """Replace the audio (e.g. after an edit). Playback is stopped first."""
        if self.is_playing:
            self.stop()
        self._buffer = buffer
        if self._region is not None and not self._region.fits(self._length):
            self._region = None
        self._frame = min(self._frame, self._length)

    def set_region(self, region: Optional[Selection]) -> None:
        """Limit playback to a region; None or an empty region means the whole buffer."""
        if region is not None and self._buffer is not None:
            region = region.clamped(self._length)
        self._region = None if region is None or region.is_empty else region

    def set_loop(self, loop: bool) -> None:
        """Loop the region. Has no effect without one."""
        self._loop = bool(loop)

    # --- Mixing ---

    def render_block(self, frames: int) -> tuple[AudioArray, bool]:
        """
        Mix the next `frames` samples for the output device.

        Returns:
            (block, finished). The block has AUDIO_CONFIG.playback_channels
            columns; mono sources feed every column and extra source channels
            are left out. finished is set when the buffer end or the end of a
            non-looping region was hit, and the rest of the block is silence.
        """
        width = AUDIO_CONFIG.playback_channels
        block = np.zeros((frames, width), dtype=np.float32)
        if self._buffer is None or self._buffer.is_empty:
            return block, True

        source = self._buffer.data
        start, end = self._bounds()
        wrap = self._loop and self._region is not None
        filled = 0

        while filled < frames:
            if self._frame >= end:
                if not wrap:
                    break
                self._frame = start
            n = min(frames - filled, end - self._frame)
            piece = source[self._frame:self._frame + n]
            cols = min(piece.shape[1], width)
            block[filled:filled + n, :cols] = piece[:, :cols]
            if cols < width:
                block[filled:filled + n, cols:] = piece[:, :1]
            filled += n
            self._frame += n

        block *= self._volume
        np.clip(block, -1.0, 1.0, out=block)
        return block, filled < frames

    # --- Transport ---

    def play(self) -> bool:
        """Open an output stream at the playhead. Returns False when nothing could start."""
        if self._closed or self.is_playing or self._length == 0:
            return False

        start, end = self._bounds()
        if not start <= self._frame < end:
            self._frame = start

        import sounddevice as sd

        def fill(outdata: np.ndarray, frames: int, time: object, status: "sd.CallbackFlags") -> None:
            try:
                block, finished = self.render_block(frames)
            except Exception as e:
                logger.error("Playback callback error: %s", e, exc_info=True)
                raise sd.CallbackStop()
            outdata[:] = block
            if finished:
                raise sd.CallbackStop()

        def drained() -> None:
            if self._closed or not self.is_playing:
                return
            self._frame = self._bounds()[0]
            self._enter(PlaybackState.STOPPED)
            self._moved()

        self._enter(PlaybackState.PLAYING)
        try:
            self._stream = sd.OutputStream(
                samplerate=self._buffer.samplerate,
                channels=AUDIO_CONFIG.playback_channels,
                blocksize=AUDIO_CONFIG.playback_blocksize,
                callback=fill,
                finished_callback=drained
            )
            self._stream.start()
        except Exception as e:
            logger.error("Could not open output stream: %s", e, exc_info=True)
            self._stream = None
            self._enter(PlaybackState.STOPPED)
            return False

        logger.info("Playing from sample %d of %d", self._frame, end)
        return True

    def _release_stream(self) -> None:
        stream, self._stream = self._stream, None
        if stream is None:
            return
        try:
            stream.stop()
            stream.close()
        except Exception as e:
            logger.warning("Output stream did not close cleanly: %s", e)

    def pause(self) -> None:
        """Stop the device but keep the playhead."""
        # Leave PLAYING first: stopping the stream fires its finished callback
        self._enter(PlaybackState.PAUSED)
        self._release_stream()
        logger.info("Paused at sample %d", self._frame)

    def stop(self) -> None:
        """Stop the device and rewind to the start of the region (or buffer)."""
        self._enter(PlaybackState.STOPPED)
        self._release_stream()
        self._frame = self._bounds()[0]
        self._moved()

    def seek(self, sample_index: int) -> None:
        self._frame = max(0, min(int(sample_index), self._length))
        self._moved()

    def seek_seconds(self, seconds: float) -> None:
        if self._buffer is not None:
            self.seek(int(seconds * self._buffer.samplerate))

    def toggle_play_pause(self) -> None:
        if self.is_playing:
            self.pause()
        else:
            self.play()

    def cleanup(self) -> None:
        """Close the stream for good; the controller cannot play afterwards."""
        self._closed = True
        self._position_cb = None
        self._state_cb = None
        self._release_stream()
        self._state = PlaybackState.STOPPED
