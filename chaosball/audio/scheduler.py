"""Voiced commentary playback."""

import asyncio
import logging
from typing import Callable, Optional

from chaosball.audio.decoding import DEFAULT_SAMPLE_RATE, PcmAudio, decode_audio
from chaosball.audio.output import AudioOutput, PygameAudioOutput
from chaosball.core.models import AudioClip

logger = logging.getLogger(__name__)

OutputFactory = Callable[[int, int], AudioOutput]


class AudioPlaybackScheduler:
    """
    Owns the single process-lifetime audio output.

    The output is created on first use and reused afterwards. Each
    play_audio() call decodes its buffer and starts it immediately;
    overlapping calls overlap.
    """

    def __init__(
        self,
        output_factory: OutputFactory = PygameAudioOutput,
        sample_rate: int = DEFAULT_SAMPLE_RATE,
        channels: int = 1,
    ) -> None:
        self._output_factory = output_factory
        self._sample_rate = sample_rate
        self._channels = channels
        self._output: Optional[AudioOutput] = None

    @property
    def output(self) -> Optional[AudioOutput]:
        """The output context, or None before first use."""
        return self._output

    def _ensure_output(self) -> AudioOutput:
        if self._output is None:
            self._output = self._output_factory(self._sample_rate, self._channels)
        if self._output.is_suspended:
            logger.debug("Resuming suspended audio output")
            self._output.resume()
        return self._output

    async def play_audio(self, clip: AudioClip) -> PcmAudio:
        """
        Decode and start playing a speech clip.

        Returns once playback has started, not when it finishes.

        Raises:
            AudioDecodeError: If the clip cannot be decoded.
        """
        output = self._ensure_output()
        pcm = await asyncio.to_thread(decode_audio, clip)
        output.play(pcm)
        logger.debug(f"Playing {pcm.duration_seconds:.1f}s of commentary")
        return pcm
