"""Audio output backends."""

import logging
import os

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame

from chaosball.audio.decoding import PcmAudio
from chaosball.errors import AudioDecodeError

logger = logging.getLogger(__name__)


class AudioOutput:
    """
    A persistent output context.

    Created once, resumed when suspended, and asked to start one-shot
    sources. Overlapping sources mix; nothing is queued or cancelled.
    """

    def __init__(self, sample_rate: int, channels: int) -> None:
        self.sample_rate = sample_rate
        self.channels = channels

    @property
    def is_suspended(self) -> bool:
        raise NotImplementedError

    def resume(self) -> None:
        raise NotImplementedError

    def play(self, pcm: PcmAudio) -> None:
        raise NotImplementedError

    def check_format(self, pcm: PcmAudio) -> None:
        """
        Reject clips the output cannot reproduce.

        Only 16-bit samples are accepted. A rate or channel mismatch is
        played anyway and logged.

        Raises:
            AudioDecodeError: The clip is not 16-bit PCM.
        """
        if pcm.sample_width != 2:
            logger.error(f"Rejecting {pcm.sample_width * 8}-bit clip, output expects 16-bit PCM")
            raise AudioDecodeError(f"Unsupported sample width: {pcm.sample_width} bytes")
        if pcm.sample_rate != self.sample_rate or pcm.channels != self.channels:
            logger.warning(
                f"Clip format {pcm.sample_rate}Hz x{pcm.channels} differs from output "
                f"{self.sample_rate}Hz x{self.channels}"
            )


class PygameAudioOutput(AudioOutput):
    """Plays through pygame.mixer. An uninitialised mixer counts as suspended."""

    def __init__(self, sample_rate: int, channels: int) -> None:
        super().__init__(sample_rate, channels)
        self.resume()

    @property
    def is_suspended(self) -> bool:
        return pygame.mixer.get_init() is None

    def resume(self) -> None:
        pygame.mixer.init(frequency=self.sample_rate, size=-16, channels=self.channels)
        logger.debug(f"Audio mixer ready at {self.sample_rate}Hz x{self.channels}")

    def play(self, pcm: PcmAudio) -> None:
        self.check_format(pcm)
        pygame.mixer.Sound(buffer=pcm.frames).play()


class SilentAudioOutput(AudioOutput):
    """Discards audio. Used for headless runs and tests."""

    def __init__(self, sample_rate: int, channels: int) -> None:
        super().__init__(sample_rate, channels)
        self.suspended = False
        self.resume_count = 0
        self.played: list[PcmAudio] = []

    @property
    def is_suspended(self) -> bool:
        return self.suspended

    def resume(self) -> None:
        self.suspended = False
        self.resume_count += 1

    def play(self, pcm: PcmAudio) -> None:
        self.check_format(pcm)
        self.played.append(pcm)
