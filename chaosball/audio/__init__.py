"""Audio decoding and playback."""

from chaosball.audio.decoding import PcmAudio, decode_audio
from chaosball.audio.output import AudioOutput, PygameAudioOutput, SilentAudioOutput
from chaosball.audio.scheduler import AudioPlaybackScheduler

__all__ = [
    "AudioOutput",
    "AudioPlaybackScheduler",
    "PcmAudio",
    "PygameAudioOutput",
    "SilentAudioOutput",
    "decode_audio",
]
