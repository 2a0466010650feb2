"""Decode TTS payloads to raw PCM frames."""

import io
import wave
from dataclasses import dataclass

from chaosball.core.models import AudioClip
from chaosball.errors import AudioDecodeError

DEFAULT_SAMPLE_RATE = 24000


@dataclass(frozen=True)
class PcmAudio:
    """Signed little-endian PCM ready for an output device."""

    frames: bytes
    sample_rate: int = DEFAULT_SAMPLE_RATE
    channels: int = 1
    sample_width: int = 2  # bytes per sample

    @property
    def duration_seconds(self) -> float:
        frame_size = self.sample_width * self.channels
        return len(self.frames) / frame_size / self.sample_rate


def _mime_params(mime_type: str) -> tuple[str, dict[str, str]]:
    """Split "audio/L16;codec=pcm;rate=24000" into base type and parameters."""
    base, *raw_params = [piece.strip() for piece in mime_type.split(";")]
    params = {}
    for raw in raw_params:
        key, _, value = raw.partition("=")
        params[key.strip().lower()] = value.strip()
    return base.lower(), params


def _decode_wav(data: bytes) -> PcmAudio:
    try:
        with wave.open(io.BytesIO(data), "rb") as wav:
            return PcmAudio(
                frames=wav.readframes(wav.getnframes()),
                sample_rate=wav.getframerate(),
                channels=wav.getnchannels(),
                sample_width=wav.getsampwidth(),
            )
    except (wave.Error, EOFError) as e:
        raise AudioDecodeError(f"Invalid WAV payload: {e}", "audio/wav") from e


def decode_audio(clip: AudioClip) -> PcmAudio:
    """
    Decode an encoded speech buffer into PCM.

    Supports WAV containers and headerless 16-bit PCM (audio/L16,
    audio/pcm) as returned by the speech model.

    Raises:
        AudioDecodeError: Empty, truncated or unsupported payloads.
    """
    if not clip.data:
        raise AudioDecodeError("Empty audio payload", clip.mime_type)

    if clip.data[:4] == b"RIFF":
        return _decode_wav(clip.data)

    base, params = _mime_params(clip.mime_type)
    if base not in ("audio/l16", "audio/pcm"):
        raise AudioDecodeError(f"Unsupported audio format: {clip.mime_type}", clip.mime_type)

    try:
        sample_rate = int(params.get("rate", DEFAULT_SAMPLE_RATE))
        channels = int(params.get("channels", 1))
    except ValueError as e:
        raise AudioDecodeError(f"Bad audio parameters: {clip.mime_type}", clip.mime_type) from e

    if len(clip.data) % (2 * channels):
        raise AudioDecodeError("Truncated PCM payload", clip.mime_type)

    return PcmAudio(frames=clip.data, sample_rate=sample_rate, channels=channels)
