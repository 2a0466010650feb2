"""Tests for audio decoding and playback scheduling."""

import asyncio
import io
import wave

import pygame
import pytest

from chaosball.audio import AudioPlaybackScheduler, SilentAudioOutput, decode_audio
from chaosball.audio.decoding import PcmAudio
from chaosball.audio.output import PygameAudioOutput
from chaosball.core.models import AudioClip
from chaosball.errors import AudioDecodeError


def wav_bytes(frames: bytes, rate: int = 16000, channels: int = 1, sample_width: int = 2) -> bytes:
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav:
        wav.setnchannels(channels)
        wav.setsampwidth(sample_width)
        wav.setframerate(rate)
        wav.writeframes(frames)
    return buffer.getvalue()


class TestDecodeAudio:
    """Tests for decode_audio."""

    def test_raw_l16_uses_mime_rate(self):
        clip = AudioClip(data=b"\x00\x00" * 24000, mime_type="audio/L16;codec=pcm;rate=24000")
        pcm = decode_audio(clip)
        assert pcm.sample_rate == 24000
        assert pcm.channels == 1
        assert pcm.duration_seconds == pytest.approx(1.0)

    def test_raw_pcm_defaults_to_24khz(self):
        pcm = decode_audio(AudioClip(data=b"\x00\x00" * 10, mime_type="audio/pcm"))
        assert pcm.sample_rate == 24000

    def test_wav_container(self):
        frames = b"\x01\x00" * 1600
        pcm = decode_audio(AudioClip(data=wav_bytes(frames, rate=16000), mime_type="audio/wav"))
        assert pcm.frames == frames
        assert pcm.sample_rate == 16000
        assert pcm.duration_seconds == pytest.approx(0.1)

    def test_empty_payload(self):
        with pytest.raises(AudioDecodeError):
            decode_audio(AudioClip(data=b""))

    def test_truncated_pcm(self):
        with pytest.raises(AudioDecodeError, match="Truncated"):
            decode_audio(AudioClip(data=b"\x00\x00\x00"))

    def test_unsupported_format(self):
        with pytest.raises(AudioDecodeError) as exc_info:
            decode_audio(AudioClip(data=b"ID3\x00", mime_type="audio/mpeg"))
        assert exc_info.value.mime_type == "audio/mpeg"

    def test_corrupt_wav(self):
        with pytest.raises(AudioDecodeError):
            decode_audio(AudioClip(data=b"RIFF\x00\x00", mime_type="audio/wav"))


class TestAudioPlaybackScheduler:
    """Tests for AudioPlaybackScheduler."""

    def test_output_created_lazily_once(self):
        created = []

        def factory(rate, channels):
            output = SilentAudioOutput(rate, channels)
            created.append(output)
            return output

        scheduler = AudioPlaybackScheduler(output_factory=factory)
        assert scheduler.output is None

        clip = AudioClip(data=b"\x00\x00" * 240)
        asyncio.run(scheduler.play_audio(clip))
        asyncio.run(scheduler.play_audio(clip))

        assert len(created) == 1
        assert len(created[0].played) == 2

    def test_resumes_suspended_output(self):
        scheduler = AudioPlaybackScheduler(output_factory=SilentAudioOutput)
        clip = AudioClip(data=b"\x00\x00" * 240)
        asyncio.run(scheduler.play_audio(clip))

        scheduler.output.suspended = True
        asyncio.run(scheduler.play_audio(clip))

        assert scheduler.output.resume_count == 1
        assert not scheduler.output.is_suspended

    def test_returns_decoded_audio(self):
        scheduler = AudioPlaybackScheduler(output_factory=SilentAudioOutput)
        pcm = asyncio.run(scheduler.play_audio(AudioClip(data=b"\x00\x00" * 2400)))
        assert pcm.duration_seconds == pytest.approx(0.1)

    def test_decode_failure_plays_nothing(self):
        scheduler = AudioPlaybackScheduler(output_factory=SilentAudioOutput)
        with pytest.raises(AudioDecodeError):
            asyncio.run(scheduler.play_audio(AudioClip(data=b"")))
        assert scheduler.output.played == []

    def test_eight_bit_wav_is_rejected_before_playback(self):
        scheduler = AudioPlaybackScheduler(output_factory=SilentAudioOutput)
        clip = AudioClip(data=wav_bytes(b"\x80" * 1600, sample_width=1), mime_type="audio/wav")

        with pytest.raises(AudioDecodeError, match="sample width"):
            asyncio.run(scheduler.play_audio(clip))
        assert scheduler.output.played == []


class TestAudioOutput:
    """Tests for the output backends' format checks."""

    def test_silent_output_accepts_16_bit(self):
        output = SilentAudioOutput(24000, 1)
        output.play(PcmAudio(frames=b"\x00\x00" * 10))
        assert len(output.played) == 1

    def test_rate_mismatch_plays_with_warning(self, caplog):
        output = SilentAudioOutput(24000, 1)
        with caplog.at_level("WARNING"):
            output.play(PcmAudio(frames=b"\x00\x00" * 10, sample_rate=16000))
        assert len(output.played) == 1
        assert "16000Hz" in caplog.text

    @pytest.mark.parametrize("sample_width", [1, 3, 4])
    def test_non_16_bit_is_rejected(self, sample_width, caplog):
        output = SilentAudioOutput(24000, 1)
        pcm = PcmAudio(frames=b"\x00" * sample_width * 10, sample_width=sample_width)

        with caplog.at_level("ERROR"), pytest.raises(AudioDecodeError):
            output.play(pcm)

        assert output.played == []
        assert "expects 16-bit PCM" in caplog.text

    def test_pygame_output_never_hands_mixer_other_widths(self, monkeypatch):
        """The mixer is opened at 16 bits, so wider or narrower buffers never reach it."""
        sounds = []
        monkeypatch.setattr(pygame.mixer, "init", lambda **kwargs: None)
        monkeypatch.setattr(pygame.mixer, "Sound", lambda buffer: sounds.append(buffer))
        output = PygameAudioOutput(24000, 1)

        with pytest.raises(AudioDecodeError):
            output.play(PcmAudio(frames=b"\x80" * 10, sample_width=1))

        assert sounds == []
