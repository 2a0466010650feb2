"""
Broadcast configuration.

Model names, betting policy knobs and match length for a ChaosBall
session. All settings can be overridden via environment variables.
"""

import os
from dataclasses import dataclass, field
from typing import Optional


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    return float(raw) if raw else default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    return int(raw) if raw else default


@dataclass
class BroadcastSettings:
    """Configuration for one ChaosBall broadcast session."""

    # Credential - GEMINI_API_KEY wins over the legacy API_KEY
    api_key: Optional[str] = field(
        default_factory=lambda: os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
    )

    # Models
    logic_model: str = field(
        default_factory=lambda: os.getenv("CHAOSBALL_LOGIC_MODEL", "gemini-2.5-flash")
    )
    image_model: str = field(
        default_factory=lambda: os.getenv("CHAOSBALL_IMAGE_MODEL", "gemini-2.5-flash-image")
    )
    tts_model: str = field(
        default_factory=lambda: os.getenv("CHAOSBALL_TTS_MODEL", "gemini-2.5-flash-preview-tts")
    )
    video_model: str = field(
        default_factory=lambda: os.getenv("CHAOSBALL_VIDEO_MODEL", "veo-3.1-fast-generate-preview")
    )
    voice_name: str = field(default_factory=lambda: os.getenv("CHAOSBALL_VOICE", "Fenrir"))
    theme: str = field(
        default_factory=lambda: os.getenv("CHAOSBALL_THEME", "Cyberpunk Robot Basketball")
    )

    # Betting
    starting_wallet: float = field(
        default_factory=lambda: _env_float("CHAOSBALL_STARTING_WALLET", 1000.0)
    )
    resolve_probability: float = 0.1  # Chance a pending slip settles on a scoring play
    win_probability: float = 0.5  # Chance a settled slip is a winner

    # Match length
    quarters_per_match: int = field(default_factory=lambda: _env_int("CHAOSBALL_QUARTERS", 4))
    quarter_length: str = "15:00"

    # Replay polling
    replay_poll_interval_seconds: float = field(
        default_factory=lambda: _env_float("CHAOSBALL_REPLAY_POLL_SECONDS", 5.0)
    )
    replay_max_polls: int = field(
        default_factory=lambda: _env_int("CHAOSBALL_REPLAY_MAX_POLLS", 60)
    )

    # Transport
    request_timeout_seconds: float = field(
        default_factory=lambda: _env_float("CHAOSBALL_REQUEST_TIMEOUT", 60.0)
    )
    max_retries: int = field(default_factory=lambda: _env_int("CHAOSBALL_MAX_RETRIES", 3))

    audio_enabled: bool = field(
        default_factory=lambda: os.getenv("CHAOSBALL_AUDIO", "true").lower() == "true"
    )

    log_level: str = field(default_factory=lambda: os.getenv("CHAOSBALL_LOG_LEVEL", "INFO"))

    @classmethod
    def from_env(cls) -> "BroadcastSettings":
        """Create settings from environment variables."""
        return cls()

    def validate(self) -> list[str]:
        """Validate settings, return list of errors."""
        errors = []
        if not self.api_key:
            errors.append("GEMINI_API_KEY is required")
        if self.starting_wallet < 0:
            errors.append("Starting wallet cannot be negative")
        if not 0.0 <= self.resolve_probability <= 1.0:
            errors.append("resolve_probability must be between 0 and 1")
        if not 0.0 <= self.win_probability <= 1.0:
            errors.append("win_probability must be between 0 and 1")
        if self.quarters_per_match < 1:
            errors.append("CHAOSBALL_QUARTERS must be at least 1")
        if self.replay_max_polls < 1:
            errors.append("CHAOSBALL_REPLAY_MAX_POLLS must be at least 1")
        return errors


# Singleton settings instance
_settings: Optional[BroadcastSettings] = None


def get_settings() -> BroadcastSettings:
    """Get the global broadcast settings."""
    global _settings
    if _settings is None:
        _settings = BroadcastSettings.from_env()
    return _settings


def set_settings(settings: Optional[BroadcastSettings]) -> None:
    """
    Replace the global settings.

    Useful for testing; passing None forces a reload from the environment.
    """
    global _settings
    _settings = settings
