"""Exception hierarchy for the broadcast."""

from typing import Optional


class ChaosBallError(Exception):
    """Base exception for all ChaosBall errors."""
    pass


# =============================================================================
# Generation boundary
# =============================================================================

class GenerationError(ChaosBallError):
    """Raised when a generative call fails or returns nothing usable."""

    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation}: {message}")
        self.operation = operation


class EmptyResponse(GenerationError):
    """The upstream call succeeded but carried no usable payload."""
    pass


class MalformedResponse(GenerationError):
    """Structured output failed to parse or validate."""
    pass


# =============================================================================
# Orchestrator boundary
# =============================================================================

class SetupFailure(ChaosBallError):
    """Match setup or the opening keyframe failed. No state was applied."""
    pass


class PlayGenerationFailure(ChaosBallError):
    """The play logic call failed. The turn was aborted."""
    pass


class MediaGenerationFailure(ChaosBallError):
    """Image and/or audio failed after the play was already committed."""

    def __init__(self, failures: dict[str, Exception]):
        channels = ", ".join(f"{name}={exc}" for name, exc in failures.items())
        super().__init__(f"Media generation failed ({channels})")
        self.failures = failures


class ReplayFailure(ChaosBallError):
    """Video generation or polling failed. The visual is unchanged."""
    pass


# =============================================================================
# Ledger / audio
# =============================================================================

class BetRejected(ChaosBallError):
    """A wager failed validation and was not placed."""
    pass


class AudioDecodeError(ChaosBallError):
    """An audio buffer could not be decoded to PCM."""

    def __init__(self, message: str, mime_type: Optional[str] = None):
        super().__init__(message)
        self.mime_type = mime_type
