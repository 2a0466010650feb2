"""
Generative AI layer

Gemini transport, prompts, wire schemas and the generation operations
(match setup, play logic, keyframes, commentary audio, replays).
"""

from .client import (
    GeminiAPIError,
    GeminiClient,
    GeminiClientError,
    GeminiRateLimitError,
)
from .generation import GenerationClient
from .replay import ReplayJob, ReplayPhase, ReplayPoller

__all__ = [
    # Client
    "GeminiAPIError",
    "GeminiClient",
    "GeminiClientError",
    "GeminiRateLimitError",
    # Generation
    "GenerationClient",
    # Replay
    "ReplayJob",
    "ReplayPhase",
    "ReplayPoller",
]
