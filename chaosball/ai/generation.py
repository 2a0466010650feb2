"""
Generation Client

The four generative operations behind a broadcast: match setup and play
logic (structured JSON), keyframe images, voiced commentary and video
replays. Every failure surfaces as a GenerationError subclass naming the
operation; callers must not assume any call succeeds.
"""

import base64
import binascii
import json
import logging
from typing import Any, Optional

from pydantic import BaseModel, ValidationError

from chaosball.ai.client import GeminiClient, GeminiClientError
from chaosball.ai.prompts import (
    MATCH_SETUP_SCHEMA,
    PLAY_UPDATE_SCHEMA,
    PLAY_USER_PROMPT,
    SETUP_PROMPT_TEMPLATE,
    build_image_request,
    build_json_request,
    build_play_system_prompt,
    build_speech_request,
)
from chaosball.ai.replay import PhaseCallback, ReplayPoller
from chaosball.ai.schema import MatchSetupPayload, PlayUpdatePayload
from chaosball.config import BroadcastSettings, get_settings
from chaosball.core.models import AudioClip, GameState, MatchSetup, PlayUpdate
from chaosball.errors import EmptyResponse, GenerationError, MalformedResponse


logger = logging.getLogger(__name__)


def _parts(data: dict[str, Any]) -> list[dict[str, Any]]:
    """Content parts of the first candidate."""
    candidates = data.get("candidates") or []
    if not candidates:
        return []
    content = candidates[0].get("content") or {}
    return content.get("parts") or []


def _text_of(data: dict[str, Any]) -> str:
    return "".join(part.get("text", "") for part in _parts(data))


def _inline_data(data: dict[str, Any], mime_prefix: str) -> Optional[dict[str, str]]:
    """First inline payload whose mime type starts with mime_prefix."""
    for part in _parts(data):
        inline = part.get("inlineData")
        if inline and inline.get("mimeType", "").startswith(mime_prefix) and inline.get("data"):
            return inline
    return None


class GenerationClient:
    """
    Generative operations for one broadcast.

    Usage:
        async with GenerationClient.from_settings() as generator:
            setup = await generator.generate_match_setup("Cyberpunk Robot Basketball")
            update = await generator.generate_next_play(state)
    """

    def __init__(
        self,
        client: GeminiClient,
        settings: Optional[BroadcastSettings] = None,
    ):
        self._client = client
        self.settings = settings or get_settings()
        self._replays = ReplayPoller(
            client,
            model=self.settings.video_model,
            poll_interval=self.settings.replay_poll_interval_seconds,
            max_polls=self.settings.replay_max_polls,
        )

    @classmethod
    def from_settings(cls, settings: Optional[BroadcastSettings] = None) -> "GenerationClient":
        """Build a client (and its HTTP transport) from settings."""
        settings = settings or get_settings()
        client = GeminiClient(
            api_key=settings.api_key,
            max_retries=settings.max_retries,
            timeout=settings.request_timeout_seconds,
        )
        return cls(client, settings)

    async def close(self):
        """Close the underlying client."""
        await self._client.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _call(self, operation: str, model: str, body: dict[str, Any]) -> dict[str, Any]:
        try:
            return await self._client.generate_content(model, body)
        except GeminiClientError as e:
            raise GenerationError(operation, str(e)) from e

    async def _generate_json(
        self,
        operation: str,
        body: dict[str, Any],
        payload_model: type[BaseModel],
    ) -> BaseModel:
        data = await self._call(operation, self.settings.logic_model, body)
        text = _text_of(data)
        if not text.strip():
            raise EmptyResponse(operation, "model returned no text")
        try:
            return payload_model.model_validate(json.loads(text))
        except json.JSONDecodeError as e:
            raise MalformedResponse(operation, f"response was not valid JSON: {text[:200]}") from e
        except ValidationError as e:
            raise MalformedResponse(operation, f"response failed validation: {e}") from e

    async def generate_match_setup(self, theme: str) -> MatchSetup:
        """Invent two teams and a venue for a theme."""
        body = build_json_request(SETUP_PROMPT_TEMPLATE.format(theme=theme), MATCH_SETUP_SCHEMA)
        payload = await self._generate_json("generate_match_setup", body, MatchSetupPayload)
        setup = payload.to_setup()
        logger.info(f"Match setup: {setup.home.name} vs {setup.away.name} at {setup.venue}")
        return setup

    async def generate_next_play(self, state: GameState) -> PlayUpdate:
        """
        Generate the next play conditioned on the full current snapshot.

        Narrative continuity comes entirely from the snapshot; the model
        keeps no memory between calls.
        """
        body = build_json_request(
            PLAY_USER_PROMPT,
            PLAY_UPDATE_SCHEMA,
            system=build_play_system_prompt(state),
        )
        payload = await self._generate_json("generate_next_play", body, PlayUpdatePayload)
        return payload.to_update()

    async def generate_keyframe(self, prompt: str) -> str:
        """
        Render one keyframe.

        Returns:
            A data URI (data:<mime>;base64,<payload>).
        """
        operation = "generate_keyframe"
        data = await self._call(operation, self.settings.image_model, build_image_request(prompt))
        inline = _inline_data(data, "image")
        if inline is None:
            text = _text_of(data)
            if text:
                logger.warning(f"Image model returned text instead of an image: {text[:200]}")
            raise EmptyResponse(operation, "no image generated")
        return f"data:{inline['mimeType']};base64,{inline['data']}"

    async def generate_commentary_audio(self, text: str) -> AudioClip:
        """Voice a line of commentary."""
        operation = "generate_commentary_audio"
        body = build_speech_request(text, self.settings.voice_name)
        data = await self._call(operation, self.settings.tts_model, body)
        inline = _inline_data(data, "audio")
        if inline is None:
            raise EmptyResponse(operation, "no audio generated")
        try:
            audio = base64.b64decode(inline["data"], validate=True)
        except (binascii.Error, ValueError) as e:
            raise MalformedResponse(operation, "audio payload was not valid base64") from e
        return AudioClip(data=audio, mime_type=inline["mimeType"])

    async def generate_replay(self, prompt: str, on_phase: Optional[PhaseCallback] = None) -> str:
        """
        Render a video replay of a keyframe prompt.

        Submits the job and polls until done or the poll budget runs out.

        Returns:
            Video locator with the access credential appended.
        """
        job = await self._replays.run(prompt, on_phase=on_phase)
        return job.video_uri
