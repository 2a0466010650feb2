"""
Instant replay jobs.

Video generation is a long-running operation: the job is submitted,
then polled at a fixed interval until the upstream marks it done. The
poll budget is bounded so a stuck operation fails instead of hanging
the replay flag forever.

    SUBMITTED -> POLLING -> DONE
                        \\-> FAILED
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from chaosball.ai.client import GeminiClient, GeminiClientError
from chaosball.ai.prompts import build_video_request
from chaosball.errors import EmptyResponse, GenerationError, MalformedResponse

logger = logging.getLogger(__name__)

OPERATION = "generate_replay"


class ReplayPhase(Enum):
    SUBMITTED = "submitted"
    POLLING = "polling"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_finished(self) -> bool:
        return self in (ReplayPhase.DONE, ReplayPhase.FAILED)


@dataclass
class ReplayJob:
    """Progress of one replay generation."""

    prompt: str
    phase: ReplayPhase = ReplayPhase.SUBMITTED
    operation_name: Optional[str] = None
    polls: int = 0
    video_uri: Optional[str] = None
    error: Optional[str] = None


PhaseCallback = Callable[[ReplayJob], None]


def extract_video_uri(operation: dict[str, Any]) -> Optional[str]:
    """Pull the first generated video locator out of a finished operation."""
    response = operation.get("response") or {}
    video_response = response.get("generateVideoResponse") or response
    samples = video_response.get("generatedSamples") or video_response.get("generatedVideos") or []
    if not samples:
        return None
    video = samples[0].get("video") or {}
    return video.get("uri")


class ReplayPoller:
    """
    Runs replay jobs against the video model.

    Usage:
        poller = ReplayPoller(client, "veo-3.1-fast-generate-preview")
        job = await poller.run("robot dunks from half court")
        print(job.video_uri)
    """

    def __init__(
        self,
        client: GeminiClient,
        model: str,
        poll_interval: float = 5.0,
        max_polls: int = 60,
        on_phase: Optional[PhaseCallback] = None,
    ):
        self._client = client
        self.model = model
        self.poll_interval = poll_interval
        self.max_polls = max_polls
        self._on_phase = on_phase

    @staticmethod
    def _set_phase(job: ReplayJob, phase: ReplayPhase, notify: Optional[PhaseCallback]) -> None:
        job.phase = phase
        if notify is not None:
            notify(job)

    def _fail(
        self,
        job: ReplayJob,
        error: GenerationError,
        notify: Optional[PhaseCallback],
    ) -> GenerationError:
        job.error = str(error)
        self._set_phase(job, ReplayPhase.FAILED, notify)
        logger.error(f"Replay failed after {job.polls} poll(s): {error}")
        return error

    async def run(self, prompt: str, on_phase: Optional[PhaseCallback] = None) -> ReplayJob:
        """
        Submit a replay and poll it to completion.

        Args:
            prompt: Visual prompt of the keyframe being replayed.
            on_phase: Optional per-run phase callback (overrides the default).

        Returns:
            The finished job; video_uri carries the access credential.

        Raises:
            GenerationError: Upstream failure, poll budget exhausted, or
                an operation that finished without a video.
        """
        notify = on_phase or self._on_phase
        job = ReplayJob(prompt=prompt)
        self._set_phase(job, ReplayPhase.SUBMITTED, notify)

        try:
            operation = await self._client.start_operation(self.model, build_video_request(prompt))
        except GeminiClientError as e:
            raise self._fail(job, GenerationError(OPERATION, f"submit failed: {e}"), notify) from e

        job.operation_name = operation.get("name")
        if not job.operation_name and not operation.get("done"):
            error = MalformedResponse(OPERATION, "operation handle missing name")
            raise self._fail(job, error, notify)

        while not operation.get("done"):
            if job.polls >= self.max_polls:
                raise self._fail(
                    job,
                    GenerationError(OPERATION, f"timed out after {job.polls} polls"),
                    notify,
                )
            await asyncio.sleep(self.poll_interval)
            if job.phase is not ReplayPhase.POLLING:
                self._set_phase(job, ReplayPhase.POLLING, notify)
            job.polls += 1
            logger.debug(f"Polling replay {job.operation_name} ({job.polls}/{self.max_polls})")
            try:
                operation = await self._client.get_operation(job.operation_name)
            except GeminiClientError as e:
                raise self._fail(job, GenerationError(OPERATION, f"poll failed: {e}"), notify) from e

        if operation.get("error"):
            message = operation["error"].get("message", "unknown error")
            raise self._fail(job, GenerationError(OPERATION, f"operation error: {message}"), notify)

        uri = extract_video_uri(operation)
        if not uri:
            error = EmptyResponse(OPERATION, "operation finished without a video")
            raise self._fail(job, error, notify)

        job.video_uri = self._client.with_key(uri)
        self._set_phase(job, ReplayPhase.DONE, notify)
        logger.info(f"Replay ready after {job.polls} poll(s)")
        return job
