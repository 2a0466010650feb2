"""Tests for replay job polling."""

import asyncio

import pytest

from chaosball.ai.client import GeminiAPIError
from chaosball.ai.replay import ReplayPhase, ReplayPoller, extract_video_uri
from chaosball.errors import EmptyResponse, GenerationError, MalformedResponse


def finished(uri: str = "https://v/files/abc") -> dict:
    return {
        "name": "models/veo/operations/op1",
        "done": True,
        "response": {"generateVideoResponse": {"generatedSamples": [{"video": {"uri": uri}}]}},
    }


PENDING = {"name": "models/veo/operations/op1", "done": False}


class FakeOperationsClient:
    """Answers start/get operation calls from queues."""

    def __init__(self, start, polls=()):
        self.start = start
        self.polls = list(polls)
        self.submitted = []
        self.fetched = []

    async def start_operation(self, model, body):
        self.submitted.append((model, body))
        if isinstance(self.start, BaseException):
            raise self.start
        return self.start

    async def get_operation(self, name):
        self.fetched.append(name)
        result = self.polls.pop(0) if self.polls else PENDING
        if isinstance(result, BaseException):
            raise result
        return result

    def with_key(self, uri):
        return f"{uri}?key=test-key"


def make_poller(client, max_polls: int = 5) -> ReplayPoller:
    return ReplayPoller(client, model="veo", poll_interval=0, max_polls=max_polls)


class TestReplayPoller:
    """Tests for ReplayPoller.run."""

    def test_polls_until_done(self):
        client = FakeOperationsClient(PENDING, [PENDING, finished()])
        job = asyncio.run(make_poller(client).run("robot dunk"))

        assert job.phase is ReplayPhase.DONE
        assert job.polls == 2
        assert job.video_uri == "https://v/files/abc?key=test-key"
        assert client.fetched == ["models/veo/operations/op1"] * 2

    def test_submits_cinematic_prompt(self):
        client = FakeOperationsClient(finished())
        asyncio.run(make_poller(client).run("robot dunk"))

        model, body = client.submitted[0]
        assert model == "veo"
        assert "robot dunk" in body["instances"][0]["prompt"]
        assert body["parameters"]["resolution"] == "720p"
        assert body["parameters"]["aspectRatio"] == "16:9"

    def test_reports_phases_in_order(self):
        phases = []
        client = FakeOperationsClient(PENDING, [PENDING, finished()])
        poller = make_poller(client)
        asyncio.run(poller.run("robot dunk", on_phase=lambda job: phases.append(job.phase)))

        assert phases == [ReplayPhase.SUBMITTED, ReplayPhase.POLLING, ReplayPhase.DONE]

    def test_times_out_after_poll_budget(self):
        """A job that never finishes fails instead of polling forever."""
        phases = []
        client = FakeOperationsClient(PENDING)
        with pytest.raises(GenerationError, match="timed out after 3 polls"):
            asyncio.run(
                make_poller(client, max_polls=3).run(
                    "robot dunk", on_phase=lambda job: phases.append(job.phase)
                )
            )
        assert len(client.fetched) == 3
        assert phases[-1] is ReplayPhase.FAILED

    def test_operation_error_fails(self):
        errored = {"name": "op", "done": True, "error": {"message": "quota exceeded"}}
        client = FakeOperationsClient(PENDING, [errored])
        with pytest.raises(GenerationError, match="quota exceeded"):
            asyncio.run(make_poller(client).run("robot dunk"))

    def test_done_without_video_is_empty(self):
        client = FakeOperationsClient({"name": "op", "done": True, "response": {}})
        with pytest.raises(EmptyResponse):
            asyncio.run(make_poller(client).run("robot dunk"))

    def test_missing_operation_name_is_malformed(self):
        client = FakeOperationsClient({"done": False})
        with pytest.raises(MalformedResponse):
            asyncio.run(make_poller(client).run("robot dunk"))

    def test_submit_failure_is_wrapped(self):
        client = FakeOperationsClient(GeminiAPIError("API error: 400", 400))
        with pytest.raises(GenerationError) as exc_info:
            asyncio.run(make_poller(client).run("robot dunk"))
        assert exc_info.value.operation == "generate_replay"

    def test_poll_failure_is_wrapped(self):
        client = FakeOperationsClient(PENDING, [GeminiAPIError("API error: 404", 404)])
        with pytest.raises(GenerationError, match="poll failed"):
            asyncio.run(make_poller(client).run("robot dunk"))


class TestExtractVideoUri:
    def test_generated_samples(self):
        assert extract_video_uri(finished("https://v/1")) == "https://v/1"

    def test_generated_videos(self):
        operation = {"response": {"generatedVideos": [{"video": {"uri": "https://v/2"}}]}}
        assert extract_video_uri(operation) == "https://v/2"

    def test_no_samples(self):
        assert extract_video_uri({"response": {}}) is None
