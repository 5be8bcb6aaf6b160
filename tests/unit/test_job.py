"""
Unit tests for the job envelope.
"""

import pytest

from redqueue.client import QueueClient
from redqueue.exceptions import PayloadShapeError
from redqueue.job import Job
from redqueue.types.job import JobPayload


class SendEmail:
    """Job class used as an enqueue target."""


class TestJob:
    """Tests for Job."""

    @pytest.mark.asyncio
    async def test_reserve_wraps_payload(self, queue_client: QueueClient):
        await queue_client.enqueue("mailer", "Send", "a@b.com")

        job = await Job.reserve(queue_client, "mailer")

        assert job is not None
        assert job.queue == "mailer"
        assert job.client is queue_client
        assert job.job_class == "Send"
        assert job.args == ["a@b.com"]

    @pytest.mark.asyncio
    async def test_reserve_empty_queue(self, queue_client: QueueClient):
        assert await Job.reserve(queue_client, "mailer") is None

    @pytest.mark.asyncio
    async def test_reserve_wrong_shape(self, queue_client: QueueClient):
        await queue_client.push("mailer", {"klass": "Send"})

        with pytest.raises(PayloadShapeError):
            await Job.reserve(queue_client, "mailer")

    @pytest.mark.asyncio
    async def test_create_with_class(self, queue_client: QueueClient):
        await Job.create(queue_client, "mailer", SendEmail, 1, {"to": "x"})

        assert await queue_client.peek("mailer") == {"class": "SendEmail", "args": [1, {"to": "x"}]}

    @pytest.mark.asyncio
    async def test_equality_ignores_client(self, queue_client: QueueClient):
        payload = JobPayload(job_class="Send", args=[1])
        assert Job(queue_client, "mailer", payload) == Job(None, "mailer", payload)
        assert Job(queue_client, "mailer", payload) != Job(queue_client, "other", payload)

    @pytest.mark.asyncio
    async def test_context(self, queue_client: QueueClient):
        job = Job(queue_client, "mailer", JobPayload(job_class="Send", args=[1]))

        context = job.context("w1")

        assert context.queue == "mailer"
        assert context.job_class == "Send"
        assert context.args == [1]
        assert context.worker_id == "w1"

    @pytest.mark.asyncio
    async def test_fail_with_exception(self, queue_client: QueueClient):
        job = Job(queue_client, "mailer", JobPayload(job_class="Send", args=[1]))

        try:
            raise ValueError("bad address")
        except ValueError as e:
            failure = await job.fail(e, worker_id="w1")

        assert failure.exception == "ValueError"
        assert failure.error == "bad address"
        assert failure.queue == "mailer"
        assert failure.worker == "w1"
        assert failure.backtrace
        assert await queue_client.failed() == 1

    @pytest.mark.asyncio
    async def test_fail_with_name(self, queue_client: QueueClient):
        job = Job(queue_client, "mailer", JobPayload(job_class="Send", args=[]))

        failure = await job.fail("HandlerNotFound", error="no handler")

        assert failure.exception == "HandlerNotFound"
        assert failure.error == "no handler"
        assert failure.backtrace == []
