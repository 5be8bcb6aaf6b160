"""
Unit tests for configuration.
"""

from redqueue.client import QueueClient
from redqueue.config import Settings


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.key_root == "resque"
        assert settings.key_delimiter == ":"
        assert settings.worker_ttl_seconds == 10_000
        assert settings.worker_queues == ["default"]

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("WORKER_TTL_SECONDS", "30")
        monkeypatch.setenv("WORKER_QUEUES", '["mailer", "reports"]')

        settings = Settings(_env_file=None)

        assert settings.worker_ttl_seconds == 30
        assert settings.worker_queues == ["mailer", "reports"]

    def test_test_settings(self, test_settings: Settings):
        assert test_settings.worker_ttl_seconds == 1
        assert test_settings.log_format == "console"

    def test_client_defaults_from_settings(self, redis_client):
        client = QueueClient(redis_client)

        assert client.keys.queue("mailer") == "resque:queue:mailer"
        assert client.worker_ttl_seconds == 10_000
