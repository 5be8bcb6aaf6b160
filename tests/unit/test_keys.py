"""
Unit tests for key namespacing.
"""

import pytest

from redqueue.exceptions import InvalidKeySegmentError
from redqueue.store.keys import KeyNamespace


class TestKeyNamespace:
    """Tests for KeyNamespace."""

    def test_key_layout(self, keys: KeyNamespace):
        """Test the documented key layout."""
        assert keys.queue("mailer") == "resque:queue:mailer"
        assert keys.queues() == "resque:queues"
        assert keys.workers() == "resque:workers"
        assert keys.worker("w1") == "resque:worker:w1"
        assert keys.worker_started("w1") == "resque:worker:w1:started"
        assert keys.stat("processed") == "resque:stats:processed"
        assert keys.stat("processed", "w1") == "resque:stats:processed:w1"
        assert keys.stat("failed", "w1") == "resque:stats:failed:w1"

    def test_root_only(self, keys: KeyNamespace):
        assert keys.key() == "resque"

    def test_non_string_segments(self, keys: KeyNamespace):
        assert keys.key("queue", 42) == "resque:queue:42"

    def test_delimiter_is_escaped(self, keys: KeyNamespace):
        """Test that a delimiter inside a segment cannot fake extra segments."""
        assert keys.worker("host:1:mailer") == "resque:worker:host%3A1%3Amailer"
        assert keys.worker_started("a:started") != keys.worker_started("a") + ":started"
        assert keys.worker("a:started") != keys.worker_started("a")

    def test_escape_char_is_escaped(self, keys: KeyNamespace):
        """Test that an already escaped segment stays distinct."""
        assert keys.queue("a%3Ab") == "resque:queue:a%253Ab"
        assert keys.queue("a%3Ab") != keys.queue("a:b")

    def test_equal_segments_equal_keys(self, keys: KeyNamespace):
        assert keys.key("stats", "processed", "w1") == keys.stat("processed", "w1")

    def test_empty_segment_rejected(self, keys: KeyNamespace):
        with pytest.raises(InvalidKeySegmentError):
            keys.queue("")

    def test_custom_root_and_delimiter(self):
        keys = KeyNamespace(root="app", delimiter="/")
        assert keys.queue("a:b") == "app/queue/a:b"
        assert keys.queue("a/b") == "app/queue/a%2Fb"

    @pytest.mark.parametrize("delimiter", ["", "::", "%"])
    def test_invalid_delimiter(self, delimiter: str):
        with pytest.raises(InvalidKeySegmentError):
            KeyNamespace(delimiter=delimiter)
