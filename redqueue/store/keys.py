"""
Key namespacing.

Every logical resource (a queue, a worker, a stat) maps to exactly one
store key. Two segment lists produce the same key only when they are equal
element-wise, so the delimiter is escaped wherever it appears inside a
segment value.
"""

from typing import Any

from redqueue.constants import (
    DEFAULT_KEY_DELIMITER,
    DEFAULT_KEY_ROOT,
    QUEUE_SEGMENT,
    QUEUES_SEGMENT,
    STARTED_SEGMENT,
    STATS_SEGMENT,
    WORKER_SEGMENT,
    WORKERS_SEGMENT,
)
from redqueue.exceptions import InvalidKeySegmentError

ESCAPE_CHAR = "%"


class KeyNamespace:
    """
    Maps segment lists to store keys under a fixed root.

    ``KeyNamespace().key("queue", "mailer")`` is ``"resque:queue:mailer"``.
    """

    def __init__(
        self,
        root: str = DEFAULT_KEY_ROOT,
        delimiter: str = DEFAULT_KEY_DELIMITER,
    ):
        if not delimiter or len(delimiter) != 1 or delimiter == ESCAPE_CHAR:
            raise InvalidKeySegmentError(f"Invalid key delimiter: {delimiter!r}")
        self.root = root
        self.delimiter = delimiter
        self._escapes = {
            ESCAPE_CHAR: f"%{ord(ESCAPE_CHAR):02X}",
            delimiter: f"%{ord(delimiter):02X}",
        }

    def escape(self, segment: Any) -> str:
        """Render one segment, escaping the delimiter and the escape char."""
        value = str(segment)
        if not value:
            raise InvalidKeySegmentError("Key segments must not be empty")
        if ESCAPE_CHAR not in value and self.delimiter not in value:
            return value
        return "".join(self._escapes.get(char, char) for char in value)

    def key(self, *segments: Any) -> str:
        """Join segments under the root."""
        return self.delimiter.join([self.root, *(self.escape(s) for s in segments)])

    def queue(self, name: str) -> str:
        return self.key(QUEUE_SEGMENT, name)

    def queues(self) -> str:
        return self.key(QUEUES_SEGMENT)

    def workers(self) -> str:
        return self.key(WORKERS_SEGMENT)

    def worker(self, worker_id: str) -> str:
        return self.key(WORKER_SEGMENT, worker_id)

    def worker_started(self, worker_id: str) -> str:
        return self.key(WORKER_SEGMENT, worker_id, STARTED_SEGMENT)

    def stat(self, kind: str, worker_id: str | None = None) -> str:
        if worker_id is None:
            return self.key(STATS_SEGMENT, kind)
        return self.key(STATS_SEGMENT, kind, worker_id)

    def __repr__(self) -> str:
        return f"KeyNamespace(root={self.root!r}, delimiter={self.delimiter!r})"
