"""
Exception hierarchy for queue and store operations.

Absence (an empty queue, an expired record) is never an exception: it is
returned as None. Everything raised here means the caller got no answer.
"""


class RedqueueError(Exception):
    """Base class for all errors raised by this package."""


class StoreUnavailableError(RedqueueError):
    """The store could not be reached or did not answer in time."""

    def __init__(self, primitive: str, detail: str | None = None):
        self.primitive = primitive
        self.detail = detail
        message = f"Store unavailable during {primitive}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class InvalidKeySegmentError(RedqueueError, ValueError):
    """A key segment cannot be mapped to a store key."""


class CodecError(RedqueueError):
    """Base class for payload encoding and decoding failures."""


class EncodeError(CodecError):
    """A value could not be serialized."""


class MalformedPayloadError(CodecError):
    """Stored bytes are not valid payload text."""

    def __init__(self, data: bytes | str, detail: str):
        self.data = data
        super().__init__(f"Malformed payload: {detail}")


class PayloadShapeError(CodecError):
    """A decoded payload does not have the expected structure."""

    def __init__(self, model: str, detail: str):
        self.model = model
        super().__init__(f"Payload does not match {model}: {detail}")
