"""Exception types raised by the topic and registration layer.

Each failure category gets its own class so callers can tell a topic that
could not be provisioned apart from a registrar that refused a record.
"""

from typing import Optional


class DavError(Exception):
    """Base exception for all davsdk errors."""

    pass


class TopicProvisioningError(DavError):
    """Raised when a generated topic could not be created on the log."""

    def __init__(self, topic_id: str, cause: Exception):
        self.topic_id = topic_id
        self.cause = cause
        super().__init__(f"Topic registration failed: {cause}")


class RegistrationError(DavError):
    """Raised when the registrar rejects (or never receives) a POST.

    ``cause`` is the transport error exactly as the registrar raised it.
    """

    def __init__(self, label: str, url: str, cause: Exception):
        self.label = label
        self.url = url
        self.cause = cause
        super().__init__(f"{label} registration failed: {cause}")


class StreamError(DavError):
    """Raised by log clients when a subscription cannot be opened or breaks.

    Streams forward these verbatim; they are never wrapped again.
    """

    def __init__(self, topic_id: str, message: str, cause: Optional[Exception] = None):
        self.topic_id = topic_id
        self.cause = cause
        text = f"Stream on topic '{topic_id}' failed: {message}"
        if cause:
            text += f": {cause}"
        super().__init__(text)
