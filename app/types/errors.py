from __future__ import annotations


class SlackAdapterError(Exception):
    """Base class for errors raised while handling inbound Slack calls."""


class AuthenticationError(SlackAdapterError):
    """The request could not be proven to come from Slack.

    Always fatal to the request: routers answer 401 and stop processing.
    """

    prefix = "Failed to verify authenticity"

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"{self.prefix}: {reason}")


class ClassificationError(SlackAdapterError):
    """The body matched no known webhook shape.

    Not fatal: the body is treated as unknown and acknowledged.
    """


class ExtractionError(SlackAdapterError):
    """A field required by the resolved event/message kind is absent."""

    def __init__(self, field: str, detail: str = "") -> None:
        self.field = field
        message = f"missing required field '{field}'"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class AttachmentFetchError(SlackAdapterError):
    """Downloading or storing a Slack hosted file failed."""

    def __init__(self, url: str, detail: str) -> None:
        self.url = url
        super().__init__(f"Failed to prefetch {url}: {detail}")
