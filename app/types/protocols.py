from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Protocol

from .events import AttachmentRef, CanonicalEvent
from .messages import OutboundMessage
from .results import SendResult


class MessagingAdapter(Protocol):
    """Protocol for messaging providers.

    Concrete implementations encapsulate provider-specific HTTP and webhook
    normalization so routers remain provider-agnostic.

    Responsibilities:
        - Convert `OutboundMessage` to provider payloads and send
        - Verify incoming webhook authenticity against the raw body
        - Normalize provider webhook bodies to `CanonicalEvent`s
    """

    def send_endpoint(self) -> str:
        """Return the full URL endpoint used for sending messages for this adapter."""
        ...

    def send_message(self, message: OutboundMessage) -> SendResult:
        """Send an outbound message.

        Implementations should raise provider-specific errors or HTTP errors on
        failure; routers map these into appropriate API responses.
        """
        ...

    def verify_request(self, raw_body: bytes, headers: Mapping[str, str]) -> None:
        """Raise `AuthenticationError` if the incoming webhook is not authentic."""
        ...

    def normalize_events(self, body: Dict[str, Any]) -> List[CanonicalEvent]:
        """Normalize an inbound webhook payload to zero or more canonical events."""
        ...


class AttachmentStore(Protocol):
    """Durable storage for files that are only reachable through transient URLs."""

    async def fetch_and_store(self, url: str, name: Optional[str]) -> AttachmentRef:
        """Download `url` and persist it; return a reference with a stable id.

        Implementations raise `AttachmentFetchError` on any network or storage
        failure and must not retry on their own.
        """
        ...
