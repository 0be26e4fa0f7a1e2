from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel


class SendResult(BaseModel):
    """Standardized result returned by adapters after attempting to send.

    Attributes:
        message_id: Slack `ts` of the posted message (its id within the channel).
        ok: Mirrors Slack's `{"ok": true}` envelope.
        data: Raw Slack response payload for debugging or advanced consumers.

    Example:
        >>> from app.types import SendResult
        >>> SendResult(message_id="1700000000.000100", ok=True)
    """

    message_id: Optional[str] = None
    ok: Optional[bool] = None
    data: Optional[Dict[str, Any]] = None
