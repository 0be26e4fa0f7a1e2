"""Slack mention markup helpers."""

from __future__ import annotations

import re
from typing import Optional

# <@U0123ABCD> or <@U0123ABCD|display name>
MENTION_PATTERN = re.compile(r"<@[A-Za-z0-9]+(?:\|[^>]*)?>")


def strip_mentions(text: Optional[str]) -> str:
    """Remove user-mention markup and trim surrounding whitespace."""
    if not text:
        return ""
    return MENTION_PATTERN.sub("", text).strip()
