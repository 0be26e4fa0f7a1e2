"""Utility functions for the Slack channel adapter."""

from .mentions import MENTION_PATTERN, strip_mentions

__all__ = [
    "MENTION_PATTERN",
    "strip_mentions",
]
