"""Inbound Slack engine: authentication, classification and normalization.

Usage:
    from app.slack import authenticate, classify, normalize, resolve_channel_type
"""

from .channel import resolve_channel_type
from .classify import classify, discard_link_buttons, split_mixed_event
from .normalize import NormalizerOptions, normalize
from .prefetch import AttachmentPrefetcher
from .verify import authenticate, compute_signature

__all__ = [
    "authenticate",
    "compute_signature",
    "classify",
    "discard_link_buttons",
    "split_mixed_event",
    "resolve_channel_type",
    "normalize",
    "NormalizerOptions",
    "AttachmentPrefetcher",
]
