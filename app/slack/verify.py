"""Slack request signature verification.

Slack signs every webhook call with the app's signing secret:

    X-Slack-Signature: v0=<hex(HMAC-SHA256(secret, "v0:<timestamp>:<raw body>"))>
    X-Slack-Request-Timestamp: <unix seconds>

The signature covers the exact bytes Slack sent, so verification has to run
on the raw request body before anything parses it.
"""

from __future__ import annotations

import hashlib
import hmac
import re
import time
from typing import Mapping, Optional

from app.types import AuthenticationError

SIGNATURE_HEADER = "X-Slack-Signature"
TIMESTAMP_HEADER = "X-Slack-Request-Timestamp"
SIGNATURE_VERSION = "v0"
DEFAULT_MAX_SKEW_MINUTES = 5
# unix seconds as Slack sends them: ASCII digits only
TIMESTAMP_PATTERN = re.compile(r"[0-9]+")


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    value = headers.get(name)
    if value is None:
        # plain dicts are case sensitive, Starlette headers are not
        lowered = name.lower()
        for key, candidate in headers.items():
            if key.lower() == lowered:
                return candidate
    return value


def compute_signature(signing_secret: str, timestamp: int | str, raw_body: bytes) -> str:
    """Return the `v0=<hex>` signature Slack would send for `raw_body`."""
    basestring = f"{SIGNATURE_VERSION}:{timestamp}:".encode("utf-8") + raw_body
    digest = hmac.new(signing_secret.encode("utf-8"), basestring, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_VERSION}={digest}"


def authenticate(
    signing_secret: str,
    raw_body: bytes,
    headers: Mapping[str, str],
    now: Optional[float] = None,
    max_skew_minutes: int = DEFAULT_MAX_SKEW_MINUTES,
) -> None:
    """Verify that a webhook call was signed by Slack and is not a replay.

    Args:
        signing_secret: Current app signing secret.
        raw_body: Request body exactly as received.
        headers: Request headers (any mapping; lookup is case-insensitive).
        now: Current unix time in seconds; defaults to `time.time()`.
        max_skew_minutes: Oldest accepted request age.

    Raises:
        AuthenticationError: With a human readable reason on any failure.
    """
    if not signing_secret:
        raise AuthenticationError("signing secret is not configured")

    signature = _header(headers, SIGNATURE_HEADER)
    raw_timestamp = _header(headers, TIMESTAMP_HEADER)
    if not signature or not raw_timestamp:
        raise AuthenticationError("missing signature headers")

    if not TIMESTAMP_PATTERN.fullmatch(raw_timestamp):
        raise AuthenticationError(
            f"header {TIMESTAMP_HEADER} did not have the expected type ({raw_timestamp})"
        )
    timestamp = int(raw_timestamp)

    current = int(now if now is not None else time.time())
    if current - timestamp > max_skew_minutes * 60:
        raise AuthenticationError(
            f"{TIMESTAMP_HEADER} must differ from system time by no more than "
            f"{max_skew_minutes} minutes or request is stale"
        )

    version, _, provided_hash = signature.partition("=")
    if version != SIGNATURE_VERSION:
        raise AuthenticationError("unknown signature version")

    expected = compute_signature(signing_secret, raw_timestamp, raw_body)
    _, _, expected_hash = expected.partition("=")
    if not provided_hash or not hmac.compare_digest(
        provided_hash.encode("utf-8"), expected_hash.encode("utf-8")
    ):
        raise AuthenticationError("signature mismatch")
