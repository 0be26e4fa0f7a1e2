from __future__ import annotations

from pathlib import Path
from typing import Generator, List

import pytest
from fastapi.testclient import TestClient

from main import app
from app.services.attachment_store import LocalAttachmentStore, set_attachment_store
from app.services.credentials import get_slack_credentials
from app.services.event_pipeline import get_event_pipeline
from app.types import CanonicalEvent, EventKind
from tests.fixtures.slack_events import ACCESS_TOKEN, SIGNING_SECRET


@pytest.fixture(autouse=True)
def slack_credentials() -> Generator[None, None, None]:
    credentials = get_slack_credentials()
    previous = (credentials.signing_secret, credentials.access_token)
    credentials.rotate_signing_secret(SIGNING_SECRET)
    credentials.rotate_access_token(ACCESS_TOKEN)
    yield
    credentials.rotate_signing_secret(previous[0])
    credentials.rotate_access_token(previous[1])


@pytest.fixture()
def dispatched() -> Generator[List[CanonicalEvent], None, None]:
    """Record every event the webhook hands to the bot pipeline."""
    pipeline = get_event_pipeline()
    pipeline.clear()
    received: List[CanonicalEvent] = []
    for kind in EventKind:
        pipeline.subscribe(kind, received.append)
    yield received
    pipeline.clear()


@pytest.fixture()
def attachment_dir(tmp_path: Path) -> Generator[Path, None, None]:
    set_attachment_store(LocalAttachmentStore(tmp_path, timeout=1.0))
    yield tmp_path
    set_attachment_store(None)


@pytest.fixture()
def client() -> TestClient:
    return TestClient(app)
