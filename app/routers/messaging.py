from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from app.adapters.registry import AdapterRegistry
from app.types import SendMessageRequest, SendMessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["messaging"])


@router.post("/messages/send")
def send_message(payload: SendMessageRequest) -> SendMessageResponse:
    """Send a plain text message or an interaction response through an adapter.

    Declared sync: adapters post with a blocking `httpx.Client`, so FastAPI
    runs this in its threadpool.
    """
    try:
        adapter = AdapterRegistry.get(payload.provider)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e.args[0]))

    try:
        payload.message.ensure_valid_target()
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    try:
        result = adapter.send_message(payload.message)
    except Exception as e:
        logger.warning("send through %s failed: %s", payload.provider, e)
        raise HTTPException(status_code=502, detail=f"Send error: {e}")
    return SendMessageResponse(ok=True, result=result)
