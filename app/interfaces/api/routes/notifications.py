"""Endpoints triggering push notification deliveries."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import PlainTextResponse

from app.application.use_cases.notifications import PushDeliveryService
from app.interfaces.api.dependencies import get_push_delivery_service
from app.interfaces.api.schemas import ChatMessageCreate, EventCreatedNotify

logger = logging.getLogger(__name__)

router = APIRouter(tags=["notifications"])

ACKNOWLEDGEMENT = "ok"


@router.post("/chat", response_class=PlainTextResponse)
async def post_chat_message(
    payload: ChatMessageCreate,
    service: PushDeliveryService = Depends(get_push_delivery_service),
) -> str:
    """Store a chat message and push it to the other chat participants."""

    try:
        await service.send_chat_message(
            event_id=payload.event_id, user_id=payload.user_id, text=payload.text
        )
    except Exception as exc:
        logger.exception("Chat delivery failed for event %s", payload.event_id)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Bad Request"
        ) from exc
    return ACKNOWLEDGEMENT


@router.post("/notifyeventcreated", response_class=PlainTextResponse)
async def notify_event_created(
    payload: EventCreatedNotify,
    service: PushDeliveryService = Depends(get_push_delivery_service),
) -> str:
    """Notify the followers of the creator of a new event."""

    try:
        await service.notify_event_created(payload.event_id)
    except Exception as exc:
        logger.exception("Event created delivery failed for event %s", payload.event_id)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Bad Request"
        ) from exc
    return ACKNOWLEDGEMENT


__all__ = ["router"]
