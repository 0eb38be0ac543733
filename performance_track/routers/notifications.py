"""Notification router - inbox endpoints and the live event stream."""
import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import StreamingResponse

from performance_track.database import get_database
from performance_track.models.notification import Notification, NotificationStatus
from performance_track.models.user import CurrentUser
from performance_track.routers.auth import get_current_user
from performance_track.services.notification_service import NotificationService, broker


router = APIRouter(prefix="/notifications", tags=["notifications"])

# Seconds between keep-alive comments on an idle stream
KEEPALIVE_INTERVAL = 15


@router.get("", response_model=list[Notification])
async def list_notifications(
    notification_status: Optional[NotificationStatus] = Query(
        None, alias="status", description="Filter by UNREAD or READ"
    ),
    current_user: CurrentUser = Depends(get_current_user),
    db=Depends(get_database),
):
    """List the caller's notifications, newest first."""
    service = NotificationService(db)
    return await service.list_notifications(current_user.id, status=notification_status)


@router.patch("/read-all")
async def mark_all_read(
    current_user: CurrentUser = Depends(get_current_user),
    db=Depends(get_database),
):
    """Mark every unread notification of the caller as read."""
    service = NotificationService(db)
    return await service.mark_all_as_read(current_user.id)


@router.patch("/{notification_id}/read", response_model=Notification)
async def mark_read(
    notification_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db=Depends(get_database),
):
    """Mark one notification as read (404 if it is not the caller's)."""
    service = NotificationService(db)
    return await service.mark_as_read(current_user.id, notification_id)


@router.get("/stream")
async def stream_notifications(
    request: Request,
    current_user: CurrentUser = Depends(get_current_user),
):
    """Server-sent events: one ``notification`` event per new notification."""
    queue = broker.subscribe(current_user.id)

    async def event_source():
        try:
            while not await request.is_disconnected():
                try:
                    notification = await asyncio.wait_for(queue.get(), timeout=KEEPALIVE_INTERVAL)
                except asyncio.TimeoutError:
                    yield ": keep-alive\n\n"
                    continue
                payload = notification.model_dump_json(by_alias=True)
                yield f"event: notification\ndata: {payload}\n\n"
        finally:
            broker.unsubscribe(current_user.id, queue)

    return StreamingResponse(event_source(), media_type="text/event-stream")
