#!/usr/bin/env python3
"""
Notification endpoints - drain the notification queue.
"""

import logging

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import PlainTextResponse

from ..dependencies import get_notification_service
from ..models.responses import ProcessNotificationsResponse
from ..services.notification_service import NotificationDispatchService
from ..utils import ALL_METHODS, CORS_HEADERS

logger = logging.getLogger(__name__)

router = APIRouter(tags=["notifications"])

EMPTY_QUEUE_MESSAGE = "No pending notifications to process."


def preflight_response() -> PlainTextResponse:
    """CORS preflight answer shared by the trigger endpoints."""
    return PlainTextResponse("ok", headers=CORS_HEADERS)


@router.api_route(
    "/process-notifications",
    methods=ALL_METHODS,
    response_model=ProcessNotificationsResponse,
    response_model_exclude_none=True,
)
def process_notifications(
    request: Request,
    response: Response,
    notification_service: NotificationDispatchService = Depends(get_notification_service)
):
    """
    Claim and deliver one batch of pending notifications.

    Called by the scheduler. Any method is accepted; OPTIONS answers the
    CORS preflight without touching the queue.
    """
    if request.method == "OPTIONS":
        return preflight_response()

    response.headers.update(CORS_HEADERS)
    result = notification_service.process_notifications()

    return ProcessNotificationsResponse(
        success=True,
        processed=result.processed,
        sent=result.sent,
        failed=result.failed,
        message=EMPTY_QUEUE_MESSAGE if result.processed == 0 else None
    )
