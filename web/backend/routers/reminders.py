#!/usr/bin/env python3
"""
Reminder endpoints - enqueue the weekly reminder notifications.
"""

from fastapi import APIRouter, Depends, Request, Response

from ..dependencies import get_notification_service
from ..models.responses import ScheduleRemindersResponse
from ..services.notification_service import NotificationDispatchService
from ..utils import ALL_METHODS, CORS_HEADERS
from .notifications import preflight_response

router = APIRouter(tags=["reminders"])


@router.api_route(
    "/schedule-reminders",
    methods=ALL_METHODS,
    response_model=ScheduleRemindersResponse,
    response_model_exclude_none=True,
)
def schedule_reminders(
    request: Request,
    response: Response,
    notification_service: NotificationDispatchService = Depends(get_notification_service)
):
    """Run the weekly reminder procedure. Delivery happens on the next dispatch run."""
    if request.method == "OPTIONS":
        return preflight_response()

    response.headers.update(CORS_HEADERS)
    notification_service.schedule_reminders()

    return ScheduleRemindersResponse(success=True, message="Weekly reminders scheduled")
