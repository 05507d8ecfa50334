#!/usr/bin/env python3
"""
Response models for API endpoints.
"""

from pydantic import BaseModel, ConfigDict
from typing import Optional


class ProcessNotificationsResponse(BaseModel):
    """Result of one dispatch run."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "processed": 3,
                "sent": 2,
                "failed": 1
            }
        }
    )

    success: bool
    processed: int
    sent: int = 0
    failed: int = 0
    message: Optional[str] = None


class ScheduleRemindersResponse(BaseModel):
    """Response after enqueueing weekly reminders."""
    success: bool
    message: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    service: str
