# rivalwatch/core/detect/priority.py
"""
Notification routing for significant changes.

Downstream collaborators (queue, email) consume the plan; nothing here sends
anything. High-impact and pricing changes go out immediately at priority 1.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from pydantic import BaseModel, ConfigDict, Field

from rivalwatch.schemas.labels import NotificationType
from rivalwatch.schemas.models import ChangeRecord

MEDIUM_DELAY = timedelta(hours=2)
LOW_DELAY = timedelta(hours=6)


def _is_urgent(impact_level: str, change_type: str) -> bool:
    return impact_level == "high" or change_type == "pricing"


def notification_type(change_type: str) -> NotificationType:
    return "pricing_alert" if change_type == "pricing" else "feature_alert"


def notification_priority(impact_level: str, change_type: str) -> int:
    """1 = high, 2 = medium, 3 = low."""
    if _is_urgent(impact_level, change_type):
        return 1
    if impact_level == "medium":
        return 2
    return 3


def notification_delay(impact_level: str, change_type: str) -> timedelta:
    if _is_urgent(impact_level, change_type):
        return timedelta(0)
    if impact_level == "medium":
        return MEDIUM_DELAY
    return LOW_DELAY


class NotificationPlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    page_id: str
    notification_type: NotificationType
    priority: int = Field(..., ge=1, le=3)
    scheduled_for: datetime = Field(..., description="UTC time the notification becomes due.")

    @property
    def immediate(self) -> bool:
        return self.priority == 1


def plan_notification(record: ChangeRecord, *, now: datetime | None = None) -> NotificationPlan:
    base = now or datetime.now(timezone.utc)
    return NotificationPlan(
        page_id=record.page_id,
        notification_type=notification_type(record.change_type),
        priority=notification_priority(record.impact_level, record.change_type),
        scheduled_for=base + notification_delay(record.impact_level, record.change_type),
    )


__all__ = [
    "NotificationPlan",
    "notification_type",
    "notification_priority",
    "notification_delay",
    "plan_notification",
]
