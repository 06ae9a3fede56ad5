"""
Typed convenience client for sending task notifications.

Each send_* method builds the request for one notification kind and hands it
to the dispatcher, which makes the authoritative rate limit decision.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from models.notification import (
    AuditRecord,
    DeliveryStatus,
    DispatchResult,
    EmailStats,
    RateWindowConfig,
    RemainingQuota,
)
from models.types import IdentityID
from notifications.dispatcher import NotificationDispatcher
from notifications.templates import TemplateId
from shared.utils import ensure_utc, utc_now


class NotificationClient:
    """Notification sending and log access on behalf of one identity."""

    def __init__(self, dispatcher: NotificationDispatcher, identity_id: IdentityID):
        self.dispatcher = dispatcher
        self.identity_id = identity_id

    @property
    def rate_limits(self) -> RateWindowConfig:
        """Published quota configuration, for display and pre-checks only."""
        return self.dispatcher.rate_limiter.config

    def send(
        self,
        to: str,
        subject: str,
        template: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
        html: Optional[str] = None,
        text: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> DispatchResult:
        """Send a template-based or raw email."""
        payload: Dict[str, Any] = {"to": to, "subject": subject}
        if template is not None:
            payload["template"] = template
            payload["data"] = {k: v for k, v in (data or {}).items() if v is not None}
        if html is not None:
            payload["html"] = html
        if text is not None:
            payload["text"] = text
        return self.dispatcher.dispatch(self.identity_id, payload, now=now)

    def send_task_reminder(
        self,
        to: str,
        task_name: str,
        due_date: Optional[str] = None,
        description: Optional[str] = None,
        url: Optional[str] = None,
    ) -> DispatchResult:
        return self.send(
            to=to,
            subject=f"Task Reminder: {task_name}",
            template=TemplateId.TASK_REMINDER.value,
            data={
                "taskName": task_name,
                "dueDate": due_date,
                "description": description,
                "url": url,
            },
        )

    def send_task_assigned(
        self,
        to: str,
        task_name: str,
        assigned_by: str,
        description: Optional[str] = None,
        due_date: Optional[str] = None,
        url: Optional[str] = None,
    ) -> DispatchResult:
        return self.send(
            to=to,
            subject=f"New Task Assigned: {task_name}",
            template=TemplateId.TASK_ASSIGNED.value,
            data={
                "taskName": task_name,
                "assignedBy": assigned_by,
                "description": description,
                "dueDate": due_date,
                "url": url,
            },
        )

    def send_task_completed(
        self,
        to: str,
        task_name: str,
        completed_by: str,
        completed_at: Optional[str] = None,
    ) -> DispatchResult:
        return self.send(
            to=to,
            subject=f"Task Completed: {task_name}",
            template=TemplateId.TASK_COMPLETED.value,
            data={
                "taskName": task_name,
                "completedBy": completed_by,
                "completedAt": completed_at,
            },
        )

    def send_welcome(
        self,
        to: str,
        user_name: Optional[str] = None,
        login_url: Optional[str] = None,
    ) -> DispatchResult:
        return self.send(
            to=to,
            subject="Welcome to Tidy Prioritize!",
            template=TemplateId.WELCOME.value,
            data={"userName": user_name, "loginUrl": login_url},
        )

    def send_password_reset(
        self, to: str, reset_url: str, expires_in: str = "1 hour"
    ) -> DispatchResult:
        return self.send(
            to=to,
            subject="Password Reset Request",
            template=TemplateId.PASSWORD_RESET.value,
            data={"resetUrl": reset_url, "expiresIn": expires_in},
        )

    def get_logs(self, limit: int = 50) -> List[AuditRecord]:
        """Most recent audit records for this identity, newest first."""
        return self.dispatcher.store.list_recent(self.identity_id, limit)

    def get_stats(self, now: Optional[datetime] = None) -> EmailStats:
        """
        Sent and failed counts for this identity.

        "Today" starts at midnight UTC of now; "this hour" is the sliding
        hour ending at now.
        """
        now = ensure_utc(now or utc_now())
        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
        store = self.dispatcher.store
        return EmailStats(
            sent_today=store.count_since(self.identity_id, start_of_day, DeliveryStatus.SENT),
            sent_this_hour=store.count_since(
                self.identity_id, now - timedelta(hours=1), DeliveryStatus.SENT
            ),
            failed_today=store.count_since(
                self.identity_id, start_of_day, DeliveryStatus.FAILED
            ),
            total_sent=store.count_all(self.identity_id, DeliveryStatus.SENT),
        )

    def remaining_quota(self, now: Optional[datetime] = None) -> RemainingQuota:
        """Sends left before the dispatcher starts rejecting, as of now."""
        now = ensure_utc(now or utc_now())
        return self.dispatcher.rate_limiter.remaining_quota(self.identity_id, now)
