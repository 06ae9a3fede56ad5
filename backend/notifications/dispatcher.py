"""
Single-request notification dispatch.

Runs validate -> admit -> render -> deliver -> log for one request, strictly
in that order. This is the only place internal failures are translated into
the caller-visible ValidationError, RejectedError and DeliveryError.
"""

import uuid
from datetime import datetime
from typing import Any, Callable, Dict, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from models.notification import (
    AuditRecord,
    DeliveryStatus,
    DispatchResult,
    NotificationRequest,
    RenderedContent,
)
from models.types import AuditRecordID, IdentityID, ProviderMessageID
from notifications.audit_log import AuditLogStore
from notifications.errors import (
    AuditWriteError,
    DeliveryError,
    RejectedError,
    ValidationError,
)
from notifications.error_logger import log_notification_error
from notifications.rate_limiter import RateLimiter
from notifications.templates import render_template
from shared.utils import ensure_utc, utc_now

RequestPayload = Union[NotificationRequest, Mapping[str, Any]]


def _describe_validation_error(error: PydanticValidationError) -> str:
    problems = []
    for item in error.errors():
        field = ".".join(str(part) for part in item.get("loc", ())) or "request"
        problems.append(f"{field}: {item.get('msg', 'invalid value')}")
    return "Invalid notification request - " + "; ".join(problems)


class NotificationDispatcher:
    """Orchestrates one email notification from admission to audit record."""

    def __init__(
        self,
        store: AuditLogStore,
        rate_limiter: RateLimiter,
        sender: Any,
        renderer: Callable[..., RenderedContent] = render_template,
        clock: Callable[[], datetime] = utc_now,
        log_dir: Optional[str] = None,
    ):
        self.store = store
        self.rate_limiter = rate_limiter
        self.sender = sender
        self.renderer = renderer
        self.clock = clock
        self.log_dir = log_dir

    def dispatch(
        self,
        identity_id: IdentityID,
        request: RequestPayload,
        now: Optional[datetime] = None,
    ) -> DispatchResult:
        """
        Send one notification on behalf of identity_id.

        Args:
            identity_id: Authenticated caller the send is attributed to
            request: NotificationRequest or its wire-format dictionary
            now: Admission instant; defaults to the dispatcher clock

        Returns:
            DispatchResult for a delivered email

        Raises:
            ValidationError: Request is malformed, names an unknown template,
                or resolves to empty content. Nothing is logged.
            RejectedError: Quota exceeded. A failed record is logged.
            DeliveryError: Provider call failed. A failed record is logged.
        """
        now = ensure_utc(now or self.clock())

        # 1. Validate
        notification = self._validate(request)

        # 2. Admit
        try:
            decision = self.rate_limiter.check_admission(identity_id, now)
        except Exception as e:
            self._report("admission", str(e), {"identity_id": identity_id})
            raise DeliveryError(
                f"Rate limit check failed: {e}", step="admission"
            ) from e

        if not decision.allowed:
            reason = decision.reason or "Rate limit exceeded"
            self._record(identity_id, notification, now, DeliveryStatus.FAILED, reason)
            raise RejectedError(reason, window=decision.window)

        # 3. Render
        content = self._resolve_content(notification)

        # 4. Deliver
        try:
            result = self.sender.send_email(
                notification.recipient_address, notification.subject, content
            )
        except Exception as e:
            result = {"success": False, "error": f"Email service error: {e}"}

        if not result.get("success"):
            error_msg = str(result.get("error") or "Unknown error")
            self._record(
                identity_id, notification, now, DeliveryStatus.FAILED, error_msg
            )
            raise DeliveryError(error_msg, step="delivery")

        record = self._record(identity_id, notification, now, DeliveryStatus.SENT)
        email_id = result.get("email_id")
        return DispatchResult(
            record_id=record.id,
            message_id=ProviderMessageID(email_id) if email_id else None,
            recipient_address=notification.recipient_address,
            template_id=notification.template_id,
            sent_at=now,
        )

    def preview(self, request: RequestPayload) -> RenderedContent:
        """Validate and render a request without admission, delivery or logging."""
        return self._resolve_content(self._validate(request))

    def _validate(self, request: RequestPayload) -> NotificationRequest:
        if isinstance(request, NotificationRequest):
            return request
        try:
            return NotificationRequest.model_validate(dict(request))
        except PydanticValidationError as e:
            raise ValidationError(_describe_validation_error(e)) from e
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Invalid notification request - {e}") from e

    def _resolve_content(self, notification: NotificationRequest) -> RenderedContent:
        if notification.template_id:
            # UnknownTemplate is a ValidationError and propagates as-is
            content = self.renderer(notification.template_id, notification.template_data)
        else:
            content = RenderedContent(
                html=notification.raw_html or "", text=notification.raw_text or ""
            )

        if content.is_empty:
            raise ValidationError("Either html, text, or template must be provided")
        return content

    def _record(
        self,
        identity_id: IdentityID,
        notification: NotificationRequest,
        now: datetime,
        outcome: DeliveryStatus,
        failure_reason: Optional[str] = None,
    ) -> AuditRecord:
        """Build and append the audit record; write failures are reported, not raised."""
        record = AuditRecord(
            id=AuditRecordID(str(uuid.uuid4())),
            identity_id=identity_id,
            recipient_address=notification.recipient_address,
            subject=notification.subject,
            template_id=notification.template_id,
            outcome=outcome,
            failure_reason=failure_reason,
            timestamp=now,
        )
        try:
            self.store.append(record)
        except Exception as e:
            error = e if isinstance(e, AuditWriteError) else AuditWriteError(str(e))
            context: Dict[str, Any] = {
                "identity_id": identity_id,
                "record_id": record.id,
                "outcome": outcome.value,
                "recipient": notification.recipient_address,
                "subject": notification.subject,
            }
            self._report("audit_write", error.message, context)
        return record

    def _report(self, error_type: str, message: str, context: Dict[str, Any]) -> None:
        try:
            error_file = log_notification_error(
                error_type=error_type,
                error_message=message,
                context=context,
                log_dir=self.log_dir,
            )
            print(f"  ⚠️  {error_type} failed. Details logged to: {error_file}")
        except OSError as report_error:
            print(
                f"  ⚠️  {error_type} failed ({message}); "
                f"report could not be written: {report_error}"
            )
