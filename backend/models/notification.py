"""Pydantic models for the notification dispatch system."""

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.types import (
    AuditRecordID,
    EmailAddress,
    IdentityID,
    ProviderMessageID,
    TemplateData,
)

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"

RateWindow = Literal["hourly", "daily"]


class DeliveryStatus(str, Enum):
    """Outcome stored in the email_logs status column."""

    SENT = "sent"
    FAILED = "failed"


class NotificationRequest(BaseModel):
    """Inbound request to send one email notification.

    Accepts the short wire names (to, template, data, html, text) as well as
    the field names.
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
        frozen=True,
    )

    recipient_address: EmailAddress = Field(
        ..., min_length=1, pattern=EMAIL_PATTERN, alias="to"
    )
    subject: str = Field(..., min_length=1)
    template_id: str | None = Field(None, alias="template")
    template_data: TemplateData = Field(default_factory=dict, alias="data")
    raw_html: str | None = Field(None, alias="html")
    raw_text: str | None = Field(None, alias="text")

    @field_validator("template_data", mode="before")
    @classmethod
    def _null_data_is_empty(cls, value):
        return {} if value is None else value


class RenderedContent(BaseModel):
    """HTML and plain-text bodies produced once per request."""

    model_config = ConfigDict(frozen=True)

    html: str = ""
    text: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.html.strip() and not self.text.strip()


class AuditRecord(BaseModel):
    """One dispatch attempt and its outcome. Never mutated after creation."""

    model_config = ConfigDict(frozen=True)

    id: AuditRecordID
    identity_id: IdentityID
    recipient_address: EmailAddress
    subject: str
    template_id: str | None = None
    outcome: DeliveryStatus
    failure_reason: str | None = None
    timestamp: datetime


class RateWindowConfig(BaseModel):
    """Per-identity send quotas, fixed for the life of the process."""

    model_config = ConfigDict(frozen=True)

    max_per_hour: int = Field(10, gt=0)
    max_per_day: int = Field(50, gt=0)
    count_failed_attempts: bool = True


class AdmissionDecision(BaseModel):
    """Result of a rate limit check."""

    model_config = ConfigDict(frozen=True)

    allowed: bool
    reason: str | None = None
    window: RateWindow | None = None


class DispatchResult(BaseModel):
    """Successful delivery of a notification."""

    model_config = ConfigDict(frozen=True)

    record_id: AuditRecordID
    message_id: ProviderMessageID | None = None
    recipient_address: EmailAddress
    template_id: str | None = None
    sent_at: datetime


class EmailStats(BaseModel):
    """Send counters for one identity."""

    sent_today: int = Field(0, ge=0)
    sent_this_hour: int = Field(0, ge=0)
    failed_today: int = Field(0, ge=0)
    total_sent: int = Field(0, ge=0)


class RemainingQuota(BaseModel):
    """Informational remaining quota; the dispatcher makes the real decision."""

    remaining_this_hour: int = Field(0, ge=0)
    remaining_today: int = Field(0, ge=0)
    can_send: bool
