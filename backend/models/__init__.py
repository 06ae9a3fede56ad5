"""Pydantic models for data validation and type checking."""

from models.notification import (
    AdmissionDecision,
    AuditRecord,
    DeliveryStatus,
    DispatchResult,
    EmailStats,
    NotificationRequest,
    RateWindowConfig,
    RemainingQuota,
    RenderedContent,
)

__all__ = [
    "AdmissionDecision",
    "AuditRecord",
    "DeliveryStatus",
    "DispatchResult",
    "EmailStats",
    "NotificationRequest",
    "RateWindowConfig",
    "RemainingQuota",
    "RenderedContent",
]
