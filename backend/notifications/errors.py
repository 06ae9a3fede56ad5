"""
Error taxonomy for the notification dispatch system.

Callers of the dispatcher only ever see ValidationError (including
UnknownTemplate), RejectedError and DeliveryError. AuditWriteError is
reported operationally and never propagated.
"""

from models.notification import RateWindow


class NotificationError(Exception):
    """Base class for notification dispatch errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(NotificationError):
    """Request is malformed or incomplete. Never written to the audit log."""


class UnknownTemplate(ValidationError):
    """Template identifier is not in the registry."""

    def __init__(self, template_id: str):
        super().__init__(f"Template '{template_id}' not found")
        self.template_id = template_id


class RejectedError(NotificationError):
    """Identity exceeded its hourly or daily send quota."""

    def __init__(self, reason: str, window: RateWindow | None = None):
        super().__init__(reason)
        self.reason = reason
        self.window = window


class DeliveryError(NotificationError):
    """Email could not be delivered, or a step needed to deliver it failed."""

    def __init__(self, message: str, step: str = "delivery"):
        super().__init__(message)
        self.step = step


class AuditWriteError(NotificationError):
    """Audit record could not be persisted."""


class ConfigurationError(NotificationError):
    """Required configuration is missing or malformed."""
