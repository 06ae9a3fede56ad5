"""
Notification dispatch for Tidy Prioritize.

This module handles:
- Rendering task notification templates (HTML and plain text)
- Rate limiting sends per user from the email audit log
- Sending notification emails via Resend
- Recording every dispatch attempt in the email_logs table

Resend and Supabase wiring lives in notifications.bootstrap.
"""

from .errors import (
    DeliveryError,
    NotificationError,
    RejectedError,
    UnknownTemplate,
    ValidationError,
)
from .templates import TemplateId, render_template
from .dispatcher import NotificationDispatcher
from .client import NotificationClient

__all__ = [
    'DeliveryError',
    'NotificationClient',
    'NotificationDispatcher',
    'NotificationError',
    'RejectedError',
    'TemplateId',
    'UnknownTemplate',
    'ValidationError',
    'render_template',
]
