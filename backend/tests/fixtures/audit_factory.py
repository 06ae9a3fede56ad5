"""Factory functions for creating test audit records and requests."""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from models.notification import AuditRecord, DeliveryStatus

NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)
IDENTITY = "user-123"


def create_test_record(
    identity_id: str = IDENTITY,
    timestamp: Optional[datetime] = None,
    outcome: DeliveryStatus = DeliveryStatus.SENT,
    **overrides,
) -> AuditRecord:
    """Factory for creating an audit record."""
    fields: Dict[str, Any] = {
        "id": str(uuid.uuid4()),
        "identity_id": identity_id,
        "recipient_address": "recipient@example.com",
        "subject": "Test Subject",
        "template_id": None,
        "outcome": outcome,
        "failure_reason": None if outcome == DeliveryStatus.SENT else "Test failure",
        "timestamp": timestamp or NOW,
    }
    fields.update(overrides)
    return AuditRecord(**fields)


def create_records_ago(
    count: int,
    ago: timedelta,
    identity_id: str = IDENTITY,
    outcome: DeliveryStatus = DeliveryStatus.SENT,
    now: datetime = NOW,
) -> List[AuditRecord]:
    """Create count records stamped at now - ago."""
    return [
        create_test_record(identity_id=identity_id, timestamp=now - ago, outcome=outcome)
        for _ in range(count)
    ]


def create_test_row(**overrides) -> Dict[str, Any]:
    """Factory for an email_logs row as returned by Supabase."""
    row = {
        "id": str(uuid.uuid4()),
        "user_id": IDENTITY,
        "recipient": "recipient@example.com",
        "subject": "Test Subject",
        "template": "welcome",
        "status": "sent",
        "error_message": None,
        "created_at": "2026-10-19T12:00:00+00:00",
    }
    row.update(overrides)
    return row


def create_test_request(**overrides) -> Dict[str, Any]:
    """Factory for an inbound notification request payload."""
    request: Dict[str, Any] = {
        "to": "alice@example.com",
        "subject": "Welcome to Tidy Prioritize!",
        "template": "welcome",
        "data": {"userName": "Alice", "loginUrl": "https://x/login"},
    }
    request.update(overrides)
    return request
