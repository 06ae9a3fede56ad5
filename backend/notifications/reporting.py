"""
Helpers for presenting audit records and quota state to users.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional

from models.notification import (
    AuditRecord,
    DeliveryStatus,
    RateWindowConfig,
    RemainingQuota,
)
from shared.utils import ensure_utc


def format_email_log(record: AuditRecord) -> str:
    """One-line summary, e.g. '✓ 2026-10-19 09:30 UTC - Subject → to@example.com'."""
    status = "✓" if record.outcome == DeliveryStatus.SENT else "✗"
    when = ensure_utc(record.timestamp).strftime("%Y-%m-%d %H:%M UTC")
    line = f"{status} {when} - {record.subject} → {record.recipient_address}"
    if record.failure_reason:
        line += f" ({record.failure_reason})"
    return line


def group_logs_by_status(
    records: Iterable[AuditRecord],
) -> Dict[DeliveryStatus, List[AuditRecord]]:
    grouped: Dict[DeliveryStatus, List[AuditRecord]] = {
        DeliveryStatus.SENT: [],
        DeliveryStatus.FAILED: [],
    }
    for record in records:
        grouped[record.outcome].append(record)
    return grouped


def filter_logs_by_date_range(
    records: Iterable[AuditRecord], start: datetime, end: datetime
) -> List[AuditRecord]:
    """Records with start <= timestamp <= end."""
    start, end = ensure_utc(start), ensure_utc(end)
    return [r for r in records if start <= ensure_utc(r.timestamp) <= end]


def calculate_success_rate(records: Iterable[AuditRecord]) -> float:
    """Percentage of records that were sent; 0.0 for no records."""
    records = list(records)
    if not records:
        return 0.0
    sent = sum(1 for r in records if r.outcome == DeliveryStatus.SENT)
    return sent / len(records) * 100


def calculate_remaining(
    sent_this_hour: int, sent_today: int, limits: RateWindowConfig
) -> RemainingQuota:
    """Remaining quota from already-known counts."""
    remaining_hour = limits.max_per_hour - sent_this_hour
    remaining_day = limits.max_per_day - sent_today
    return RemainingQuota(
        remaining_this_hour=max(0, remaining_hour),
        remaining_today=max(0, remaining_day),
        can_send=remaining_hour > 0 and remaining_day > 0,
    )


def get_rate_limit_message(quota: RemainingQuota) -> Optional[str]:
    """User-facing hint when a window is exhausted, else None."""
    if quota.remaining_this_hour == 0:
        return "Hourly email limit reached. Please try again later."
    if quota.remaining_today == 0:
        return "Daily email limit reached. Please try again tomorrow."
    return None
