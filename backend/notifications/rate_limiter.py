"""
Sliding-window admission control for outbound email.

Quotas are recomputed from the audit log on every check; the limiter holds no
counters of its own. Windows are anchored on the caller-supplied instant and
include a record stamped exactly at the window start ([now - window, now]).
"""

from datetime import datetime, timedelta
from typing import Optional

from models.notification import (
    AdmissionDecision,
    DeliveryStatus,
    RateWindowConfig,
    RemainingQuota,
)
from models.types import IdentityID
from notifications.audit_log import AuditLogStore
from shared.utils import ensure_utc

HOUR = timedelta(hours=1)
DAY = timedelta(hours=24)


def hourly_limit_message(max_per_hour: int) -> str:
    return (
        f"Hourly rate limit exceeded. Maximum {max_per_hour} emails per hour. "
        "Please try again in under an hour."
    )


def daily_limit_message(max_per_day: int) -> str:
    return (
        f"Daily rate limit exceeded. Maximum {max_per_day} emails per day. "
        "Please try again tomorrow."
    )


class RateLimiter:
    """Checks an identity's recent send history against its quotas."""

    def __init__(self, store: AuditLogStore, config: Optional[RateWindowConfig] = None):
        self.store = store
        self.config = config or RateWindowConfig()

    @property
    def _counted_outcome(self) -> Optional[DeliveryStatus]:
        # None counts every attempt, including rejected and failed ones
        return None if self.config.count_failed_attempts else DeliveryStatus.SENT

    def count_in_window(
        self, identity_id: IdentityID, now: datetime, window: timedelta
    ) -> int:
        """Attempts by identity_id that count toward quota within window of now."""
        since = ensure_utc(now) - window
        return self.store.count_since(identity_id, since, self._counted_outcome)

    def check_admission(self, identity_id: IdentityID, now: datetime) -> AdmissionDecision:
        """
        Decide whether identity_id may send another email at now.

        The hourly window is checked first; the daily count is only queried
        when the hourly check passes.
        """
        hourly_count = self.count_in_window(identity_id, now, HOUR)
        if hourly_count >= self.config.max_per_hour:
            return AdmissionDecision(
                allowed=False,
                reason=hourly_limit_message(self.config.max_per_hour),
                window="hourly",
            )

        daily_count = self.count_in_window(identity_id, now, DAY)
        if daily_count >= self.config.max_per_day:
            return AdmissionDecision(
                allowed=False,
                reason=daily_limit_message(self.config.max_per_day),
                window="daily",
            )

        return AdmissionDecision(allowed=True)

    def remaining_quota(self, identity_id: IdentityID, now: datetime) -> RemainingQuota:
        """Informational view of how many sends are left in each window."""
        hourly_count = self.count_in_window(identity_id, now, HOUR)
        daily_count = self.count_in_window(identity_id, now, DAY)
        remaining_hour = max(0, self.config.max_per_hour - hourly_count)
        remaining_day = max(0, self.config.max_per_day - daily_count)
        return RemainingQuota(
            remaining_this_hour=remaining_hour,
            remaining_today=remaining_day,
            can_send=remaining_hour > 0 and remaining_day > 0,
        )
