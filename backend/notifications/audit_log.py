"""
Append-only audit log of email dispatch attempts.

Every attempt that reaches admission produces exactly one record. The rate
limiter derives quotas from this log, so count_since() must see every record
appended before it is called. Postgres gives read-after-write on a single
connection; behind an eventually consistent replica the quota becomes
best-effort.
"""

import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

from models.notification import AuditRecord, DeliveryStatus
from models.types import AuditRecordID, IdentityID
from notifications.errors import AuditWriteError
from shared.utils import ensure_utc, parse_timestamp

EMAIL_LOGS_TABLE = "email_logs"


class AuditLogStore(ABC):
    """Storage interface shared by the rate limiter and the dispatcher."""

    @abstractmethod
    def append(self, record: AuditRecord) -> None:
        """
        Persist a new record.

        Raises:
            AuditWriteError: If the write fails
        """

    @abstractmethod
    def count_since(
        self,
        identity_id: IdentityID,
        since: datetime,
        outcome: Optional[DeliveryStatus] = None,
    ) -> int:
        """Count records for identity_id with timestamp >= since."""

    @abstractmethod
    def count_all(
        self, identity_id: IdentityID, outcome: Optional[DeliveryStatus] = None
    ) -> int:
        """Count every record for identity_id."""

    @abstractmethod
    def list_recent(self, identity_id: IdentityID, limit: int = 50) -> List[AuditRecord]:
        """Return up to limit records for identity_id, newest first."""


class InMemoryAuditLogStore(AuditLogStore):
    """Thread-safe in-process store, used for local runs and tests."""

    def __init__(self, records: Optional[List[AuditRecord]] = None):
        self._lock = threading.Lock()
        self._records: List[AuditRecord] = list(records or [])

    def append(self, record: AuditRecord) -> None:
        with self._lock:
            self._records.append(record)

    def count_since(
        self,
        identity_id: IdentityID,
        since: datetime,
        outcome: Optional[DeliveryStatus] = None,
    ) -> int:
        since = ensure_utc(since)
        with self._lock:
            return sum(
                1
                for r in self._records
                if r.identity_id == identity_id
                and ensure_utc(r.timestamp) >= since
                and (outcome is None or r.outcome == outcome)
            )

    def count_all(
        self, identity_id: IdentityID, outcome: Optional[DeliveryStatus] = None
    ) -> int:
        with self._lock:
            return sum(
                1
                for r in self._records
                if r.identity_id == identity_id
                and (outcome is None or r.outcome == outcome)
            )

    def list_recent(self, identity_id: IdentityID, limit: int = 50) -> List[AuditRecord]:
        if limit <= 0:
            return []
        with self._lock:
            matching = [r for r in self._records if r.identity_id == identity_id]
        # Stable sort keeps append order for equal timestamps; reverse so the
        # most recently appended wins ties.
        matching.reverse()
        matching.sort(key=lambda r: ensure_utc(r.timestamp), reverse=True)
        return matching[:limit]

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


class SupabaseAuditLogStore(AuditLogStore):
    """Audit log backed by the Supabase email_logs table."""

    def __init__(self, supabase: Any, table: str = EMAIL_LOGS_TABLE):
        self.supabase = supabase
        self.table = table

    def append(self, record: AuditRecord) -> None:
        try:
            self.supabase.table(self.table).insert(
                _record_to_row(record), returning="minimal"
            ).execute()
        except Exception as e:
            raise AuditWriteError(
                f"Failed to write audit record {record.id}: {e}"
            ) from e

    def count_since(
        self,
        identity_id: IdentityID,
        since: datetime,
        outcome: Optional[DeliveryStatus] = None,
    ) -> int:
        query = (
            self.supabase.table(self.table)
            .select("id", count="exact")
            .eq("user_id", identity_id)
            .gte("created_at", ensure_utc(since).isoformat())
        )
        if outcome is not None:
            query = query.eq("status", outcome.value)
        response = query.limit(1).execute()
        return response.count or 0

    def count_all(
        self, identity_id: IdentityID, outcome: Optional[DeliveryStatus] = None
    ) -> int:
        query = (
            self.supabase.table(self.table)
            .select("id", count="exact")
            .eq("user_id", identity_id)
        )
        if outcome is not None:
            query = query.eq("status", outcome.value)
        response = query.limit(1).execute()
        return response.count or 0

    def list_recent(self, identity_id: IdentityID, limit: int = 50) -> List[AuditRecord]:
        if limit <= 0:
            return []
        response = (
            self.supabase.table(self.table)
            .select("*")
            .eq("user_id", identity_id)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_row_to_record(row) for row in response.data or []]


def _record_to_row(record: AuditRecord) -> Dict[str, Any]:
    return {
        "id": record.id,
        "user_id": record.identity_id,
        "recipient": record.recipient_address,
        "subject": record.subject,
        "template": record.template_id,
        "status": record.outcome.value,
        "error_message": record.failure_reason,
        "created_at": ensure_utc(record.timestamp).isoformat(),
    }


def _row_to_record(row: Dict[str, Any]) -> AuditRecord:
    return AuditRecord(
        id=AuditRecordID(str(row["id"])),
        identity_id=IdentityID(str(row["user_id"])),
        recipient_address=row["recipient"],
        subject=row["subject"],
        template_id=row.get("template"),
        outcome=DeliveryStatus(row["status"]),
        failure_reason=row.get("error_message"),
        timestamp=parse_timestamp(row["created_at"]),
    )
