"""Unit tests for Pydantic models."""

import unittest
from datetime import datetime, timezone

from pydantic import ValidationError

from models import (
    AdmissionDecision,
    AuditRecord,
    DeliveryStatus,
    DispatchResult,
    EmailStats,
    NotificationRequest,
    RemainingQuota,
    RenderedContent,
)


class TestNotificationRequest(unittest.TestCase):
    """Tests for NotificationRequest."""

    def test_wire_names(self):
        """Short wire names populate the fields."""
        request = NotificationRequest.model_validate(
            {
                "to": "alice@example.com",
                "subject": "Hi",
                "template": "welcome",
                "data": {"userName": "Alice"},
            }
        )

        self.assertEqual(request.recipient_address, "alice@example.com")
        self.assertEqual(request.template_id, "welcome")
        self.assertEqual(request.template_data, {"userName": "Alice"})
        self.assertIsNone(request.raw_html)

    def test_field_names(self):
        request = NotificationRequest(
            recipient_address="alice@example.com", subject="Hi", raw_text="Body"
        )

        self.assertEqual(request.raw_text, "Body")
        self.assertEqual(request.template_data, {})

    def test_null_data_is_empty(self):
        request = NotificationRequest.model_validate(
            {"to": "a@example.com", "subject": "Hi", "template": "welcome", "data": None}
        )

        self.assertEqual(request.template_data, {})

    def test_strips_whitespace(self):
        request = NotificationRequest(recipient_address="  a@example.com ", subject=" Hi ")

        self.assertEqual(request.recipient_address, "a@example.com")
        self.assertEqual(request.subject, "Hi")

    def test_rejects_bad_address(self):
        for address in ["", "alice", "alice@", "@example.com", "a b@example.com", "a@b"]:
            with self.subTest(address=address):
                with self.assertRaises(ValidationError):
                    NotificationRequest(recipient_address=address, subject="Hi")

    def test_rejects_empty_subject(self):
        with self.assertRaises(ValidationError):
            NotificationRequest(recipient_address="a@example.com", subject="   ")

    def test_missing_subject(self):
        with self.assertRaises(ValidationError):
            NotificationRequest.model_validate({"to": "a@example.com"})


class TestRenderedContent(unittest.TestCase):
    """Tests for RenderedContent."""

    def test_is_empty(self):
        self.assertTrue(RenderedContent().is_empty)
        self.assertTrue(RenderedContent(html="  ", text="\n").is_empty)
        self.assertFalse(RenderedContent(text="x").is_empty)

    def test_frozen(self):
        content = RenderedContent(html="<p>x</p>", text="x")

        with self.assertRaises(ValidationError):
            content.html = "changed"


class TestAuditRecord(unittest.TestCase):
    """Tests for AuditRecord."""

    def _record(self, **overrides):
        fields = {
            "id": "rec-1",
            "identity_id": "user-1",
            "recipient_address": "a@example.com",
            "subject": "Hi",
            "outcome": "sent",
            "timestamp": datetime(2026, 10, 19, tzinfo=timezone.utc),
        }
        fields.update(overrides)
        return AuditRecord(**fields)

    def test_outcome_parsed_from_string(self):
        self.assertEqual(self._record().outcome, DeliveryStatus.SENT)

    def test_invalid_outcome(self):
        with self.assertRaises(ValidationError):
            self._record(outcome="pending")

    def test_immutable(self):
        record = self._record()

        with self.assertRaises(ValidationError):
            record.failure_reason = "changed"


class TestResultModels(unittest.TestCase):
    """Tests for the small result models."""

    def test_admission_decision(self):
        decision = AdmissionDecision(allowed=False, reason="x", window="daily")

        self.assertEqual(decision.window, "daily")
        with self.assertRaises(ValidationError):
            AdmissionDecision(allowed=False, window="weekly")

    def test_dispatch_result(self):
        result = DispatchResult(
            record_id="rec-1",
            recipient_address="a@example.com",
            sent_at=datetime(2026, 10, 19, tzinfo=timezone.utc),
        )

        self.assertIsNone(result.message_id)

    def test_stats_defaults(self):
        self.assertEqual(EmailStats().total_sent, 0)

    def test_quota_non_negative(self):
        with self.assertRaises(ValidationError):
            RemainingQuota(remaining_this_hour=-1, remaining_today=0, can_send=False)


if __name__ == "__main__":
    unittest.main()
