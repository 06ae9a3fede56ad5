"""
Integration tests for the full dispatch flow.

Wires the client through notifications.bootstrap with real settings, the
Resend sender (HTTP mocked), the rate limiter and an audit store.
"""

import unittest
from datetime import timedelta
from unittest.mock import Mock, patch

from config.settings import NotificationSettings
from models.notification import DeliveryStatus, RateWindowConfig
from notifications.audit_log import InMemoryAuditLogStore
from notifications.bootstrap import create_client, create_dispatcher, create_read_client
from notifications.errors import ConfigurationError, DeliveryError, RejectedError
from notifications.reporting import calculate_success_rate, group_logs_by_status
from tests.fixtures.audit_factory import IDENTITY, NOW
from tests.fixtures.mock_helpers import create_mock_requests_response, create_mock_supabase

SETTINGS = NotificationSettings(
    resend_api_key="re_test_key",
    rate_limits=RateWindowConfig(max_per_hour=3, max_per_day=5),
)


class TestDispatchFlow(unittest.TestCase):
    """Client -> dispatcher -> limiter/store/sender, end to end."""

    def setUp(self):
        self.session = Mock()
        self.session.post.return_value = create_mock_requests_response(
            200, {"id": "email_abc"}
        )
        patcher = patch(
            "notifications.email_sender.requests.Session", return_value=self.session
        )
        patcher.start()
        self.addCleanup(patcher.stop)

        self.store = InMemoryAuditLogStore()
        self.client = create_client(IDENTITY, settings=SETTINGS, store=self.store)
        self.client.dispatcher.clock = lambda: NOW

    def test_welcome_email_delivered(self):
        result = self.client.send_welcome(
            "alice@example.com", user_name="Alice", login_url="https://x/login"
        )

        self.assertEqual(result.message_id, "email_abc")
        payload = self.session.post.call_args.kwargs["json"]
        self.assertEqual(payload["to"], "alice@example.com")
        self.assertEqual(payload["subject"], "Welcome to Tidy Prioritize!")
        self.assertIn("Hi Alice,", payload["text"])

        logs = self.client.get_logs()
        self.assertEqual(len(logs), 1)
        self.assertEqual(logs[0].template_id, "welcome")
        self.assertEqual(logs[0].outcome, DeliveryStatus.SENT)

    def test_quota_consumed_then_rejected(self):
        for i in range(3):
            self.client.dispatcher.clock = lambda i=i: NOW + timedelta(minutes=i)
            self.client.send_task_reminder("a@example.com", f"Task {i}")

        self.client.dispatcher.clock = lambda: NOW + timedelta(minutes=5)
        with self.assertRaises(RejectedError) as ctx:
            self.client.send_task_reminder("a@example.com", "One too many")

        self.assertEqual(ctx.exception.window, "hourly")
        self.assertEqual(self.session.post.call_count, 3)

        quota = self.client.remaining_quota(now=NOW + timedelta(minutes=5))
        self.assertFalse(quota.can_send)

        grouped = group_logs_by_status(self.client.get_logs())
        self.assertEqual(len(grouped[DeliveryStatus.SENT]), 3)
        self.assertEqual(len(grouped[DeliveryStatus.FAILED]), 1)
        self.assertEqual(calculate_success_rate(self.client.get_logs()), 75.0)

    def test_daily_limit_after_hour_passes(self):
        for i in range(5):
            self.client.dispatcher.clock = lambda i=i: NOW + timedelta(hours=2 * i)
            self.client.send_task_completed("a@example.com", f"Task {i}", "Bob")

        self.client.dispatcher.clock = lambda: NOW + timedelta(hours=10, minutes=30)
        with self.assertRaises(RejectedError) as ctx:
            self.client.send_task_completed("a@example.com", "Late", "Bob")

        self.assertEqual(ctx.exception.window, "daily")

    def test_provider_failure_recorded(self):
        self.session.post.return_value = create_mock_requests_response(
            500, text="upstream unavailable"
        )

        with self.assertRaises(DeliveryError) as ctx:
            self.client.send_password_reset("a@example.com", reset_url="https://x/r")

        self.assertIn("500 - upstream unavailable", str(ctx.exception))
        logs = self.client.get_logs()
        self.assertEqual(logs[0].outcome, DeliveryStatus.FAILED)
        self.assertEqual(
            logs[0].failure_reason, "Email service error: 500 - upstream unavailable"
        )


class TestBootstrap(unittest.TestCase):
    """Wiring from settings."""

    def test_missing_api_key_is_fatal(self):
        with self.assertRaises(ConfigurationError):
            create_dispatcher(
                NotificationSettings(resend_api_key=None), store=InMemoryAuditLogStore()
            )

    def test_supabase_store_by_default(self):
        supabase = create_mock_supabase(count=0)
        with patch(
            "notifications.bootstrap.get_supabase_client", return_value=supabase
        ) as mock_get:
            dispatcher = create_dispatcher(SETTINGS, access_token="jwt-token")

        mock_get.assert_called_once_with("jwt-token")
        self.assertIs(dispatcher.store.supabase, supabase)
        self.assertIs(dispatcher.rate_limiter.store, dispatcher.store)
        self.assertEqual(dispatcher.rate_limiter.config.max_per_hour, 3)
        self.assertEqual(dispatcher.sender.timeout, 10.0)

    def test_read_client_needs_no_api_key(self):
        store = InMemoryAuditLogStore()
        client = create_read_client(
            IDENTITY, NotificationSettings(resend_api_key=None), store=store
        )

        self.assertIsNone(client.dispatcher.sender)
        self.assertIs(client.dispatcher.store, store)
        self.assertEqual(client.get_logs(), [])
        self.assertTrue(client.remaining_quota(now=NOW).can_send)


if __name__ == "__main__":
    unittest.main()
