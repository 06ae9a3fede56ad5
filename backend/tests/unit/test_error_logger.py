"""
Unit tests for notifications/error_logger.py
"""

import os
import tempfile
import unittest
from unittest.mock import patch

from notifications.error_logger import log_notification_error


class TestLogNotificationError(unittest.TestCase):
    """Tests for log_notification_error()."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)

    def test_writes_report(self):
        path = log_notification_error(
            error_type="audit_write",
            error_message="permission denied",
            context={"identity_id": "user-1", "record_id": "rec-1"},
            log_dir=self.tmpdir.name,
        )

        self.assertTrue(os.path.exists(path))
        with open(path, encoding="utf-8") as f:
            content = f.read()
        self.assertIn("Error Type: audit_write", content)
        self.assertIn("Error Message: permission denied", content)
        self.assertIn("identity_id: user-1", content)
        self.assertIn("record_id: rec-1", content)

    def test_uses_env_log_dir(self):
        target = os.path.join(self.tmpdir.name, "reports")
        with patch.dict(os.environ, {"NOTIFICATION_LOG_DIR": target}):
            path = log_notification_error("admission", "timeout")

        self.assertEqual(os.path.dirname(path), target)

    def test_reports_in_same_second_do_not_collide(self):
        first = log_notification_error("delivery", "a", log_dir=self.tmpdir.name)
        second = log_notification_error("delivery", "b", log_dir=self.tmpdir.name)

        self.assertNotEqual(first, second)
        self.assertEqual(len(os.listdir(self.tmpdir.name)), 2)


if __name__ == "__main__":
    unittest.main()
