"""
Error logging utility for notification dispatch.

Writes operational failures (audit log writes, admission queries) to
timestamped report files. These reports are for operators; nothing here
ever reaches the caller of a dispatch.
"""

import os
import uuid
from datetime import datetime
from typing import Any


def _log_dir() -> str:
    configured = os.getenv("NOTIFICATION_LOG_DIR")
    if configured:
        return configured
    return os.path.join(os.path.dirname(__file__), "logs")


def log_notification_error(
    error_type: str,
    error_message: str,
    context: dict[str, Any] | None = None,
    log_dir: str | None = None,
) -> str:
    """
    Log a notification error to a timestamped file.

    Args:
        error_type: Step that failed (e.g., 'audit_write', 'admission', 'delivery')
        error_message: The error message
        context: Optional dictionary with additional context (identity_id, record_id, etc.)
        log_dir: Directory for reports; defaults to NOTIFICATION_LOG_DIR or ./logs

    Returns:
        Path to the log file created
    """
    log_dir = log_dir or _log_dir()
    os.makedirs(log_dir, exist_ok=True)

    # Suffix keeps reports from concurrent failures in the same second apart
    now = datetime.now()
    timestamp = now.strftime("%Y%m%d_%H%M%S")
    filename = os.path.join(
        log_dir, f"notification_error_{timestamp}_{uuid.uuid4().hex[:8]}.txt"
    )

    with open(filename, "w", encoding="utf-8") as f:
        f.write(f"Notification Error Report - {now}\n")
        f.write("=" * 60 + "\n\n")
        f.write(f"Error Type: {error_type}\n")
        f.write(f"Error Message: {error_message}\n\n")

        if context:
            f.write("Context:\n")
            f.write("-" * 60 + "\n")
            for key, value in context.items():
                f.write(f"{key}: {value}\n")

    return filename
