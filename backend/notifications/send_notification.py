"""
CLI script for sending a notification email and inspecting the audit log.

Usage:
    # Send a welcome email on behalf of a user
    uv run python -m notifications.send_notification --identity USER_ID \
        --to alice@example.com --subject "Welcome!" --template welcome \
        --data userName=Alice --data loginUrl=https://example.com/login

    # Preview the rendered email without sending or logging
    uv run python -m notifications.send_notification --identity USER_ID \
        --to alice@example.com --subject "Reminder" --template task-reminder \
        --data taskName="File taxes" --dry-run

    # Show recent sends and quota
    uv run python -m notifications.send_notification --identity USER_ID --logs --limit 20
    uv run python -m notifications.send_notification --identity USER_ID --stats
"""

import argparse
from typing import Any

from models.types import IdentityID
from notifications.audit_log import InMemoryAuditLogStore
from notifications.bootstrap import create_client, create_read_client
from notifications.dispatcher import NotificationDispatcher
from notifications.errors import (
    ConfigurationError,
    DeliveryError,
    RejectedError,
    ValidationError,
)
from notifications.rate_limiter import RateLimiter
from notifications.reporting import format_email_log, get_rate_limit_message
from shared.utils import print_summary


def parse_data_pairs(pairs: list[str] | None) -> dict[str, Any]:
    """Turn ['key=value', ...] into a template data dictionary."""
    data: dict[str, Any] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise argparse.ArgumentTypeError(f"Expected key=value, got {pair!r}")
        data[key.strip()] = value
    return data


def _build_payload(args: argparse.Namespace) -> dict[str, Any]:
    payload: dict[str, Any] = {"to": args.to, "subject": args.subject}
    if args.template:
        payload["template"] = args.template
        payload["data"] = parse_data_pairs(args.data)
    if args.html:
        payload["html"] = args.html
    if args.text:
        payload["text"] = args.text
    return payload


def preview_notification(args: argparse.Namespace) -> int:
    """Render the request and print it; nothing is sent or logged."""
    store = InMemoryAuditLogStore()
    dispatcher = NotificationDispatcher(store, RateLimiter(store), sender=None)
    try:
        content = dispatcher.preview(_build_payload(args))
    except ValidationError as e:
        print(f"✗ Invalid request: {e.message}")
        return 1

    print(f"[DRY RUN] Would send '{args.subject}' to {args.to}")
    print("-" * 60)
    print(content.text)
    return 0


def send_notification(args: argparse.Namespace) -> int:
    """Dispatch one notification and report the outcome."""
    client = create_client(IdentityID(args.identity))
    try:
        result = client.dispatcher.dispatch(client.identity_id, _build_payload(args))
    except ValidationError as e:
        print(f"✗ Invalid request: {e.message}")
        return 1
    except RejectedError as e:
        print(f"✗ Rejected: {e.reason}")
        return 2
    except DeliveryError as e:
        print(f"✗ Delivery failed ({e.step}): {e.message}")
        return 3

    print(f"✓ Sent to {result.recipient_address} (message id: {result.message_id})")
    return 0


def show_logs(args: argparse.Namespace) -> int:
    client = create_read_client(IdentityID(args.identity))
    records = client.get_logs(limit=args.limit)
    if not records:
        print("No email logs found.")
        return 0
    for record in records:
        print(format_email_log(record))
    return 0


def show_stats(args: argparse.Namespace) -> int:
    client = create_read_client(IdentityID(args.identity))
    stats = client.get_stats()
    quota = client.remaining_quota()
    print_summary(
        f"Email Stats for {args.identity}",
        {
            "Sent today": stats.sent_today,
            "Sent this hour": stats.sent_this_hour,
            "Failed today": stats.failed_today,
            "Total sent": stats.total_sent,
            "Remaining this hour": quota.remaining_this_hour,
            "Remaining today": quota.remaining_today,
        },
    )
    message = get_rate_limit_message(quota)
    if message:
        print(f"⚠️  {message}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Send notification emails and inspect the email log"
    )

    parser.add_argument("--identity", required=True, help="User ID to send as")
    parser.add_argument("--to", help="Recipient email address")
    parser.add_argument("--subject", help="Email subject line")
    parser.add_argument("--template", help="Registered template ID (e.g. welcome)")
    parser.add_argument(
        "--data",
        action="append",
        metavar="KEY=VALUE",
        help="Template data field (repeatable)",
    )
    parser.add_argument("--html", help="Raw HTML body (when not using a template)")
    parser.add_argument("--text", help="Raw text body (when not using a template)")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Dry run mode (render only, don't send or log)",
    )
    parser.add_argument("--logs", action="store_true", help="List recent email logs")
    parser.add_argument(
        "--limit", type=int, default=50, help="Number of logs to show (default: 50)"
    )
    parser.add_argument(
        "--stats", action="store_true", help="Show send counts and remaining quota"
    )

    args = parser.parse_args(argv)

    try:
        if args.logs:
            return show_logs(args)
        if args.stats:
            return show_stats(args)

        if not args.to or not args.subject:
            parser.error("--to and --subject are required to send")

        try:
            if args.dry_run:
                return preview_notification(args)
            return send_notification(args)
        except argparse.ArgumentTypeError as e:
            parser.error(str(e))
    except ConfigurationError as e:
        print(f"✗ Configuration error: {e.message}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
