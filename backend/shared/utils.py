from datetime import datetime, timezone
from dateutil import parser as date_parser


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(value: str | datetime) -> datetime:
    """Parse a database timestamp (ISO 8601 or Postgres text form) into UTC."""
    if isinstance(value, datetime):
        return ensure_utc(value)
    try:
        return ensure_utc(date_parser.isoparse(value))
    except ValueError:
        return ensure_utc(date_parser.parse(value))


def print_summary(title: str, rows: dict[str, object]) -> None:
    """Print a boxed key/value summary."""
    print(f"\n{'=' * 60}")
    print(title)
    print(f"{'=' * 60}")
    width = max((len(key) for key in rows), default=0) + 1
    for key, value in rows.items():
        print(f"{(key + ':').ljust(width)} {value}")
    print(f"{'=' * 60}\n")
