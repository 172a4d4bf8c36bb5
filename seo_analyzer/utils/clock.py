from datetime import datetime, timezone


def now_iso() -> str:
    """UTC timestamp with millisecond precision, e.g. 2024-06-01T12:00:00.123Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
