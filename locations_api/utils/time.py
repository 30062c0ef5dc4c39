from datetime import datetime, timezone

def to_iso(value) -> str | None:
    """Render a stored timestamp (datetime or already-serialized string) as ISO-8601."""
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat().replace("+00:00", "Z")
    return str(value)
