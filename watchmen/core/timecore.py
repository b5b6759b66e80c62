from datetime import datetime, timezone


def now_utc():
    return datetime.now(timezone.utc)


def to_iso(ts):
    return ts.astimezone(timezone.utc).isoformat()


def from_iso(value):
    # accept the "Z" suffix written by older snapshot files
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    ts = datetime.fromisoformat(value)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts
