from datetime import timezone
from email.utils import format_datetime

from dateutil.parser import ParserError, parse
from flask import abort, request


def normalize_ts(ts):
    """
    Ensure datetime is timezone-aware.
    Defaults to UTC if naive (SQLite drops the offset).
    """
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def last_modified(entity) -> str:
    """HTTP-date of the last content change, for the ``Last-Modified`` header."""
    return format_datetime(normalize_ts(entity.updated_at).astimezone(timezone.utc), usegmt=True)


def enforce_optimistic_lock(entity):
    """
    Reject a write when the entity changed after the client's copy.

    Clients echo ``Last-Modified`` back as ``If-Unmodified-Since``; no
    header means no lock. Counter increments never move ``updated_at``,
    so traffic on a portal does not invalidate a branding edit.
    """
    client_ts = request.headers.get("If-Unmodified-Since")
    if not client_ts:
        return

    try:
        client_ts = normalize_ts(parse(client_ts))
    except (ParserError, OverflowError):
        abort(400, description="Invalid If-Unmodified-Since header")

    # HTTP dates have second precision
    server_ts = normalize_ts(entity.updated_at).replace(microsecond=0)

    if server_ts > client_ts:
        abort(409, description="Branding was modified by someone else; reload and retry.")
