"""
Temporary storage for BOM upload sessions.
Holds parsed rows in memory between upload, review and commit, with TTL expiration.
Single-server, single active user per session.
"""
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from models.bom import BOMSession, BOMSource, ParsedRow

_sessions: dict[str, tuple[datetime, BOMSession]] = {}
DEFAULT_TTL_MINUTES = 30


def create_session(
    filename: str,
    source: BOMSource,
    rows: list[ParsedRow],
    ttl_minutes: int = DEFAULT_TTL_MINUTES
) -> BOMSession:
    """Store a new session and return it."""
    now = datetime.now(timezone.utc)
    session = BOMSession(
        id=str(uuid.uuid4()),
        filename=filename,
        source=source,
        rows=rows,
        created_at=now,
    )
    _sessions[session.id] = (now + timedelta(minutes=ttl_minutes), session)
    _cleanup_expired()
    return session


def retrieve_session(session_id: str) -> Optional[BOMSession]:
    """Session by id. Returns None if expired/not found."""
    entry = _sessions.get(session_id)
    if entry is None:
        return None
    expires_at, session = entry
    if datetime.now(timezone.utc) > expires_at:
        del _sessions[session_id]
        return None
    return session


def delete_session(session_id: str) -> None:
    """Remove session after commit or discard."""
    _sessions.pop(session_id, None)


def clear_sessions() -> None:
    """Drop every session."""
    _sessions.clear()


def _cleanup_expired() -> None:
    """Remove all expired entries."""
    now = datetime.now(timezone.utc)
    expired = [k for k, (exp, _) in _sessions.items() if now > exp]
    for k in expired:
        del _sessions[k]
