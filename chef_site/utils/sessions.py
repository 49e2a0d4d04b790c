"""
Server-side login sessions.

Session records live in the `sessions` table keyed by an opaque id. The
browser only holds a signed token wrapping that id in an httpOnly cookie.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
import logging
import secrets

from jose import JWTError, jwt
from sqlalchemy import delete, select

from chef_site.database import Database
from chef_site.models import SessionRecord

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


def sign_session_id(sid: str, secret: str) -> str:
    """Wrap a session id in an HS256-signed token for the cookie value."""
    return jwt.encode({"sid": sid, "type": "session"}, secret, algorithm=ALGORITHM)


def unsign_session_id(token: str, secret: str) -> Optional[str]:
    """
    Recover the session id from a cookie value.

    Returns:
        The session id, or None if the token is malformed or its signature is invalid
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except JWTError:
        return None
    if payload.get("type") != "session":
        return None
    sid = payload.get("sid")
    return sid if isinstance(sid, str) else None


class SessionStore:
    """Sessions table access. Expired records are removed lazily and by sweep."""

    def __init__(self, database: Database):
        self.database = database

    async def create(self, payload: Dict[str, Any], max_age: timedelta) -> str:
        sid = secrets.token_urlsafe(32)
        async with self.database.session() as session:
            session.add(SessionRecord(
                sid=sid,
                sess=payload,
                expire=datetime.now(timezone.utc) + max_age,
            ))
        return sid

    async def get(self, sid: str) -> Optional[Dict[str, Any]]:
        """Return the session payload, or None if missing or expired."""
        now = datetime.now(timezone.utc)
        async with self.database.session() as session:
            record = await session.get(SessionRecord, sid)
            if record is None:
                return None
            if _as_utc(record.expire) <= now:
                await session.delete(record)
                logger.info("Expired session removed on access")
                return None
            return record.sess

    async def destroy(self, sid: str) -> None:
        async with self.database.session() as session:
            await session.execute(delete(SessionRecord).where(SessionRecord.sid == sid))

    async def prune_expired(self) -> int:
        """Delete every expired session. Returns the number removed."""
        now = datetime.now(timezone.utc)
        async with self.database.session() as session:
            result = await session.execute(
                select(SessionRecord.sid).where(SessionRecord.expire <= now)
            )
            expired = list(result.scalars())
            if expired:
                await session.execute(delete(SessionRecord).where(SessionRecord.sid.in_(expired)))
        if expired:
            logger.info(f"Pruned {len(expired)} expired session(s)")
        return len(expired)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they were written as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
