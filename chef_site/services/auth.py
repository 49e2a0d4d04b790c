"""
Login, logout and current-user resolution for the admin dashboard.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
import logging

from sqlalchemy import select

from chef_site.database import Database
from chef_site.errors import Unauthenticated
from chef_site.models import User
from chef_site.schemas import SessionUser
from chef_site.services.users import normalize_email
from chef_site.utils.auth import burn_password_check, verify_password
from chef_site.utils.sessions import SessionStore

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


def session_user(user: User) -> SessionUser:
    return SessionUser(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        role=user.role,
    )


class AuthService:
    """
    Session lifecycle: anonymous -> authenticated on login, back to anonymous
    on logout or when the stored session expires.
    """

    def __init__(self, database: Database, sessions: SessionStore, max_age: timedelta):
        self.database = database
        self.sessions = sessions
        self.max_age = max_age

    async def login(self, email: str, password: str) -> Tuple[str, SessionUser]:
        """
        Verify credentials and open a session.

        Args:
            email: Account email (case-insensitive)
            password: Plain text password

        Returns:
            tuple: (session id, session user)

        Raises:
            Unauthenticated: Unknown/inactive email or wrong password; both
                cases produce the same error
        """
        async with self.database.session() as session:
            result = await session.execute(
                select(User).where(User.email == normalize_email(email), User.is_active.is_(True))
            )
            user = result.scalar_one_or_none()

            if user is None:
                # Same bcrypt cost as a real comparison
                burn_password_check(password)
                logger.warning("Failed login attempt for unknown or inactive account")
                raise Unauthenticated(INVALID_CREDENTIALS)

            if not verify_password(password, user.password_hash):
                logger.warning(f"Failed login attempt for user {user.id}")
                raise Unauthenticated(INVALID_CREDENTIALS)

            user.last_login = datetime.now(timezone.utc)
            identity = session_user(user)

        await self.sessions.prune_expired()
        sid = await self.sessions.create({"user": identity.model_dump()}, self.max_age)
        logger.info(f"User {identity.id} logged in")
        return sid, identity

    async def logout(self, sid: Optional[str]) -> None:
        if sid:
            await self.sessions.destroy(sid)

    async def current_user(self, sid: Optional[str]) -> SessionUser:
        """
        Resolve the user behind a session id.

        The account is re-read so that deleted or deactivated users lose
        access immediately.

        Raises:
            Unauthenticated: No session, expired session, or the account is gone/inactive
        """
        if not sid:
            raise Unauthenticated()
        payload = await self.sessions.get(sid)
        if not payload or "user" not in payload:
            raise Unauthenticated()

        async with self.database.session() as session:
            user = await session.get(User, payload["user"].get("id"))
        if user is None or not user.is_active:
            await self.sessions.destroy(sid)
            raise Unauthenticated()
        return session_user(user)
