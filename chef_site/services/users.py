"""
Admin account management.
"""
from typing import List, Optional
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from chef_site.database import Database
from chef_site.errors import Conflict, NotFound
from chef_site.models import User
from chef_site.schemas import UserCreate, UserUpdate
from chef_site.utils.auth import hash_password

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    def __init__(self, database: Database):
        self.database = database

    async def list(self) -> List[User]:
        async with self.database.session() as session:
            result = await session.execute(select(User).order_by(User.created_at.desc()))
            return list(result.scalars())

    async def get(self, user_id: str) -> User:
        async with self.database.session() as session:
            user = await session.get(User, user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    async def get_by_email(self, email: str) -> Optional[User]:
        async with self.database.session() as session:
            result = await session.execute(select(User).where(User.email == normalize_email(email)))
            return result.scalar_one_or_none()

    async def create(self, payload: UserCreate) -> User:
        """
        Create an account with a bcrypt-hashed password.

        Raises:
            Conflict: The email is already registered
        """
        email = normalize_email(payload.email)
        try:
            async with self.database.session() as session:
                user = User(
                    first_name=payload.first_name,
                    last_name=payload.last_name,
                    email=email,
                    password_hash=hash_password(payload.password),
                    role=payload.role,
                )
                session.add(user)
                await session.flush()
                await session.refresh(user)
        except IntegrityError as e:
            raise Conflict("A user with this email already exists") from e

        logger.info(f"Created user {user.id} ({email}, role={user.role})")
        return user

    async def update(self, user_id: str, payload: UserUpdate) -> User:
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        password = changes.pop("password", None)
        if "email" in changes:
            changes["email"] = normalize_email(changes["email"])

        try:
            async with self.database.session() as session:
                user = await session.get(User, user_id)
                if user is None:
                    raise NotFound("User not found")
                for field, value in changes.items():
                    setattr(user, field, value)
                if password:
                    user.password_hash = hash_password(password)
                await session.flush()
                await session.refresh(user)
        except IntegrityError as e:
            raise Conflict("A user with this email already exists") from e

        logger.info(f"Updated user {user_id}: {sorted(changes)}{' + password' if password else ''}")
        return user

    async def delete(self, user_id: str, acting_user_id: str) -> None:
        """
        Raises:
            NotFound: Unknown user id
            Conflict: Attempt to delete the signed-in account
        """
        if user_id == acting_user_id:
            raise Conflict("You cannot delete your own account")

        async with self.database.session() as session:
            user = await session.get(User, user_id)
            if user is None:
                raise NotFound("User not found")
            await session.delete(user)
        logger.info(f"Deleted user {user_id}")
