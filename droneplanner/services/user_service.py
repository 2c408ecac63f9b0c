#!/usr/bin/env python3
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from droneplanner.core import timeutils
from droneplanner.core.errors import ConflictError
from droneplanner.core.security import hash_password, verify_password
from droneplanner.db.models.user import User


logger = logging.getLogger(__name__)


async def find_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def create_user(db: AsyncSession, email: str, password: str) -> User:
    if await find_user_by_email(db, email) is not None:
        raise ConflictError("User already exists")

    user = User(email=email, password_hash=hash_password(password), created_at=timeutils.utcnow())
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race against a concurrent signup with the same email
        await db.rollback()
        raise ConflictError("User already exists")
    await db.refresh(user)

    logger.info("Registered user %s", user.id.hex)
    return user


async def authenticate(db: AsyncSession, email: str, password: str) -> User | None:
    user = await find_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        return None
    return user
