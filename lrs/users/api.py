"""User lookup and creation."""

import logging
import uuid

from sqlalchemy.exc import SQLAlchemyError

from lrs.db.engine import Database
from lrs.errors import UserLookupError, UserNotFoundError
from lrs.users.models import User

logger = logging.getLogger(__name__)


async def get_user(db: Database, user_id: str) -> User:
    """Get a user by id.

    Args:
        db: Database handle
        user_id: User id as carried in the scoped cookie

    Returns:
        The user

    Raises:
        UserNotFoundError: If the id is malformed or unknown
        UserLookupError: If the database query fails
    """
    try:
        uid = uuid.UUID(str(user_id))
    except ValueError as e:
        raise UserNotFoundError(f"Invalid user id: {user_id}") from e

    try:
        async with db.session() as session:
            user = await session.get(User, uid)
    except SQLAlchemyError as e:
        logger.error("Failed to retrieve user", exc_info=e, extra={"structured": {"user_id": user_id}})
        raise UserLookupError("Failed to retrieve user") from e

    if user is None:
        raise UserNotFoundError(f"Could not find user {user_id}")

    return user


async def create_user(
    db: Database,
    tenant_domain: str,
    external_id: str,
    *,
    name: str | None = None,
    email: str | None = None,
) -> User:
    """Create a user for a tenant."""
    user = User(tenant_domain=tenant_domain, external_id=external_id, name=name, email=email)
    async with db.session() as session:
        session.add(user)
        await session.commit()
        await session.refresh(user)
    return user


class DatabaseUserResolver:
    """User resolver backed by the users table."""

    def __init__(self, db: Database) -> None:
        self._db = db

    async def __call__(self, user_id: str) -> User:
        return await get_user(self._db, user_id)
