"""
User service: CRUD operations for the User aggregate.

Account management (registration, email confirmation, passwords) belongs
to the identity provider in front of this service; users here are the
profiles that posts and follow edges refer to.
"""
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession

from socialmedia.models import User
from socialmedia.schemas import UserCreate
from socialmedia.validators import is_valid_identifier


async def get_users(db: AsyncSession) -> list[User]:
    """Return all users, newest first."""
    q = select(User).order_by(User.created_at.desc())
    result = await db.execute(q)
    return list(result.scalars().all())


async def get_user(db: AsyncSession, user_id: str) -> User | None:
    """
    Return *user_id* with their posts loaded, or None when the user does
    not exist or the id is malformed.
    """
    if not is_valid_identifier(user_id):
        return None
    q = (
        select(User)
        .where(User.id == user_id)
        .options(selectinload(User.posts))
    )
    result = await db.execute(q)
    return result.unique().scalar_one_or_none()


async def create_user(db: AsyncSession, data: UserCreate) -> User:
    """
    Create a new user.  Username and email uniqueness is enforced by the
    database; the router translates the ``IntegrityError`` into a 409.
    """
    user = User(
        username=data.username,
        email=data.email,
        display_name=data.display_name,
        bio=data.bio,
    )
    db.add(user)
    await db.flush()
    return user
