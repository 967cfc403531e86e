"""
Follower service: directed "follows" edges between users.

The post feed only reads these edges; this module is where they are
created and removed.
"""
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from socialmedia.models import Follower, User
from socialmedia.result import INVALID_ID, ErrorType, Result
from socialmedia.validators import is_valid_identifier

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User not found."
NOT_FOLLOWING = "Not following this user."


async def _edge(db: AsyncSession, follower_id: str, followee_id: str) -> Follower | None:
    return await db.get(Follower, (follower_id, followee_id))


async def follow(db: AsyncSession, caller_id: str, followee_id: str) -> Result[Follower]:
    """Make *caller_id* follow *followee_id*.  Following twice is a no-op."""
    if not is_valid_identifier(followee_id) or followee_id == caller_id:
        return Result.failure(ErrorType.BAD_REQUEST, INVALID_ID)

    if await db.get(User, followee_id) is None:
        return Result.failure(ErrorType.NOT_FOUND, USER_NOT_FOUND)

    existing = await _edge(db, caller_id, followee_id)
    if existing is not None:
        return Result.success(existing)

    edge = Follower(follower_id=caller_id, followee_id=followee_id)
    db.add(edge)
    await db.flush()
    logger.info("User %s now follows %s", caller_id, followee_id)
    return Result.success(edge)


async def unfollow(db: AsyncSession, caller_id: str, followee_id: str) -> Result[bool]:
    if not is_valid_identifier(followee_id):
        return Result.failure(ErrorType.BAD_REQUEST, INVALID_ID)

    edge = await _edge(db, caller_id, followee_id)
    if edge is None:
        return Result.failure(ErrorType.NOT_FOUND, NOT_FOLLOWING)

    await db.delete(edge)
    await db.flush()
    logger.info("User %s unfollowed %s", caller_id, followee_id)
    return Result.success(True)


async def get_followers(db: AsyncSession, user_id: str) -> list[Follower]:
    """Edges pointing at *user_id*, newest first."""
    q = (
        select(Follower)
        .where(Follower.followee_id == user_id)
        .order_by(Follower.date_created.desc())
    )
    result = await db.execute(q)
    return list(result.scalars().all())


async def get_following(db: AsyncSession, user_id: str) -> list[Follower]:
    """Edges leaving *user_id*, newest first."""
    q = (
        select(Follower)
        .where(Follower.follower_id == user_id)
        .order_by(Follower.date_created.desc())
    )
    result = await db.execute(q)
    return list(result.scalars().all())


async def get_followee(db: AsyncSession, caller_id: str, user_id: str) -> Follower | None:
    """The edge "caller follows *user_id*", if any."""
    if not is_valid_identifier(user_id):
        return None
    return await _edge(db, caller_id, user_id)


async def get_follower(db: AsyncSession, caller_id: str, user_id: str) -> Follower | None:
    """The edge "*user_id* follows caller", if any."""
    if not is_valid_identifier(user_id):
        return None
    return await _edge(db, user_id, caller_id)
