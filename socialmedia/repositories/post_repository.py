"""
Post repository: the only code that issues SQL for the Post table.

Ownership is part of the query predicate: ``find_owned`` matches on id
and owner together, so a post owned by someone else is indistinguishable
from a missing one.

Unlike the other services, the write methods commit.  The post
coordinator reports a success only once the row is durable, and it has to
observe a failed commit in order to turn it into a ``Problem`` result.
"""
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from socialmedia.models import Follower, Post


class PostRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def find(self, post_id: str) -> Post | None:
        return await self.db.get(Post, post_id)

    async def find_owned(self, post_id: str, user_id: str) -> Post | None:
        q = select(Post).where(Post.id == post_id, Post.user_id == user_id)
        result = await self.db.execute(q)
        return result.scalar_one_or_none()

    async def feed_for(self, user_id: str, limit: int) -> Sequence[Post]:
        """
        Return up to *limit* posts authored by users that *user_id*
        follows, newest first.  Equal timestamps are ordered by id so
        consecutive pages never reshuffle.
        """
        followees = select(Follower.followee_id).where(Follower.follower_id == user_id)
        q = (
            select(Post)
            .where(Post.user_id.in_(followees))
            .order_by(Post.date_created.desc(), Post.id.asc())
            .limit(limit)
        )
        result = await self.db.execute(q)
        return result.scalars().all()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def insert(self, post: Post) -> None:
        self.db.add(post)
        await self.db.commit()

    async def update(self, post: Post) -> None:
        # *post* is already attached to the session; its changes are pending.
        await self.db.commit()

    async def remove(self, post: Post) -> None:
        await self.db.delete(post)
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()
