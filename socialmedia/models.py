from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from socialmedia.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# User
# ---------------------------------------------------------------------------
class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    display_name: Mapped[Optional[str]] = mapped_column(String(150), nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )

    # lazy="raise" enforces explicit eager loading in services
    posts: Mapped[List["Post"]] = relationship(
        "Post", back_populates="user", lazy="raise"
    )


# ---------------------------------------------------------------------------
# Follower: directed edge "follower_id follows followee_id"
# ---------------------------------------------------------------------------
class Follower(Base):
    __tablename__ = "followers"

    __table_args__ = (
        CheckConstraint("follower_id != followee_id", name="ck_followers_no_self_follow"),
        # Reverse lookup: who follows a given user
        Index("ix_followers_followee_id", "followee_id"),
    )

    follower_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    followee_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    date_created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )


# ---------------------------------------------------------------------------
# Post
# ---------------------------------------------------------------------------
class Post(Base):
    __tablename__ = "posts"

    __table_args__ = (
        # Following feed: posts of a set of authors, newest first
        Index("ix_posts_user_id_date_created", "user_id", "date_created"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    caption: Mapped[str] = mapped_column(String(150), nullable=False, default="")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    # Name of the media object in the blob store; written once at creation.
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    date_created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    date_modified: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    user: Mapped["User"] = relationship("User", back_populates="posts", lazy="raise")

    def __init__(self, **kwargs) -> None:
        # id and date_created exist from construction, not from the first flush.
        kwargs.setdefault("id", _new_id())
        kwargs.setdefault("date_created", _utcnow())
        kwargs.setdefault("caption", "")
        kwargs.setdefault("description", "")
        super().__init__(**kwargs)
