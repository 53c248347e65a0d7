"""
Social feed models: posts, likes and comments
"""

from sqlmodel import Field, SQLModel
from sqlalchemy import CheckConstraint, UniqueConstraint
from datetime import datetime
from typing import Optional
import uuid

from ashram_connect.core.clock import utc_now
from ashram_connect.models.columns import timestamp_column


class FeedPost(SQLModel, table=True):
    """Feed post with denormalized like and comment counters"""

    __tablename__ = "feed_posts"
    __table_args__ = (
        CheckConstraint("likes_count >= 0", name="ck_post_likes_non_negative"),
        CheckConstraint("comments_count >= 0", name="ck_post_comments_non_negative"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    ashram_id: Optional[uuid.UUID] = Field(default=None, foreign_key="ashrams.id", index=True, nullable=True)

    title: Optional[str] = Field(default=None, max_length=200)
    content: Optional[str] = None
    media_url: Optional[str] = None
    media_type: Optional[str] = Field(default=None, max_length=20)

    # Maintained in the same transaction as post_likes / post_comments rows
    likes_count: int = Field(default=0)
    comments_count: int = Field(default=0)

    created_by: Optional[uuid.UUID] = Field(default=None, foreign_key="users.id", nullable=True)
    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column(index=True))


class PostLike(SQLModel, table=True):
    """Presence of a row is the like state of (post, user)"""

    __tablename__ = "post_likes"
    __table_args__ = (
        UniqueConstraint("post_id", "user_id", name="uq_post_like_user"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    post_id: uuid.UUID = Field(foreign_key="feed_posts.id", index=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())


class PostComment(SQLModel, table=True):
    """Comment on a post, ordered by creation time"""

    __tablename__ = "post_comments"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    post_id: uuid.UUID = Field(foreign_key="feed_posts.id", index=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    content: str = Field(max_length=2000)
    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column(index=True))
