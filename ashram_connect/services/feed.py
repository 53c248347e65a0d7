"""
Feed engagement: likes and comments with their counters

A like or comment row and the matching counter change are written in one
transaction, so ``likes_count`` and ``comments_count`` never drift from the
rows they summarize.
"""

from typing import List, Optional, Set, Tuple
import uuid

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select
import structlog

from ashram_connect.core.tenant import TenantScope, apply_tenant_scope
from ashram_connect.models.feed import FeedPost, PostComment, PostLike

logger = structlog.get_logger(__name__)


class FeedService:
    """Reads and engagement writes for feed posts"""

    def __init__(self, session: Session):
        self.session = session

    def liked_post_ids(self, user_id: Optional[uuid.UUID]) -> Set[uuid.UUID]:
        if user_id is None:
            return set()
        return set(self.session.exec(
            select(PostLike.post_id).where(PostLike.user_id == user_id)
        ).all())

    def list_posts(
        self,
        scope: TenantScope,
        user_id: Optional[uuid.UUID] = None,
        skip: int = 0,
        limit: int = 50
    ) -> List[Tuple[FeedPost, bool]]:
        """Newest posts first, each paired with whether the user liked it"""
        statement = apply_tenant_scope(select(FeedPost), FeedPost.ashram_id, scope)
        posts = self.session.exec(
            statement.order_by(FeedPost.created_at.desc()).offset(skip).limit(limit)
        ).all()

        liked = self.liked_post_ids(user_id)
        return [(post, post.id in liked) for post in posts]

    def has_liked(self, post_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        return self.session.exec(
            select(PostLike).where(PostLike.post_id == post_id, PostLike.user_id == user_id)
        ).first() is not None

    def like(self, post: FeedPost, user_id: uuid.UUID) -> bool:
        """Like a post; returns False when it was already liked"""
        if self.has_liked(post.id, user_id):
            return False

        try:
            self.session.add(PostLike(post_id=post.id, user_id=user_id))
            self.session.exec(
                update(FeedPost)
                .where(FeedPost.id == post.id)
                .values(likes_count=FeedPost.likes_count + 1)
            )
            self.session.commit()
        except IntegrityError:
            # Concurrent like of the same post by the same user
            self.session.rollback()
            logger.info("Duplicate like ignored", post_id=str(post.id), user_id=str(user_id))
            return False

        self.session.refresh(post)
        logger.info("Post liked", post_id=str(post.id), user_id=str(user_id))
        return True

    def unlike(self, post: FeedPost, user_id: uuid.UUID) -> bool:
        """Remove a like; returns False when there was none"""
        like = self.session.exec(
            select(PostLike).where(PostLike.post_id == post.id, PostLike.user_id == user_id)
        ).first()
        if like is None:
            return False

        self.session.delete(like)
        self.session.exec(
            update(FeedPost)
            .where(FeedPost.id == post.id, FeedPost.likes_count > 0)
            .values(likes_count=FeedPost.likes_count - 1)
        )
        self.session.commit()
        self.session.refresh(post)
        logger.info("Post unliked", post_id=str(post.id), user_id=str(user_id))
        return True

    def list_comments(self, post: FeedPost) -> List[PostComment]:
        return list(self.session.exec(
            select(PostComment)
            .where(PostComment.post_id == post.id)
            .order_by(PostComment.created_at.asc())
        ).all())

    def add_comment(self, post: FeedPost, user_id: uuid.UUID, content: str) -> PostComment:
        comment = PostComment(post_id=post.id, user_id=user_id, content=content)
        try:
            self.session.add(comment)
            self.session.exec(
                update(FeedPost)
                .where(FeedPost.id == post.id)
                .values(comments_count=FeedPost.comments_count + 1)
            )
            self.session.commit()
        except Exception as e:
            self.session.rollback()
            logger.error(f"Failed to add comment on post {post.id}: {e}")
            raise

        self.session.refresh(comment)
        self.session.refresh(post)
        return comment
