"""
Social feed API endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, SQLModel, Field
from typing import List, Optional
from datetime import datetime
import structlog
import uuid

from ashram_connect.core.database import get_session
from ashram_connect.core.dependencies import get_optional_user_id, require_capability
from ashram_connect.core.permissions import Actor, Capability
from ashram_connect.core.tenant import TenantScope, get_scoped_or_404, get_tenant_scope
from ashram_connect.models.feed import FeedPost
from ashram_connect.services.feed import FeedService

logger = structlog.get_logger(__name__)
router = APIRouter()


# Pydantic schemas
class PostCreate(SQLModel):
    """Schema for creating a post"""
    title: Optional[str] = Field(default=None, max_length=200)
    content: Optional[str] = None
    media_url: Optional[str] = None
    media_type: Optional[str] = Field(default=None, max_length=20)
    ashram_id: Optional[uuid.UUID] = None


class PostResponse(SQLModel):
    """Schema for post response"""
    id: uuid.UUID
    ashram_id: Optional[uuid.UUID] = None
    title: Optional[str] = None
    content: Optional[str] = None
    media_url: Optional[str] = None
    media_type: Optional[str] = None
    likes_count: int
    comments_count: int
    has_liked: bool = False
    created_at: datetime


class CommentCreate(SQLModel):
    """Schema for commenting on a post"""
    content: str = Field(min_length=1, max_length=2000)


class CommentResponse(SQLModel):
    """Schema for comment response"""
    id: uuid.UUID
    post_id: uuid.UUID
    user_id: uuid.UUID
    content: str
    created_at: datetime


def to_response(post: FeedPost, has_liked: bool) -> PostResponse:
    return PostResponse(**post.model_dump(), has_liked=has_liked)


@router.get("/", response_model=List[PostResponse])
def list_posts(
    skip: int = 0,
    limit: int = 50,
    scope: TenantScope = Depends(get_tenant_scope),
    user_id: Optional[uuid.UUID] = Depends(get_optional_user_id),
    session: Session = Depends(get_session)
):
    """List posts, newest first, with the caller's like state"""
    service = FeedService(session)
    return [
        to_response(post, has_liked)
        for post, has_liked in service.list_posts(scope, user_id, skip, limit)
    ]


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
def create_post(
    post_data: PostCreate,
    actor: Actor = Depends(require_capability(Capability.MANAGE_FEED)),
    scope: TenantScope = Depends(get_tenant_scope),
    session: Session = Depends(get_session)
):
    """Publish a post"""
    if not post_data.content and not post_data.media_url:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Post needs content or media"
        )

    post = FeedPost(
        **post_data.model_dump(exclude={"ashram_id"}),
        ashram_id=scope.tenant_id if scope.is_scoped else post_data.ashram_id,
        created_by=actor.user_id,
    )
    session.add(post)
    session.commit()
    session.refresh(post)

    logger.info(f"Created post {post.id}")
    return to_response(post, False)


@router.post("/{post_id}/like", response_model=PostResponse)
def like_post(
    post_id: uuid.UUID,
    actor: Actor = Depends(require_capability(Capability.ENGAGE_FEED)),
    scope: TenantScope = Depends(get_tenant_scope),
    session: Session = Depends(get_session)
):
    """Like a post; liking twice leaves a single like"""
    post = get_scoped_or_404(session, FeedPost, post_id, scope, "Post not found")
    FeedService(session).like(post, actor.user_id)
    return to_response(post, True)


@router.delete("/{post_id}/like", response_model=PostResponse)
def unlike_post(
    post_id: uuid.UUID,
    actor: Actor = Depends(require_capability(Capability.ENGAGE_FEED)),
    scope: TenantScope = Depends(get_tenant_scope),
    session: Session = Depends(get_session)
):
    """Remove the caller's like"""
    post = get_scoped_or_404(session, FeedPost, post_id, scope, "Post not found")
    FeedService(session).unlike(post, actor.user_id)
    return to_response(post, False)


@router.get("/{post_id}/comments", response_model=List[CommentResponse])
def list_comments(
    post_id: uuid.UUID,
    scope: TenantScope = Depends(get_tenant_scope),
    session: Session = Depends(get_session)
):
    """Comments of a post, oldest first"""
    post = get_scoped_or_404(session, FeedPost, post_id, scope, "Post not found")
    return FeedService(session).list_comments(post)


@router.post("/{post_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
def add_comment(
    post_id: uuid.UUID,
    comment_data: CommentCreate,
    actor: Actor = Depends(require_capability(Capability.ENGAGE_FEED)),
    scope: TenantScope = Depends(get_tenant_scope),
    session: Session = Depends(get_session)
):
    """Comment on a post"""
    post = get_scoped_or_404(session, FeedPost, post_id, scope, "Post not found")
    comment = FeedService(session).add_comment(post, actor.user_id, comment_data.content)

    logger.info(f"Comment {comment.id} added to post {post.id}")
    return comment
