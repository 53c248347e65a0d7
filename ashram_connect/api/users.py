"""
Users API endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select
from typing import List
import structlog
import uuid

from ashram_connect.api.auth import role_of
from ashram_connect.core.database import get_session
from ashram_connect.core.dependencies import require_capability
from ashram_connect.core.permissions import Actor, Capability
from ashram_connect.models.user import AppRole, Profile, User, UserRole
from ashram_connect.schemas.user import RoleUpdate, UserWithRole

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("/", response_model=List[UserWithRole])
def list_users(
    skip: int = 0,
    limit: int = 100,
    actor: Actor = Depends(require_capability(Capability.MANAGE_USER_ROLES)),
    session: Session = Depends(get_session)
):
    """List users with their profile name and global role"""
    rows = session.exec(
        select(User, Profile.full_name, UserRole.role)
        .join(Profile, Profile.user_id == User.id, isouter=True)
        .join(UserRole, UserRole.user_id == User.id, isouter=True)
        .order_by(User.created_at.desc())
        .offset(skip)
        .limit(limit)
    ).all()

    return [
        UserWithRole(
            user_id=user.id,
            email=user.email,
            full_name=full_name,
            role=role or AppRole.USER,
            created_at=user.created_at,
        )
        for user, full_name, role in rows
    ]


@router.patch("/{user_id}/role", response_model=UserWithRole)
def update_user_role(
    user_id: uuid.UUID,
    role_update: RoleUpdate,
    actor: Actor = Depends(require_capability(Capability.MANAGE_USER_ROLES)),
    session: Session = Depends(get_session)
):
    """Change a user's global role; takes effect at their next sign-in"""
    user = session.get(User, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    if user.id == actor.user_id and role_update.role != AppRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Admins cannot demote themselves"
        )

    assignment = session.exec(select(UserRole).where(UserRole.user_id == user_id)).first()
    if assignment:
        assignment.role = role_update.role
    else:
        assignment = UserRole(user_id=user_id, role=role_update.role)
    session.add(assignment)
    session.commit()

    logger.info(f"Role of {user_id} set to {role_update.role.value} by {actor.user_id}")

    profile = session.exec(select(Profile).where(Profile.user_id == user_id)).first()
    return UserWithRole(
        user_id=user.id,
        email=user.email,
        full_name=profile.full_name if profile else None,
        role=role_of(session, user_id),
        created_at=user.created_at,
    )
