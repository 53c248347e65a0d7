"""
User authentication API endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select
import structlog
import uuid

from ashram_connect.core.auth import create_access_token, hash_password, verify_password
from ashram_connect.core.clock import utc_now
from ashram_connect.core.database import get_session
from ashram_connect.core.dependencies import get_actor, get_current_user_id
from ashram_connect.core.permissions import Actor
from ashram_connect.models.user import AppRole, Profile, User, UserRole
from ashram_connect.schemas.token import TokenResponse
from ashram_connect.schemas.user import UserCreate, UserLogin, UserResponse

logger = structlog.get_logger(__name__)
router = APIRouter()


def role_of(session: Session, user_id: uuid.UUID) -> AppRole:
    """Global role of an identity; no assignment means a plain user"""
    assignment = session.exec(select(UserRole).where(UserRole.user_id == user_id)).first()
    return assignment.role if assignment else AppRole.USER


def _issue_token(user: User, role: AppRole) -> TokenResponse:
    access_token = create_access_token(user_id=user.id, role=role.value)
    return TokenResponse(access_token=access_token, user_id=str(user.id), role=role.value)


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register_user(
    user_data: UserCreate,
    session: Session = Depends(get_session)
):
    """Register a new user with a profile and the default role"""
    email = user_data.email.lower()
    existing_user = session.exec(select(User).where(User.email == email)).first()

    if existing_user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    try:
        new_user = User(email=email, password_hash=hash_password(user_data.password))
        session.add(new_user)
        session.flush()

        session.add(Profile(
            user_id=new_user.id,
            full_name=user_data.full_name,
            email=email,
            phone=user_data.phone,
        ))
        session.add(UserRole(user_id=new_user.id, role=AppRole.USER))
        session.commit()
        session.refresh(new_user)

    except Exception as e:
        session.rollback()
        logger.error(f"Error registering user: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to register user"
        )

    logger.info(f"User registered: {new_user.id}")
    return _issue_token(new_user, AppRole.USER)


@router.post("/login", response_model=TokenResponse)
def login_user(
    login_data: UserLogin,
    session: Session = Depends(get_session)
):
    """Login user; the role in the token holds until the next sign-in"""
    user = session.exec(
        select(User).where(User.email == login_data.email.lower())
    ).first()

    if not user or not verify_password(login_data.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive"
        )

    user.last_login_at = utc_now()
    session.add(user)
    session.commit()
    session.refresh(user)

    role = role_of(session, user.id)
    logger.info(f"User logged in: {user.id}", role=role.value)
    return _issue_token(user, role)


@router.get("/me", response_model=UserResponse)
def get_current_user_info(
    user_id: uuid.UUID = Depends(get_current_user_id),
    actor: Actor = Depends(get_actor),
    session: Session = Depends(get_session)
):
    """Get current user info with role and global capabilities"""
    user = session.get(User, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    profile = session.exec(select(Profile).where(Profile.user_id == user.id)).first()

    return UserResponse(
        id=user.id,
        email=user.email,
        full_name=profile.full_name if profile else None,
        phone=profile.phone if profile else None,
        avatar_url=profile.avatar_url if profile else None,
        role=actor.role,
        is_admin=actor.is_admin,
        is_sub_admin=actor.is_sub_admin,
        tenant_admin_of=sorted(actor.tenant_admin_of, key=str),
        capabilities=sorted(capability.value for capability in actor.capabilities()),
        created_at=user.created_at,
        last_login_at=user.last_login_at,
    )
