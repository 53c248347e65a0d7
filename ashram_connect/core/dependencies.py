"""
Authentication and authorization dependencies for FastAPI
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session, select
from typing import Optional
import uuid
import structlog

from ashram_connect.core.auth import decode_access_token
from ashram_connect.core.config import get_settings
from ashram_connect.core.database import get_session
from ashram_connect.core.permissions import ANONYMOUS, Actor, Capability, parse_role
from ashram_connect.core.tenant import TenantScope, get_tenant_scope
from ashram_connect.models.ashram import AshramAdmin
from ashram_connect.models.user import User

logger = structlog.get_logger(__name__)
settings = get_settings()
security = HTTPBearer(auto_error=False)


def _sign_in_required() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer", "X-Sign-In-Path": settings.SIGN_IN_PATH},
    )


async def get_token_payload(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[dict]:
    """Decoded JWT claims, or None for guests"""
    if credentials is None:
        return None

    payload = decode_access_token(credentials.credentials)
    if payload is None or not payload.get("sub"):
        raise _sign_in_required()
    return payload


def get_optional_user_id(
    payload: Optional[dict] = Depends(get_token_payload),
    session: Session = Depends(get_session)
) -> Optional[uuid.UUID]:
    """Current user ID, or None when the request is anonymous

    The account is re-read on every request so a deactivated identity loses
    access before its token expires.
    """
    if payload is None:
        return None
    try:
        user_id = uuid.UUID(payload["sub"])
    except ValueError:
        raise _sign_in_required()

    user = session.get(User, user_id)
    if user is None:
        raise _sign_in_required()
    if not user.is_active:
        logger.info("Inactive account rejected", user_id=str(user_id))
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive"
        )
    return user_id


async def get_current_user_id(
    user_id: Optional[uuid.UUID] = Depends(get_optional_user_id)
) -> uuid.UUID:
    """Get current user ID from JWT token"""
    if user_id is None:
        raise _sign_in_required()

    logger.debug("User authenticated", user_id=str(user_id))
    return user_id


def get_actor(
    payload: Optional[dict] = Depends(get_token_payload),
    user_id: Optional[uuid.UUID] = Depends(get_optional_user_id),
    session: Session = Depends(get_session)
) -> Actor:
    """Resolve the acting identity once per request"""
    if user_id is None:
        return ANONYMOUS

    assignments = session.exec(
        select(AshramAdmin.ashram_id).where(AshramAdmin.user_id == user_id)
    ).all()

    return Actor(
        user_id=user_id,
        role=parse_role(payload.get("role")),
        tenant_admin_of=frozenset(assignments),
    )


def require_capability(required: Capability):
    """Dependency factory to check capabilities within the request's tenant scope"""
    def check_capability(
        actor: Actor = Depends(get_actor),
        scope: TenantScope = Depends(get_tenant_scope)
    ) -> Actor:
        if not actor.is_authenticated:
            raise _sign_in_required()

        if not actor.can(required, scope.tenant_id):
            logger.info(
                "Capability denied",
                user_id=str(actor.user_id),
                capability=required.value,
                tenant_id=str(scope.tenant_id),
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Permission required: {required.value}",
            )
        return actor
    return check_capability
