"""
Tenant resolution and scoping for multi-tenant isolation

The active ashram comes from the ``/tenant/{ashram_slug}`` path segment.
It is resolved once per request into a ``TenantScope`` which handlers
receive as an explicit argument and pass on to every scoped query.
"""

from dataclasses import dataclass
from typing import Optional
import uuid

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy import false
from sqlmodel import Session, select
import structlog

from ashram_connect.core.config import get_settings
from ashram_connect.core.database import get_session
from ashram_connect.models.ashram import Ashram

logger = structlog.get_logger(__name__)
settings = get_settings()

SLUG_PATH_PARAM = "ashram_slug"


class TenantScopeError(RuntimeError):
    """Tenant context was required but none was resolved"""


@dataclass(frozen=True)
class TenantScope:
    """Resolved tenant context for one request"""

    tenant: Optional[Ashram] = None
    tenant_slug: Optional[str] = None

    @property
    def tenant_id(self) -> Optional[uuid.UUID]:
        return self.tenant.id if self.tenant else None

    @property
    def is_scoped(self) -> bool:
        """True when the request carried a slug, resolved or not"""
        return bool(self.tenant_slug)

    @property
    def base_path(self) -> str:
        if not self.tenant_slug:
            return ""
        return f"{settings.TENANT_PATH_PREFIX}/{self.tenant_slug}"

    def link(self, path: str) -> str:
        """Build a client link relative to the active scope"""
        if not path.startswith("/"):
            path = f"/{path}"
        if path == "/" and self.base_path:
            return self.base_path
        return f"{self.base_path}{path}"

    def require_tenant(self) -> Ashram:
        if self.tenant is None:
            raise TenantScopeError(
                f"No ashram resolved for slug {self.tenant_slug!r}"
                if self.tenant_slug else "No ashram scope on this request"
            )
        return self.tenant

    def contains(self, ashram_id: Optional[uuid.UUID]) -> bool:
        """Whether a row tagged with ``ashram_id`` is visible in this scope"""
        if not self.is_scoped:
            return True
        return self.tenant is not None and ashram_id == self.tenant.id


GLOBAL_SCOPE = TenantScope()


def resolve_tenant_scope(session: Session, slug: Optional[str]) -> TenantScope:
    """Resolve a slug to an active ashram; unknown or inactive gives tenant=None"""
    if not slug:
        return GLOBAL_SCOPE

    ashram = session.exec(
        select(Ashram).where(Ashram.slug == slug, Ashram.is_active == True)  # noqa: E712
    ).first()

    if ashram is None:
        logger.info("Ashram slug did not resolve", slug=slug)

    return TenantScope(tenant=ashram, tenant_slug=slug)


def apply_tenant_scope(statement, column, scope: TenantScope):
    """Restrict a select to the scope's ashram; global scope sees every row"""
    if not scope.is_scoped:
        return statement
    if scope.tenant is None:
        return statement.where(false())
    return statement.where(column == scope.tenant.id)


def get_scoped_or_404(session: Session, model, row_id: uuid.UUID, scope: TenantScope, detail: str = "Not found"):
    """Fetch a tenant-scopable row; rows outside the scope look missing"""
    row = session.get(model, row_id)
    if row is None or not scope.contains(row.ashram_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)
    return row


def get_tenant_scope(
    request: Request,
    session: Session = Depends(get_session)
) -> TenantScope:
    """Dependency resolving the optional ``ashram_slug`` path segment"""
    slug = request.path_params.get(SLUG_PATH_PARAM)
    scope = resolve_tenant_scope(session, slug)

    if scope.is_scoped and scope.tenant is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Ashram not found"
        )

    logger.debug("Tenant scope", tenant_slug=scope.tenant_slug, tenant_id=str(scope.tenant_id))
    return scope
