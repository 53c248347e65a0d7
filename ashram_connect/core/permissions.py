"""
RBAC (Role-Based Access Control) capability system

Capabilities are looked up from a declarative table keyed by the global role
and by whether the identity administers the ashram in scope. Callers read the
resulting set; nothing re-derives role booleans on its own.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, List, Optional
import uuid

from ashram_connect.models.user import AppRole


class Capability(str, Enum):
    """Capability definitions"""
    # Public
    BROWSE = "browse"
    DONATE = "donate"
    ENGAGE_FEED = "feed:engage"
    REGISTER_VENDOR = "vendor:register"

    # Per-resource administration
    VIEW_ADMIN_DASHBOARD = "admin:dashboard"
    MANAGE_NEEDS = "needs:manage"
    MANAGE_DONATIONS = "donations:manage"
    MANAGE_VENDORS = "vendors:manage"
    MANAGE_EVENTS = "events:manage"
    MANAGE_MESSAGES = "messages:manage"
    MANAGE_FEED = "feed:manage"

    # Platform administration
    MANAGE_TENANTS = "tenants:manage"
    MANAGE_USER_ROLES = "users:manage_roles"


USER_CAPABILITIES = frozenset({
    Capability.BROWSE,
    Capability.DONATE,
    Capability.ENGAGE_FEED,
    Capability.REGISTER_VENDOR,
})

RESOURCE_ADMIN_CAPABILITIES = frozenset({
    Capability.VIEW_ADMIN_DASHBOARD,
    Capability.MANAGE_NEEDS,
    Capability.MANAGE_DONATIONS,
    Capability.MANAGE_VENDORS,
    Capability.MANAGE_EVENTS,
    Capability.MANAGE_MESSAGES,
    Capability.MANAGE_FEED,
})

PLATFORM_ADMIN_CAPABILITIES = frozenset({
    Capability.MANAGE_TENANTS,
    Capability.MANAGE_USER_ROLES,
})


# Role capability mapping
ROLE_CAPABILITIES = {
    AppRole.USER: USER_CAPABILITIES,
    # Sub-admins manage resources but not ashrams or global roles
    AppRole.SUB_ADMIN: USER_CAPABILITIES | RESOURCE_ADMIN_CAPABILITIES,
    AppRole.ADMIN: USER_CAPABILITIES | RESOURCE_ADMIN_CAPABILITIES | PLATFORM_ADMIN_CAPABILITIES,
}

# Granted on top of the role, only inside the assigned ashram
TENANT_ADMIN_CAPABILITIES = RESOURCE_ADMIN_CAPABILITIES

# Admin dashboard tabs in display order
ADMIN_TABS = (
    ("ashrams", Capability.MANAGE_TENANTS),
    ("needs", Capability.MANAGE_NEEDS),
    ("donations", Capability.MANAGE_DONATIONS),
    ("vendors", Capability.MANAGE_VENDORS),
    ("events", Capability.MANAGE_EVENTS),
    ("messages", Capability.MANAGE_MESSAGES),
    ("users", Capability.MANAGE_USER_ROLES),
)


def parse_role(role: Optional[str]) -> AppRole:
    """Map a stored or claimed role to AppRole; unknown values are plain users"""
    if isinstance(role, AppRole):
        return role
    try:
        return AppRole((role or "").lower())
    except ValueError:
        return AppRole.USER


def capabilities_for(role, is_tenant_admin: bool = False) -> FrozenSet[Capability]:
    """Get capabilities for a role, optionally as admin of the ashram in scope"""
    capabilities = ROLE_CAPABILITIES[parse_role(role)]
    if is_tenant_admin:
        capabilities = capabilities | TENANT_ADMIN_CAPABILITIES
    return capabilities


def has_capability(required: Capability, capabilities: FrozenSet[Capability]) -> bool:
    """Check if a capability set contains the required capability"""
    return required in capabilities


@dataclass(frozen=True)
class Actor:
    """The signed-in identity as seen by authorization checks"""

    user_id: Optional[uuid.UUID] = None
    role: AppRole = AppRole.USER
    tenant_admin_of: FrozenSet[uuid.UUID] = field(default_factory=frozenset)

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def is_admin(self) -> bool:
        return Capability.MANAGE_TENANTS in self.capabilities()

    @property
    def is_sub_admin(self) -> bool:
        return Capability.VIEW_ADMIN_DASHBOARD in self.capabilities()

    @property
    def is_user(self) -> bool:
        return self.is_authenticated

    def is_tenant_admin(self, tenant_id: Optional[uuid.UUID]) -> bool:
        return tenant_id is not None and tenant_id in self.tenant_admin_of

    def capabilities(self, tenant_id: Optional[uuid.UUID] = None) -> FrozenSet[Capability]:
        if not self.is_authenticated:
            return frozenset({Capability.BROWSE, Capability.DONATE})
        return capabilities_for(self.role, self.is_tenant_admin(tenant_id))

    def can(self, capability: Capability, tenant_id: Optional[uuid.UUID] = None) -> bool:
        return has_capability(capability, self.capabilities(tenant_id))


ANONYMOUS = Actor()


def admin_tabs(actor: Actor, tenant_id: Optional[uuid.UUID] = None) -> List[str]:
    """Admin dashboard tabs visible to the actor, in display order"""
    capabilities = actor.capabilities(tenant_id)
    return [name for name, capability in ADMIN_TABS if capability in capabilities]
