"""
Unit tests for the capability table and actor checks
"""

import uuid

from ashram_connect.core.permissions import (
    ANONYMOUS,
    Actor,
    Capability,
    ROLE_CAPABILITIES,
    admin_tabs,
    capabilities_for,
    has_capability,
    parse_role,
)
from ashram_connect.models.user import AppRole


def test_role_capabilities_are_nested():
    """Each role holds every capability of the roles below it"""
    user_caps = capabilities_for(AppRole.USER)
    sub_admin_caps = capabilities_for(AppRole.SUB_ADMIN)
    admin_caps = capabilities_for(AppRole.ADMIN)

    assert user_caps < sub_admin_caps < admin_caps


def test_tenant_admin_flag_never_removes_capabilities():
    for role in AppRole:
        assert capabilities_for(role) <= capabilities_for(role, is_tenant_admin=True)


def test_user_capabilities():
    caps = capabilities_for("user")
    assert has_capability(Capability.DONATE, caps)
    assert has_capability(Capability.ENGAGE_FEED, caps)
    assert has_capability(Capability.REGISTER_VENDOR, caps)
    assert not has_capability(Capability.VIEW_ADMIN_DASHBOARD, caps)
    assert not has_capability(Capability.MANAGE_NEEDS, caps)


def test_sub_admin_cannot_manage_tenants_or_roles():
    caps = capabilities_for(AppRole.SUB_ADMIN)
    assert Capability.MANAGE_NEEDS in caps
    assert Capability.MANAGE_VENDORS in caps
    assert Capability.MANAGE_TENANTS not in caps
    assert Capability.MANAGE_USER_ROLES not in caps


def test_admin_has_every_capability():
    assert ROLE_CAPABILITIES[AppRole.ADMIN] == frozenset(Capability)


def test_parse_role_defaults_to_user():
    assert parse_role("ADMIN") == AppRole.ADMIN
    assert parse_role("sub_admin") == AppRole.SUB_ADMIN
    assert parse_role("superuser") == AppRole.USER
    assert parse_role(None) == AppRole.USER


class TestActor:
    """Actor capability resolution"""

    def test_anonymous_can_browse_and_donate_only(self):
        assert not ANONYMOUS.is_authenticated
        assert ANONYMOUS.can(Capability.BROWSE)
        assert ANONYMOUS.can(Capability.DONATE)
        assert not ANONYMOUS.can(Capability.ENGAGE_FEED)
        assert not ANONYMOUS.is_user

    def test_role_flags(self):
        admin = Actor(user_id=uuid.uuid4(), role=AppRole.ADMIN)
        sub_admin = Actor(user_id=uuid.uuid4(), role=AppRole.SUB_ADMIN)
        user = Actor(user_id=uuid.uuid4())

        assert admin.is_admin and admin.is_sub_admin
        assert sub_admin.is_sub_admin and not sub_admin.is_admin
        assert user.is_user and not user.is_sub_admin

    def test_tenant_admin_only_inside_own_ashram(self):
        own_ashram = uuid.uuid4()
        other_ashram = uuid.uuid4()
        actor = Actor(user_id=uuid.uuid4(), tenant_admin_of=frozenset({own_ashram}))

        assert actor.can(Capability.MANAGE_NEEDS, own_ashram)
        assert not actor.can(Capability.MANAGE_NEEDS, other_ashram)
        assert not actor.can(Capability.MANAGE_NEEDS)
        assert not actor.can(Capability.MANAGE_TENANTS, own_ashram)


class TestAdminTabs:
    """Dashboard tab visibility"""

    def test_admin_sees_all_tabs_in_order(self):
        actor = Actor(user_id=uuid.uuid4(), role=AppRole.ADMIN)
        assert admin_tabs(actor) == [
            "ashrams", "needs", "donations", "vendors", "events", "messages", "users"
        ]

    def test_sub_admin_tabs(self):
        actor = Actor(user_id=uuid.uuid4(), role=AppRole.SUB_ADMIN)
        tabs = admin_tabs(actor)
        assert "ashrams" not in tabs
        assert "users" not in tabs
        assert tabs[0] == "needs"

    def test_tenant_admin_never_sees_platform_tabs(self):
        ashram_id = uuid.uuid4()
        actor = Actor(user_id=uuid.uuid4(), tenant_admin_of=frozenset({ashram_id}))

        tabs = admin_tabs(actor, ashram_id)
        assert tabs == ["needs", "donations", "vendors", "events", "messages"]
        assert admin_tabs(actor) == []

    def test_plain_user_sees_no_tabs(self):
        assert admin_tabs(Actor(user_id=uuid.uuid4())) == []
