"""
Unit tests for the authorization policy.
These run without HTTP or a database: businesses are simple namespaces.
"""

from types import SimpleNamespace

import pytest

from app.enums import BusinessAction, UserRole
from app.exceptions import ForbiddenError, UnauthorizedError
from app.policies import ANONYMOUS, Actor, is_allowed, require

ADMIN = Actor(id=1, role=UserRole.ADMIN)
OWNER = Actor(id=2, role=UserRole.USER)
STRANGER = Actor(id=3, role=UserRole.BUSINESS_OWNER)


def business(owner_id=2, is_approved=False):
    return SimpleNamespace(owner_id=owner_id, is_approved=is_approved)


class TestActor:
    def test_anonymous_actor(self):
        assert ANONYMOUS.is_anonymous
        assert not ANONYMOUS.is_admin

    def test_from_user_accepts_role_values(self):
        user = SimpleNamespace(id=7, role="admin")
        actor = Actor.from_user(user)
        assert actor.id == 7
        assert actor.role == UserRole.ADMIN
        assert actor.is_admin


class TestIsAllowed:
    @pytest.mark.parametrize("actor", [ANONYMOUS, OWNER, STRANGER, ADMIN])
    def test_anyone_lists_approved(self, actor):
        assert is_allowed(actor, BusinessAction.LIST_APPROVED)

    def test_submit_requires_authentication(self):
        assert not is_allowed(ANONYMOUS, BusinessAction.SUBMIT)
        assert is_allowed(OWNER, BusinessAction.SUBMIT)
        assert is_allowed(ADMIN, BusinessAction.SUBMIT)

    @pytest.mark.parametrize("action", [
        BusinessAction.SET_APPROVAL,
        BusinessAction.LIST_ALL,
        BusinessAction.MANAGE_TAXONOMY,
    ])
    def test_admin_only_actions(self, action):
        assert is_allowed(ADMIN, action, business())
        assert not is_allowed(OWNER, action, business())
        assert not is_allowed(STRANGER, action, business())
        assert not is_allowed(ANONYMOUS, action, business())

    @pytest.mark.parametrize("action", [BusinessAction.EDIT, BusinessAction.REMOVE])
    def test_owner_or_admin_actions(self, action):
        target = business(owner_id=OWNER.id)
        assert is_allowed(OWNER, action, target)
        assert is_allowed(ADMIN, action, target)
        assert not is_allowed(STRANGER, action, target)
        assert not is_allowed(ANONYMOUS, action, target)

    def test_owner_rule_does_not_depend_on_approval_state(self):
        assert is_allowed(OWNER, BusinessAction.EDIT, business(is_approved=True))
        assert is_allowed(OWNER, BusinessAction.EDIT, business(is_approved=False))

    def test_view_approved_business_is_public(self):
        assert is_allowed(ANONYMOUS, BusinessAction.VIEW, business(is_approved=True))

    def test_view_pending_business_is_limited_to_owner_and_admin(self):
        pending = business(owner_id=OWNER.id, is_approved=False)
        assert is_allowed(OWNER, BusinessAction.VIEW, pending)
        assert is_allowed(ADMIN, BusinessAction.VIEW, pending)
        assert not is_allowed(STRANGER, BusinessAction.VIEW, pending)
        assert not is_allowed(ANONYMOUS, BusinessAction.VIEW, pending)

    def test_anonymous_never_owns(self):
        orphan = business(owner_id=None)
        assert not is_allowed(ANONYMOUS, BusinessAction.EDIT, orphan)


class TestRequire:
    def test_allowed_returns_none(self):
        assert require(ADMIN, BusinessAction.SET_APPROVAL) is None

    def test_anonymous_denial_is_unauthorized(self):
        with pytest.raises(UnauthorizedError):
            require(ANONYMOUS, BusinessAction.SUBMIT)

    def test_authenticated_denial_is_forbidden(self):
        with pytest.raises(ForbiddenError) as exc_info:
            require(STRANGER, BusinessAction.EDIT, business(owner_id=OWNER.id))
        assert "edit" in exc_info.value.message

    def test_custom_message(self):
        with pytest.raises(ForbiddenError) as exc_info:
            require(OWNER, BusinessAction.SET_APPROVAL, message="Admin privileges required")
        assert exc_info.value.message == "Admin privileges required"
