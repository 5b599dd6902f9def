"""
Authorization rules for directory operations.

``is_allowed`` is a pure decision function over (actor, action, business) and
has no knowledge of HTTP or the database. ``require`` wraps it and raises the
typed error callers expect: ``UnauthorizedError`` when an anonymous actor is
denied, ``ForbiddenError`` when an authenticated one is.

    Operation            Allowed actors
    -------------------  ------------------------------------
    submit               any authenticated user
    set_approval         admin
    edit / remove        owner or admin
    view                 anyone if approved, else owner or admin
    list_approved        anyone, including anonymous
    list_all             admin
    manage_taxonomy      admin
"""

from dataclasses import dataclass
from typing import Any, Optional

from .enums import BusinessAction, UserRole
from .exceptions import ForbiddenError, UnauthorizedError


@dataclass(frozen=True)
class Actor:
    """Identity making a request. Both fields are None for anonymous callers."""
    id: Optional[int] = None
    role: Optional[UserRole] = None

    @classmethod
    def from_user(cls, user: Any) -> "Actor":
        return cls(id=user.id, role=UserRole(user.role))

    @property
    def is_anonymous(self) -> bool:
        return self.id is None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


ANONYMOUS = Actor()

_ADMIN_ONLY = {
    BusinessAction.SET_APPROVAL,
    BusinessAction.LIST_ALL,
    BusinessAction.MANAGE_TAXONOMY,
}
_OWNER_OR_ADMIN = {
    BusinessAction.EDIT,
    BusinessAction.REMOVE,
}


def is_owner(actor: Actor, business: Any) -> bool:
    return not actor.is_anonymous and business is not None and business.owner_id == actor.id


def is_allowed(actor: Actor, action: BusinessAction, business: Any = None) -> bool:
    """Decide whether ``actor`` may perform ``action`` on ``business``.

    ``business`` is anything exposing ``owner_id`` and ``is_approved``; it is
    only consulted for the ownership-dependent actions.
    """
    if action == BusinessAction.LIST_APPROVED:
        return True

    if action == BusinessAction.VIEW:
        if business is not None and business.is_approved:
            return True
        return actor.is_admin or is_owner(actor, business)

    if actor.is_anonymous:
        return False

    if action == BusinessAction.SUBMIT:
        return True

    if action in _ADMIN_ONLY:
        return actor.is_admin

    if action in _OWNER_OR_ADMIN:
        return actor.is_admin or is_owner(actor, business)

    return False


def require(actor: Actor, action: BusinessAction, business: Any = None, message: Optional[str] = None) -> None:
    """Raise unless ``actor`` may perform ``action``."""
    if is_allowed(actor, action, business):
        return
    if actor.is_anonymous:
        raise UnauthorizedError("Authentication required")
    raise ForbiddenError(message or f"Not authorized to {action.value.replace('_', ' ')}")
