"""
Role-based authorization rules.

Authorization is a pure function of the caller's role and the operation
requested; nothing here touches Flask or the database.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .entities import Role


class Operation(str, Enum):
    VIEW_DASHBOARD = "view_dashboard"
    REVIEW_VOLUNTEERS = "review_volunteers"
    MANAGE_DENTISTS = "manage_dentists"


POLICY = {
    Operation.VIEW_DASHBOARD: frozenset({Role.ADMIN, Role.DENTIST, Role.GUARDIAN}),
    Operation.REVIEW_VOLUNTEERS: frozenset({Role.ADMIN}),
    Operation.MANAGE_DENTISTS: frozenset({Role.ADMIN}),
}


@dataclass(frozen=True)
class SessionContext:
    """Identity of the caller for the current request."""

    user_id: Optional[int]
    role: Optional[Role]

    @classmethod
    def anonymous(cls) -> "SessionContext":
        return cls(user_id=None, role=None)

    @classmethod
    def from_user(cls, user) -> "SessionContext":
        """Build a context from a Flask-Login user (or anything with id/role)."""
        if user is None or not getattr(user, "is_authenticated", False):
            return cls.anonymous()
        return cls(
            user_id=getattr(user, "id", None),
            role=Role.from_claim(getattr(user, "role", None)),
        )

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


def authorize(role: Optional[Role], operation: Operation) -> bool:
    """Return True when `role` may perform `operation`."""
    if role is None:
        return False
    return role in POLICY.get(operation, frozenset())


def is_admin(context: SessionContext) -> bool:
    return context.role is Role.ADMIN
