"""
erp/security.py

Authorization gate for the JSON API.

Key rules:
- Every guarded endpoint has exactly one entry in POLICY (endpoint -> required roles).
- An empty role set means "any authenticated principal".
- No session -> Unauthenticated (401), checked before the role.
- Session present but role not in the set -> Forbidden (403).
- An endpoint missing from POLICY fails closed (403).

authorize() is pure. The gated decorator is the only place that reads the
Flask-Login session; it hands the resolved Principal to the view as its first
argument so handlers never look the user up themselves.

IMPORTANT:
- Decorators must preserve wrapped function metadata to avoid Flask endpoint collisions.
  We use functools.wraps everywhere.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from functools import wraps
from typing import Any, Callable, FrozenSet, Iterable, Mapping, Optional

from flask import request
from flask_login import current_user

from .errors import Forbidden, Unauthenticated
from .models import Role

logger = logging.getLogger(__name__)

ANY_AUTHENTICATED: FrozenSet[Role] = frozenset()
MANAGERS: FrozenSet[Role] = frozenset({Role.ADMIN, Role.PROJECT_OFFICER})


POLICY: Mapping[str, FrozenSet[Role]] = {
    # auth
    "auth.logout": ANY_AUTHENTICATED,
    "auth.me": ANY_AUTHENTICATED,
    # projects & tasks
    "projects.list_projects": ANY_AUTHENTICATED,
    "projects.get_project": ANY_AUTHENTICATED,
    "projects.create_project": MANAGERS,
    "projects.list_tasks": ANY_AUTHENTICATED,
    "projects.create_task": MANAGERS,
    "projects.update_task_status": ANY_AUTHENTICATED,
    # attendance
    "attendance.mark_attendance": ANY_AUTHENTICATED,
    "attendance.get_attendance": ANY_AUTHENTICATED,
    # budget
    "budget.list_budget_items": ANY_AUTHENTICATED,
    "budget.create_budget_item": MANAGERS,
    "budget.budget_summary": ANY_AUTHENTICATED,
    # milestones
    "milestones.list_milestones": ANY_AUTHENTICATED,
    "milestones.create_milestone": MANAGERS,
    "milestones.update_milestone_status": MANAGERS,
    # reports
    "reports.list_reports": ANY_AUTHENTICATED,
    "reports.create_report": MANAGERS,
    "reports.get_report": ANY_AUTHENTICATED,
    # users
    "users.list_users": ANY_AUTHENTICATED,
}

# Reachable without a session.
PUBLIC_ENDPOINTS: FrozenSet[str] = frozenset({"auth.register", "auth.login"})


class Decision(str, Enum):
    ALLOW = "allow"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class Principal:
    """The authenticated user attached to a request."""

    id: int
    role: Role

    @classmethod
    def from_user(cls, user: Any) -> "Principal":
        return cls(id=int(user.id), role=Role(user.role))


def authorize(principal: Optional[Principal], required_roles: Iterable[Role]) -> Decision:
    """Return the gate decision for a principal against a required role set."""
    if principal is None:
        return Decision.UNAUTHENTICATED

    required = frozenset(required_roles)
    if not required or principal.role in required:
        return Decision.ALLOW

    return Decision.FORBIDDEN


def current_principal() -> Optional[Principal]:
    """Principal for the Flask-Login session, or None when not logged in."""
    if not current_user.is_authenticated:
        return None
    return Principal.from_user(current_user)


def gated(view_func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Decorator: apply POLICY[request.endpoint] and pass the principal to the view.

    Usage:
        @projects_bp.route("/projects", methods=["POST"])
        @gated
        def create_project(principal): ...
    """
    @wraps(view_func)
    def wrapper(*args: Any, **kwargs: Any):
        endpoint = request.endpoint or ""
        principal = current_principal()

        required = POLICY.get(endpoint)
        if required is None:
            logger.error("No access policy for endpoint %s; denying", endpoint)
            if principal is None:
                raise Unauthenticated()
            raise Forbidden()

        decision = authorize(principal, required)
        if decision is Decision.UNAUTHENTICATED:
            raise Unauthenticated()
        if decision is Decision.FORBIDDEN:
            logger.warning(
                "Denied %s for user %s with role %s", endpoint, principal.id, principal.role.value
            )
            raise Forbidden()

        return view_func(principal, *args, **kwargs)

    return wrapper
