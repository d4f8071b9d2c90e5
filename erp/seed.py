"""
erp/seed.py

Bootstrap data.

Rules:
- Safe to run multiple times (idempotent).
- The first admin is created from the CLI (`flask seed-admin`), since
  self-registration should not be the only way to get an admin account.
"""

from __future__ import annotations

from typing import Tuple

from .models import Role, User
from .store import entity_store


def seed_admin(username: str, password: str, name: str = "System Administrator") -> Tuple[User, bool]:
    """
    Ensure an admin with this username exists.

    Returns (user, created). An existing account is returned untouched,
    whatever its role.
    """
    store = entity_store()

    existing = store.get_user_by_username(username)
    if existing is not None:
        return existing, False

    user = store.create_user(
        username=username,
        password=password,
        name=name,
        role=Role.ADMIN.value,
    )
    return user, True
