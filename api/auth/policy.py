"""
Authorization predicates.

All checks work on the account context produced by
`dependencies.get_current_user`. Predicates return booleans; the `ensure_*`
helpers raise `Forbidden` so routes never filter data silently.
"""

from __future__ import annotations

from core.errors import Forbidden

ADMIN = "ADMIN"
CONTRIBUTOR = "CONTRIBUTOR"
ROLES = (ADMIN, CONTRIBUTOR)


def is_admin(user: dict) -> bool:
    return user.get("role") == ADMIN


def is_contributor_or_above(user: dict) -> bool:
    return user.get("role") in ROLES


def owns_or_admin(user: dict, resource_owner_id: int) -> bool:
    return is_admin(user) or int(user["id"]) == int(resource_owner_id)


def ensure_owns_or_admin(user: dict, resource_owner_id: int, *, detail: str) -> None:
    if not owns_or_admin(user, resource_owner_id):
        raise Forbidden(detail)
