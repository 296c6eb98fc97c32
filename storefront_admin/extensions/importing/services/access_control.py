"""Permission helpers for product import operations."""

from __future__ import annotations

from typing import Any

from django.core.exceptions import PermissionDenied

from ....catalog.models import Product

READ_ACTIONS = ("view", "change", "add")
WRITE_ACTIONS = ("add", "change")


def _to_user_id(user: Any) -> str:
    raw_id = getattr(user, "id", None) if user is not None else None
    return "" if raw_id is None else str(raw_id)


def can_import_products(user: Any, *, write: bool = False) -> bool:
    """
    Staff and superusers may always import; other users need catalog perms.

    Reading job status needs any of view/change/add on products, starting an
    import or cancelling one needs add or change.
    """
    if user is None or not getattr(user, "is_authenticated", False):
        return False
    if getattr(user, "is_superuser", False) or getattr(user, "is_staff", False):
        return True

    opts = Product._meta
    actions = WRITE_ACTIONS if write else READ_ACTIONS
    return any(
        user.has_perm(f"{opts.app_label}.{action}_{opts.model_name}")
        for action in actions
    )


def require_import_access(user: Any, *, write: bool = False) -> str:
    """Validate import access and return normalized user id."""
    if not can_import_products(user, write=write):
        raise PermissionDenied("User is not allowed to import catalog products.")
    return _to_user_id(user)
