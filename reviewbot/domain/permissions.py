"""Admin permission predicate."""

from typing import Iterable

from .errors import PermissionDenied
from .models import GuildSettings


def is_admin(has_admin_permission: bool, member_role_ids: Iterable[int], settings: GuildSettings) -> bool:
    """
    True if the member has Administrator / Manage Guild, or holds one of the
    guild's configured admin roles.
    """
    if has_admin_permission:
        return True
    if not settings.admin_roles:
        return False
    configured = set(settings.admin_roles)
    return any(role_id in configured for role_id in member_role_ids)


def require_admin(has_admin_permission: bool, member_role_ids: Iterable[int], settings: GuildSettings) -> None:
    if not is_admin(has_admin_permission, member_role_ids, settings):
        raise PermissionDenied()
