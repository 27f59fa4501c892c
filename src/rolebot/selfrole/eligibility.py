"""Rules deciding whether a user may gain or lose a self-role.

These functions are pure: they only read the config and the user's roles.
"""

from collections.abc import Collection

from rolebot.selfrole.models import Eligibility, RoleMenuConfig


def can_assign(
    config: RoleMenuConfig,
    role_id: str,
    user_id: str,
    current_role_ids: Collection[str],
) -> Eligibility:
    """Check whether a user may be given a role from this menu.

    Checks run in a fixed order and the first failing check's reason is
    returned.

    Args:
        config: The menu the role is offered on.
        role_id: Role the user asked for.
        user_id: The requesting user.
        current_role_ids: IDs of every role the user currently holds.

    Returns:
        Eligibility with allowed=False and a reason if the user is denied.
    """
    entry = config.find_role(role_id)
    if entry is None:
        return Eligibility(False, "Role not found")

    held = set(current_role_ids)

    max_roles = config.settings.max_roles_per_user
    if max_roles:
        held_menu_roles = held & config.role_ids()
        if len(held_menu_roles) >= max_roles:
            return Eligibility(False, f"Maximum of {max_roles} self-roles allowed")

    if entry.is_full:
        return Eligibility(False, "Role assignment limit reached")

    if entry.required_role and entry.required_role not in held:
        return Eligibility(False, "Required role not found")

    if any(conflict in held for conflict in entry.conflicting_roles):
        return Eligibility(False, "Conflicting role detected")

    return Eligibility(True)


def can_remove(config: RoleMenuConfig) -> Eligibility:
    """Check whether users may remove roles through this menu."""
    if not config.settings.allow_role_removal:
        return Eligibility(False, "Role removal is disabled for this self-role menu")
    return Eligibility(True)
