"""Lifecycle and bookkeeping operations on role menus.

Every change to a RoleMenuConfig goes through a function in this module.
Callers are responsible for persisting the config afterwards.
"""

import re
from datetime import datetime

from rolebot.config import constants
from rolebot.selfrole.errors import (
    DuplicateRoleError,
    InvalidPositionError,
    MenuFullError,
    RoleNotInMenuError,
    ValidationError,
)
from rolebot.selfrole.models import (
    Attribution,
    MenuSettings,
    MenuStatistics,
    RoleAssignmentStat,
    RoleEntry,
    RoleMenuConfig,
    UserStat,
)

_HEX_COLOR_PATTERN = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")
_CUSTOM_EMOJI_PATTERN = re.compile(r"^<a?:\w{2,32}:\d+>$")
# Pictographs, optionally joined by ZWJ or followed by variation selectors,
# skin tones or a keycap mark
_UNICODE_EMOJI_PATTERN = re.compile(
    "^(?:[\u00a9\u00ae\u203c-\u3299\U0001F000-\U0001FAFF]"
    "[\ufe0f\u200d\u20e3\U0001F3FB-\U0001F3FF]*"
    "|[0-9#*]\ufe0f?\u20e3)+$"
)


def is_hex_color(value: str) -> bool:
    """Whether value is a #rgb or #rrggbb colour string."""
    return _HEX_COLOR_PATTERN.match(value) is not None


def is_button_emoji(value: str) -> bool:
    """Whether value is a custom emoji mention or a Unicode emoji."""
    return (
        _CUSTOM_EMOJI_PATTERN.match(value) is not None
        or _UNICODE_EMOJI_PATTERN.match(value) is not None
    )


def _validate_text(name: str, value: str | None, limit: int) -> None:
    if value is None or not value.strip():
        raise ValidationError(f"The {name} cannot be empty.")
    if len(value) > limit:
        raise ValidationError(f"The {name} must be at most {limit} characters.")


def new_menu(
    guild_id: str,
    channel_id: str,
    message_id: str,
    title: str,
    description: str,
    created_by: Attribution,
    color: str = constants.DEFAULT_MENU_COLOR,
    settings: MenuSettings | None = None,
) -> RoleMenuConfig:
    """Build a new, empty role menu.

    Raises:
        ValidationError: If the title, description or colour is invalid.
    """
    _validate_text("title", title, constants.EMBED_TITLE_LIMIT)
    _validate_text("description", description, constants.EMBED_DESCRIPTION_LIMIT)
    if not is_hex_color(color):
        raise ValidationError(
            "Invalid color format. Please use hex format like #ff0000"
        )

    return RoleMenuConfig(
        guild_id=guild_id,
        message_id=message_id,
        channel_id=channel_id,
        title=title,
        description=description,
        color=color,
        roles=[],
        settings=settings or MenuSettings(),
        statistics=MenuStatistics(),
        created_by=created_by,
        created_at=created_by.timestamp,
    )


def _sort_roles(config: RoleMenuConfig) -> None:
    # list.sort is stable, so equal positions keep insertion order
    config.roles.sort(key=lambda r: r.position)


def _get_entry(config: RoleMenuConfig, role_id: str) -> RoleEntry:
    entry = config.find_role(role_id)
    if entry is None:
        raise RoleNotInMenuError()
    return entry


def add_role(config: RoleMenuConfig, entry: RoleEntry) -> None:
    """Add a role entry and re-sort the menu by position.

    Raises:
        DuplicateRoleError: If the role is already on the menu.
        MenuFullError: If the menu already offers the maximum number of roles.
        ValidationError: If the label, description or emoji is invalid.
    """
    if config.find_role(entry.role_id) is not None:
        raise DuplicateRoleError()
    if len(config.roles) >= constants.MAX_ROLES_PER_MENU:
        raise MenuFullError(constants.MAX_ROLES_PER_MENU)

    _validate_text("label", entry.label, constants.BUTTON_LABEL_LIMIT)
    if (
        entry.description is not None
        and len(entry.description) > constants.ROLE_DESCRIPTION_LIMIT
    ):
        raise ValidationError(
            f"The description must be at most {constants.ROLE_DESCRIPTION_LIMIT} characters."
        )
    if entry.emoji is not None and not is_button_emoji(entry.emoji):
        raise ValidationError(
            "Invalid emoji. Use a standard emoji or a custom emoji like <:name:id>."
        )

    # A role that was on the menu before keeps counting its existing holders
    stat = config.statistics.find_role(entry.role_id)
    if stat is not None:
        entry.current_assignments = max(stat.assigned_count - stat.removed_count, 0)

    config.roles.append(entry)
    _sort_roles(config)


def remove_role(config: RoleMenuConfig, role_id: str) -> RoleEntry:
    """Remove a role entry. Remaining positions are left as they are.

    Returns:
        The removed entry.
    """
    entry = _get_entry(config, role_id)
    config.roles.remove(entry)
    return entry


def reorder_role(config: RoleMenuConfig, role_id: str, new_position: int) -> None:
    """Move a role to a new position and re-sort.

    Raises:
        RoleNotInMenuError: If the role is not on the menu.
        InvalidPositionError: If the position is outside 0..len(roles)-1.
    """
    entry = _get_entry(config, role_id)
    if new_position < 0 or new_position >= len(config.roles):
        raise InvalidPositionError(len(config.roles))

    entry.position = new_position
    _sort_roles(config)


def update_role_limits(
    config: RoleMenuConfig,
    role_id: str,
    max_assignments: int | None = None,
    required_role: str | None = None,
) -> list[str]:
    """Update the assignment cap and/or prerequisite role of an entry.

    A max_assignments of 0 removes the cap. Arguments left as None are unchanged.

    Returns:
        Human-readable descriptions of what changed.
    """
    entry = _get_entry(config, role_id)
    changes = []

    if max_assignments is not None:
        if max_assignments < 0:
            raise ValidationError("Max assignments cannot be negative.")
        entry.max_assignments = max_assignments or None
        changes.append(f"max assignments: {max_assignments or 'unlimited'}")

    if required_role is not None:
        if required_role == role_id:
            raise ValidationError("A role cannot require itself.")
        entry.required_role = required_role
        changes.append(f"required role: <@&{required_role}>")

    return changes


def add_conflict(config: RoleMenuConfig, role_id: str, conflicting_role: str) -> None:
    entry = _get_entry(config, role_id)
    if conflicting_role == role_id:
        raise ValidationError("A role cannot conflict with itself.")
    if conflicting_role in entry.conflicting_roles:
        raise ValidationError("This role is already marked as conflicting.")
    entry.conflicting_roles.append(conflicting_role)


def remove_conflict(
    config: RoleMenuConfig, role_id: str, conflicting_role: str
) -> None:
    entry = _get_entry(config, role_id)
    if conflicting_role not in entry.conflicting_roles:
        raise ValidationError("This role is not marked as conflicting.")
    entry.conflicting_roles.remove(conflicting_role)


def update_appearance(
    config: RoleMenuConfig,
    title: str | None = None,
    description: str | None = None,
    color: str | None = None,
) -> list[str]:
    """Update the embed title, description and colour.

    Returns:
        Names of the fields that changed.
    """
    changes = []
    if color is not None and not is_hex_color(color):
        raise ValidationError(
            "Invalid color format. Please use hex format like #ff0000"
        )

    if title:
        _validate_text("title", title, constants.EMBED_TITLE_LIMIT)
        config.title = title
        changes.append("title")
    if description:
        _validate_text("description", description, constants.EMBED_DESCRIPTION_LIMIT)
        config.description = description
        changes.append("description")
    if color:
        config.color = color
        changes.append("color")

    return changes


def update_settings(
    config: RoleMenuConfig,
    max_roles_per_user: int | None = None,
    allow_role_removal: bool | None = None,
    ephemeral_response: bool | None = None,
    log_channel_id: str | None = None,
) -> list[str]:
    """Update menu settings. A max_roles_per_user of 0 removes the cap.

    Returns:
        Human-readable descriptions of what changed.
    """
    settings = config.settings
    changes = []

    if max_roles_per_user is not None:
        if not 0 <= max_roles_per_user <= constants.MAX_ROLES_PER_USER_CEILING:
            raise ValidationError(
                f"Max roles per user must be between 0 and {constants.MAX_ROLES_PER_USER_CEILING}."
            )
        settings.max_roles_per_user = max_roles_per_user or None
        changes.append(f"max roles per user: {max_roles_per_user or 'unlimited'}")
    if allow_role_removal is not None:
        settings.allow_role_removal = allow_role_removal
        changes.append(
            f"role removal: {'enabled' if allow_role_removal else 'disabled'}"
        )
    if ephemeral_response is not None:
        settings.ephemeral_response = ephemeral_response
        changes.append(
            f"ephemeral responses: {'enabled' if ephemeral_response else 'disabled'}"
        )
    if log_channel_id is not None:
        settings.log_channel_id = log_channel_id
        changes.append(f"log channel: <#{log_channel_id}>")

    return changes


def _role_stat(config: RoleMenuConfig, role_id: str) -> RoleAssignmentStat:
    stat = config.statistics.find_role(role_id)
    if stat is None:
        stat = RoleAssignmentStat(role_id=role_id)
        config.statistics.role_assignments.append(stat)
    return stat


def _record_interaction(config: RoleMenuConfig, user_id: str, now: datetime) -> None:
    config.statistics.total_interactions += 1

    user_stat = config.statistics.find_user(user_id)
    if user_stat is None:
        user_stat = UserStat(user_id=user_id)
        config.statistics.unique_users.append(user_stat)
    user_stat.interaction_count += 1
    user_stat.last_interaction_at = now


def record_assignment(
    config: RoleMenuConfig, role_id: str, user_id: str, now: datetime
) -> None:
    """Account for a successful grant of role_id to user_id."""
    entry = config.find_role(role_id)
    if entry is not None:
        entry.current_assignments += 1
    _role_stat(config, role_id).assigned_count += 1
    _record_interaction(config, user_id, now)


def record_removal(
    config: RoleMenuConfig, role_id: str, user_id: str, now: datetime
) -> None:
    """Account for a successful revoke of role_id from user_id."""
    entry = config.find_role(role_id)
    if entry is not None and entry.current_assignments > 0:
        entry.current_assignments -= 1
    _role_stat(config, role_id).removed_count += 1
    _record_interaction(config, user_id, now)


def reset_statistics(config: RoleMenuConfig) -> None:
    config.statistics = MenuStatistics()
    for entry in config.roles:
        entry.current_assignments = 0


def remove_stale_roles(config: RoleMenuConfig, existing_role_ids: set[str]) -> int:
    """Drop entries whose role no longer exists on the platform.

    Returns:
        Number of entries removed.
    """
    valid = [r for r in config.roles if r.role_id in existing_role_ids]
    removed = len(config.roles) - len(valid)
    config.roles = valid
    return removed


def touch(config: RoleMenuConfig, user_id: str, username: str, now: datetime) -> None:
    """Record who last modified the menu."""
    config.last_modified_by = Attribution(
        user_id=user_id, username=username, timestamp=now
    )
