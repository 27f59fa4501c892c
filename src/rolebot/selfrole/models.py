"""Data models for self-role menus.

The models are plain dataclasses. All mutation rules live in
``rolebot.selfrole.menu`` so the stored counters can't drift apart.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any

from rolebot.config import constants


class ButtonStyle(str, Enum):
    """Button colour of a role entry, stored by name."""

    PRIMARY = "Primary"
    SECONDARY = "Secondary"
    SUCCESS = "Success"
    DANGER = "Danger"

    @classmethod
    def parse(cls, value: str | None) -> "ButtonStyle":
        """Return the style for a stored value, falling back to PRIMARY."""
        try:
            return cls(value)
        except ValueError:
            return cls.PRIMARY


@dataclass
class RoleEntry:
    """A single role offered by a menu."""

    role_id: str
    role_name: str
    label: str
    emoji: str | None = None
    description: str | None = None
    style: ButtonStyle = ButtonStyle.PRIMARY
    position: int = 0
    max_assignments: int | None = None  # None means unlimited
    current_assignments: int = 0
    required_role: str | None = None
    conflicting_roles: list[str] = field(default_factory=list)

    @property
    def is_full(self) -> bool:
        """Whether the role has reached its assignment limit."""
        # A stored cap of 0 is treated as unlimited
        return bool(self.max_assignments) and (
            self.current_assignments >= self.max_assignments  # type: ignore[operator]
        )


@dataclass
class MenuSettings:
    max_roles_per_user: int | None = None  # None means unlimited
    allow_role_removal: bool = True
    ephemeral_response: bool = True
    log_channel_id: str | None = None


@dataclass
class UserStat:
    user_id: str
    interaction_count: int = 0
    last_interaction_at: datetime | None = None


@dataclass
class RoleAssignmentStat:
    role_id: str
    assigned_count: int = 0
    removed_count: int = 0


@dataclass
class MenuStatistics:
    total_interactions: int = 0
    unique_users: list[UserStat] = field(default_factory=list)
    role_assignments: list[RoleAssignmentStat] = field(default_factory=list)

    def find_user(self, user_id: str) -> UserStat | None:
        return next((u for u in self.unique_users if u.user_id == user_id), None)

    def find_role(self, role_id: str) -> RoleAssignmentStat | None:
        return next((r for r in self.role_assignments if r.role_id == role_id), None)


@dataclass
class Attribution:
    """Who performed an action, and when."""

    user_id: str
    username: str
    timestamp: datetime | None = None


@dataclass
class RoleMenuConfig:
    """One posted role-menu message and everything configured on it."""

    guild_id: str
    message_id: str
    channel_id: str
    title: str
    description: str
    color: str = constants.DEFAULT_MENU_COLOR
    roles: list[RoleEntry] = field(default_factory=list)
    settings: MenuSettings = field(default_factory=MenuSettings)
    statistics: MenuStatistics = field(default_factory=MenuStatistics)
    created_by: Attribution | None = None
    last_modified_by: Attribution | None = None
    created_at: datetime | None = None

    def find_role(self, role_id: str) -> RoleEntry | None:
        """Get the entry for a role, if this menu offers it."""
        return next((r for r in self.roles if r.role_id == role_id), None)

    def role_ids(self) -> set[str]:
        """IDs of all roles offered by this menu."""
        return {r.role_id for r in self.roles}

    def to_document(self) -> dict[str, Any]:
        """Convert to the stored document shape."""
        return {
            "guildId": self.guild_id,
            "messageId": self.message_id,
            "channelId": self.channel_id,
            "title": self.title,
            "description": self.description,
            "color": self.color,
            "roles": [
                {
                    "roleId": r.role_id,
                    "roleName": r.role_name,
                    "label": r.label,
                    "emoji": r.emoji,
                    "description": r.description,
                    "style": r.style.value,
                    "position": r.position,
                    "maxAssignments": r.max_assignments,
                    "currentAssignments": r.current_assignments,
                    "requiredRole": r.required_role,
                    "conflictingRoles": list(r.conflicting_roles),
                }
                for r in self.roles
            ],
            "settings": {
                "maxRolesPerUser": self.settings.max_roles_per_user,
                "allowRoleRemoval": self.settings.allow_role_removal,
                "ephemeralResponse": self.settings.ephemeral_response,
                "logChannel": self.settings.log_channel_id,
            },
            "statistics": {
                "totalInteractions": self.statistics.total_interactions,
                "uniqueUsers": [
                    {
                        "userId": u.user_id,
                        "interactions": u.interaction_count,
                        "lastInteraction": u.last_interaction_at,
                    }
                    for u in self.statistics.unique_users
                ],
                "roleAssignments": [
                    {
                        "roleId": r.role_id,
                        "assigned": r.assigned_count,
                        "removed": r.removed_count,
                    }
                    for r in self.statistics.role_assignments
                ],
            },
            "createdBy": _attribution_to_document(self.created_by),
            "lastModifiedBy": _attribution_to_document(self.last_modified_by),
            "createdAt": self.created_at,
        }

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "RoleMenuConfig":
        """Build a config from a stored document.

        Missing optional fields take their defaults so older documents load.
        """
        settings_doc = doc.get("settings") or {}
        stats_doc = doc.get("statistics") or {}

        return cls(
            guild_id=str(doc["guildId"]),
            message_id=str(doc["messageId"]),
            channel_id=str(doc["channelId"]),
            title=doc["title"],
            description=doc["description"],
            color=doc.get("color") or constants.DEFAULT_MENU_COLOR,
            roles=[
                RoleEntry(
                    role_id=str(r["roleId"]),
                    role_name=r.get("roleName") or "",
                    label=r["label"],
                    emoji=r.get("emoji"),
                    description=r.get("description"),
                    style=ButtonStyle.parse(r.get("style")),
                    position=r.get("position") or 0,
                    max_assignments=r.get("maxAssignments"),
                    current_assignments=r.get("currentAssignments") or 0,
                    required_role=r.get("requiredRole"),
                    conflicting_roles=[str(c) for c in r.get("conflictingRoles", [])],
                )
                for r in doc.get("roles", [])
            ],
            settings=MenuSettings(
                max_roles_per_user=settings_doc.get("maxRolesPerUser"),
                allow_role_removal=settings_doc.get("allowRoleRemoval", True),
                ephemeral_response=settings_doc.get("ephemeralResponse", True),
                log_channel_id=settings_doc.get("logChannel"),
            ),
            statistics=MenuStatistics(
                total_interactions=stats_doc.get("totalInteractions", 0),
                unique_users=[
                    UserStat(
                        user_id=str(u["userId"]),
                        interaction_count=u.get("interactions", 0),
                        last_interaction_at=parse_datetime(u.get("lastInteraction")),
                    )
                    for u in stats_doc.get("uniqueUsers", [])
                ],
                role_assignments=[
                    RoleAssignmentStat(
                        role_id=str(r["roleId"]),
                        assigned_count=r.get("assigned", 0),
                        removed_count=r.get("removed", 0),
                    )
                    for r in stats_doc.get("roleAssignments", [])
                ],
            ),
            created_by=_attribution_from_document(doc.get("createdBy")),
            last_modified_by=_attribution_from_document(doc.get("lastModifiedBy")),
            created_at=parse_datetime(doc.get("createdAt")),
        )


def parse_datetime(value: Any) -> datetime | None:
    """Accept a BSON datetime or an ISO 8601 string from the JSON store."""
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def json_default(value: Any) -> Any:
    """json.dumps hook writing datetimes as ISO 8601 strings."""
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _attribution_to_document(attribution: Attribution | None) -> dict | None:
    if attribution is None:
        return None
    return {
        "userId": attribution.user_id,
        "username": attribution.username,
        "timestamp": attribution.timestamp,
    }


def _attribution_from_document(doc: dict | None) -> Attribution | None:
    if not doc:
        return None
    return Attribution(
        user_id=str(doc["userId"]),
        username=doc.get("username", ""),
        timestamp=parse_datetime(doc.get("timestamp")),
    )


class OutcomeKind(Enum):
    """Result of a single toggle request."""

    ASSIGNED = auto()
    REMOVED = auto()
    DENIED_ASSIGN = auto()
    DENIED_REMOVE = auto()
    ROLE_MISSING_ON_PLATFORM = auto()
    PLATFORM_FAILED = auto()  # Discord rejected the grant/revoke
    PERSISTENCE_FAILED = auto()  # Role changed, document write failed
    MENU_NOT_FOUND = auto()


@dataclass(frozen=True)
class ToggleOutcome:
    kind: OutcomeKind
    reason: str | None = None
    # Failures are always shown only to the member who pressed the button
    ephemeral: bool = True

    @property
    def succeeded(self) -> bool:
        return self.kind in (OutcomeKind.ASSIGNED, OutcomeKind.REMOVED)


@dataclass(frozen=True)
class Eligibility:
    allowed: bool
    reason: str | None = None


@dataclass
class GuildRoleStats:
    """Statistics aggregated over one or more menus of a guild."""

    total_menus: int
    total_roles: int
    total_interactions: int
    unique_users: int
    role_totals: dict[str, RoleAssignmentStat]

    def most_popular(self, count: int) -> list[RoleAssignmentStat]:
        """Roles with the most assignments, highest first."""
        return sorted(
            self.role_totals.values(), key=lambda r: r.assigned_count, reverse=True
        )[:count]


@dataclass
class BulkAssignResult:
    success: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)
