"""Self-assignable role menus: models, rules and the services that run them."""

from rolebot.selfrole.coordinator import AssignmentCoordinator
from rolebot.selfrole.errors import (
    DuplicateRoleError,
    InvalidPositionError,
    MenuFullError,
    MenuNotFoundError,
    PlatformError,
    RoleMissingError,
    RoleNotInMenuError,
    SelfRoleError,
    StoreError,
    ValidationError,
)
from rolebot.selfrole.manager import RoleMenuManager
from rolebot.selfrole.models import (
    Attribution,
    ButtonStyle,
    MenuSettings,
    OutcomeKind,
    RoleEntry,
    RoleMenuConfig,
    ToggleOutcome,
)
from rolebot.selfrole.protocols import (
    ActionLog,
    MenuRenderer,
    RoleMenuStore,
    RolePlatform,
)
from rolebot.selfrole.stores import JsonRoleMenuStore, MongoRoleMenuStore, create_store

__all__ = [
    "ActionLog",
    "AssignmentCoordinator",
    "Attribution",
    "ButtonStyle",
    "DuplicateRoleError",
    "InvalidPositionError",
    "JsonRoleMenuStore",
    "MenuFullError",
    "MenuNotFoundError",
    "MenuRenderer",
    "MenuSettings",
    "MongoRoleMenuStore",
    "OutcomeKind",
    "PlatformError",
    "RoleEntry",
    "RoleMenuConfig",
    "RoleMenuManager",
    "RoleMenuStore",
    "RoleMissingError",
    "RoleNotInMenuError",
    "RolePlatform",
    "SelfRoleError",
    "StoreError",
    "ToggleOutcome",
    "ValidationError",
    "create_store",
]
