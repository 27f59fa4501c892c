"""Configuration module for the role bot.

This module provides a two-tier configuration system:
- constants: Pure constants that never change (Discord limits, colors, etc.)
- settings: Runtime settings loaded from environment variables
"""

# Re-export all constants
from rolebot.config.constants import (
    BULK_ASSIGN_MAX_ERRORS_SHOWN,
    BUTTON_LABEL_LIMIT,
    BUTTONS_PER_ROW,
    DEFAULT_MENU_COLOR,
    EMBED_DESCRIPTION_LIMIT,
    EMBED_FIELD_VALUE_LIMIT,
    EMBED_TITLE_LIMIT,
    INFO_EMBED_COLOR,
    MAX_BUTTON_ROWS,
    MAX_ROLES_PER_MENU,
    MAX_ROLES_PER_USER_CEILING,
    MONGODB_COLLECTION,
    MOST_POPULAR_ROLES_SHOWN,
    ROLE_ASSIGNED_LOG_COLOR,
    ROLE_DESCRIPTION_LIMIT,
    ROLE_REMOVED_LOG_COLOR,
    SUCCESS_EMBED_COLOR,
    TOGGLE_CUSTOM_ID_PREFIX,
)

# Re-export settings class
from rolebot.config.settings import RoleBotSettings

__all__ = [
    # Constants
    "BULK_ASSIGN_MAX_ERRORS_SHOWN",
    "BUTTON_LABEL_LIMIT",
    "BUTTONS_PER_ROW",
    "DEFAULT_MENU_COLOR",
    "EMBED_DESCRIPTION_LIMIT",
    "EMBED_FIELD_VALUE_LIMIT",
    "EMBED_TITLE_LIMIT",
    "INFO_EMBED_COLOR",
    "MAX_BUTTON_ROWS",
    "MAX_ROLES_PER_MENU",
    "MAX_ROLES_PER_USER_CEILING",
    "MONGODB_COLLECTION",
    "MOST_POPULAR_ROLES_SHOWN",
    "ROLE_ASSIGNED_LOG_COLOR",
    "ROLE_DESCRIPTION_LIMIT",
    "ROLE_REMOVED_LOG_COLOR",
    "SUCCESS_EMBED_COLOR",
    "TOGGLE_CUSTOM_ID_PREFIX",
    # Settings class
    "RoleBotSettings",
]
