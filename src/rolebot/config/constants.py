"""Constants for the role bot.

These are true constants that never change - Discord API limits, application defaults, etc.
"""

from typing import Final

# Discord API limits
# See https://discord.com/developers/docs/resources/channel#embed-limits
EMBED_TITLE_LIMIT: Final = 256
EMBED_DESCRIPTION_LIMIT: Final = 4096
EMBED_FIELD_VALUE_LIMIT: Final = 1024
BUTTON_LABEL_LIMIT: Final = 80
BUTTONS_PER_ROW: Final = 5
MAX_BUTTON_ROWS: Final = 5
MAX_ROLES_PER_MENU: Final = BUTTONS_PER_ROW * MAX_BUTTON_ROWS

# Self-role limits
ROLE_DESCRIPTION_LIMIT: Final = 100
MAX_ROLES_PER_USER_CEILING: Final = 25
BULK_ASSIGN_MAX_ERRORS_SHOWN: Final = 10
MOST_POPULAR_ROLES_SHOWN: Final = 5

# Embed colors
DEFAULT_MENU_COLOR: Final = "#0099ff"
INFO_EMBED_COLOR: Final = 0x0099FF
SUCCESS_EMBED_COLOR: Final = 0x00FF00
ROLE_ASSIGNED_LOG_COLOR: Final = 0x00FF00
ROLE_REMOVED_LOG_COLOR: Final = 0xFF6B6B

# Component custom ids
TOGGLE_CUSTOM_ID_PREFIX: Final = "selfrole_toggle_"

# Storage
MONGODB_COLLECTION: Final = "selfroles"
