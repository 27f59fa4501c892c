import logging

from discord import Guild, Interaction, Role, TextChannel

from rolebot.config import constants
from rolebot.selfrole.errors import PlatformError, SelfRoleError, StoreError
from rolebot.selfrole.models import Attribution

logger = logging.getLogger(__name__)


def build_toggle_custom_id(message_id: str, role_id: str) -> str:
    """Build the custom_id of a role menu button.

    Format: selfrole_toggle_<message_id>_<role_id>
    """
    return f"{constants.TOGGLE_CUSTOM_ID_PREFIX}{message_id}_{role_id}"


def parse_toggle_custom_id(custom_id: str | None) -> tuple[str, str] | None:
    """Split a role menu button custom_id into (message_id, role_id).

    Returns:
        The two IDs, or None if custom_id does not belong to a role menu button.
    """
    if not custom_id or not custom_id.startswith(constants.TOGGLE_CUSTOM_ID_PREFIX):
        return None

    message_id, sep, role_id = custom_id[
        len(constants.TOGGLE_CUSTOM_ID_PREFIX) :
    ].partition("_")
    if not sep or not message_id.isdigit() or not role_id.isdigit():
        return None
    return message_id, role_id


def parse_hex_color(value: str) -> int:
    """Convert a #rgb or #rrggbb string into an integer colour for embeds."""
    digits = value.lstrip("#")
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    return int(digits, 16)


def bot_can_post(guild: Guild, channel: TextChannel) -> bool:
    """Whether the bot may send embeds in channel."""
    permissions = channel.permissions_for(guild.me)
    return permissions.send_messages and permissions.embed_links


def role_assignable_error(guild: Guild, role: Role) -> str | None:
    """Check that the bot is able to hand out role.

    Returns:
        A message explaining why the role can't be used, or None if it can.
    """
    if role.is_default():
        return "Cannot add @everyone role to self-roles."
    if role.managed:
        return "This role is managed by an integration and cannot be self-assigned."
    if role >= guild.me.top_role:
        return "I cannot manage this role. Make sure my role is higher than the target role."
    return None


def attribution_for(interaction: Interaction) -> Attribution:
    """The invoking user of an interaction, for modification tracking."""
    return Attribution(user_id=str(interaction.user.id), username=interaction.user.name)


async def send_error(interaction: Interaction, error: SelfRoleError) -> None:
    """Report a failed self-role operation to the invoking user.

    Input problems are shown verbatim. Discord and storage failures are
    logged and replaced by a generic message.
    """
    if isinstance(error, (PlatformError, StoreError)):
        logger.error(f"Self-role command failed in guild {interaction.guild_id}: {error}")
        content = "❌ Something went wrong talking to Discord or the database. Please try again later."
    else:
        content = f"❌ {error}"

    if interaction.response.is_done():
        await interaction.followup.send(content, ephemeral=True)
    else:
        await interaction.response.send_message(content, ephemeral=True)


def parse_user_ids(value: str) -> list[str]:
    """Split a comma-separated list of user IDs or mentions into bare IDs.

    Duplicates are dropped, keeping the first occurrence.
    """
    user_ids = []
    for part in value.split(","):
        user_id = part.strip().removeprefix("<@").removeprefix("!").removesuffix(">")
        if user_id and user_id not in user_ids:
            user_ids.append(user_id)
    return user_ids
