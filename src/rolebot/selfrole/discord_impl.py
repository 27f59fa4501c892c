"""Discord implementations of the self-role protocols."""

import logging
from dataclasses import replace

import discord
from discord import (
    Client,
    Embed,
    Forbidden,
    Guild,
    HTTPException,
    Member,
    NotFound,
    PartialEmoji,
    TextChannel,
)

from rolebot import discord_utils
from rolebot.config import constants
from rolebot.selfrole.errors import PlatformError, RoleMissingError
from rolebot.selfrole.models import ButtonStyle, RoleMenuConfig
from rolebot.selfrole.protocols import RoleAction

logger = logging.getLogger(__name__)

_BUTTON_STYLES = {
    ButtonStyle.PRIMARY: discord.ButtonStyle.primary,
    ButtonStyle.SECONDARY: discord.ButtonStyle.secondary,
    ButtonStyle.SUCCESS: discord.ButtonStyle.success,
    ButtonStyle.DANGER: discord.ButtonStyle.danger,
}


class DiscordRolePlatform:
    """Discord implementation of RolePlatform protocol."""

    def __init__(self, client: Client):
        self.client = client

    def _get_guild(self, guild_id: str) -> Guild:
        guild = self.client.get_guild(int(guild_id))
        if guild is None:
            raise PlatformError(f"Guild {guild_id} is not available")
        return guild

    async def _get_member(self, guild: Guild, user_id: str) -> Member | None:
        if not user_id.isdigit():
            return None

        member = guild.get_member(int(user_id))
        if member is not None:
            return member

        try:
            return await guild.fetch_member(int(user_id))
        except NotFound:
            return None
        except HTTPException as e:
            raise PlatformError(f"Could not fetch member {user_id}: {e}") from e

    async def _change_role(
        self, guild_id: str, user_id: str, role_id: str, reason: str, add: bool
    ) -> None:
        guild = self._get_guild(guild_id)
        role = guild.get_role(int(role_id))
        if role is None:
            raise RoleMissingError(f"Role {role_id} no longer exists")

        member = await self._get_member(guild, user_id)
        if member is None:
            raise PlatformError(f"Member {user_id} is not in this server")

        try:
            if add:
                await member.add_roles(role, reason=reason)
            else:
                await member.remove_roles(role, reason=reason)
        except Forbidden as e:
            raise PlatformError(f"Missing permissions to manage {role.name}") from e
        except NotFound as e:
            raise RoleMissingError(f"Role {role_id} no longer exists") from e
        except HTTPException as e:
            raise PlatformError(str(e)) from e

    async def grant_role(
        self, guild_id: str, user_id: str, role_id: str, reason: str
    ) -> None:
        await self._change_role(guild_id, user_id, role_id, reason, add=True)

    async def revoke_role(
        self, guild_id: str, user_id: str, role_id: str, reason: str
    ) -> None:
        await self._change_role(guild_id, user_id, role_id, reason, add=False)

    async def role_exists(self, guild_id: str, role_id: str) -> bool:
        guild = self.client.get_guild(int(guild_id))
        return guild is not None and guild.get_role(int(role_id)) is not None

    async def existing_role_ids(self, guild_id: str) -> set[str] | None:
        guild = self.client.get_guild(int(guild_id))
        if guild is None:
            return None
        return {str(role.id) for role in guild.roles}

    async def member_role_ids(self, guild_id: str, user_id: str) -> set[str] | None:
        member = await self._get_member(self._get_guild(guild_id), user_id)
        if member is None:
            return None
        return {str(role.id) for role in member.roles}


def build_menu_embed(config: RoleMenuConfig) -> Embed:
    """Build the embed shown on a role menu message."""
    embed = Embed(
        title=config.title,
        description=config.description,
        color=discord_utils.parse_hex_color(config.color),
        timestamp=discord.utils.utcnow(),
    )

    if config.roles:
        lines = []
        for entry in config.roles:
            line = f"{entry.emoji or '•'} **{entry.label}**"
            if entry.description:
                line += f" - {entry.description}"
            if entry.max_assignments:
                line += f" ({entry.current_assignments}/{entry.max_assignments})"
            lines.append(line)

        role_list = "\n".join(lines)
        if len(role_list) > constants.EMBED_FIELD_VALUE_LIMIT:
            role_list = role_list[: constants.EMBED_FIELD_VALUE_LIMIT - 1] + "…"
        embed.add_field(name="📋 Available Roles", value=role_list, inline=False)

        settings_text = []
        if config.settings.max_roles_per_user:
            settings_text.append(
                f"Max roles per user: {config.settings.max_roles_per_user}"
            )
        if not config.settings.allow_role_removal:
            settings_text.append("Role removal disabled")
        if settings_text:
            embed.add_field(
                name="⚙️ Settings", value="\n".join(settings_text), inline=True
            )

    embed.set_footer(text="Click the buttons below to toggle roles • Self-Role System")
    return embed


def build_menu_view(config: RoleMenuConfig) -> discord.ui.View | None:
    """Build one toggle button per role, five to a row.

    Returns:
        The view, or None if the menu has no roles yet.
    """
    if not config.roles:
        return None

    # Buttons are routed through on_interaction, so the view never times out
    view = discord.ui.View(timeout=None)
    # Full roles stay clickable so their holders can still remove them
    for i, entry in enumerate(config.roles[: constants.MAX_ROLES_PER_MENU]):
        view.add_item(
            discord.ui.Button(
                style=_BUTTON_STYLES[entry.style],
                label=entry.label,
                custom_id=discord_utils.build_toggle_custom_id(
                    config.message_id, entry.role_id
                ),
                emoji=PartialEmoji.from_str(entry.emoji) if entry.emoji else None,
                row=i // constants.BUTTONS_PER_ROW,
            )
        )
    return view


class DiscordMenuRenderer:
    """Discord implementation of MenuRenderer protocol."""

    def __init__(self, client: Client):
        self.client = client

    async def _get_channel(self, channel_id: str) -> TextChannel:
        channel = self.client.get_channel(int(channel_id))
        if channel is None:
            try:
                channel = await self.client.fetch_channel(int(channel_id))
            except HTTPException as e:
                raise PlatformError(f"Channel {channel_id} not found: {e}") from e

        if not isinstance(channel, TextChannel):
            raise PlatformError(f"Channel {channel_id} is not a text channel")
        return channel

    async def post(self, config: RoleMenuConfig) -> str:
        channel = await self._get_channel(config.channel_id)
        try:
            message = await channel.send(embed=build_menu_embed(config))
            if config.roles:
                # Button custom IDs need the ID of the message they are on
                posted = replace(config, message_id=str(message.id))
                await message.edit(view=build_menu_view(posted))
        except HTTPException as e:
            raise PlatformError(f"Could not post self-role message: {e}") from e

        return str(message.id)

    async def refresh(self, config: RoleMenuConfig) -> None:
        channel = await self._get_channel(config.channel_id)
        message = channel.get_partial_message(int(config.message_id))
        try:
            await message.edit(
                embed=build_menu_embed(config), view=build_menu_view(config)
            )
        except HTTPException as e:
            raise PlatformError(
                f"Could not update self-role message {config.message_id}: {e}"
            ) from e

    async def delete(self, config: RoleMenuConfig) -> bool:
        channel = await self._get_channel(config.channel_id)
        message = channel.get_partial_message(int(config.message_id))
        try:
            await message.delete()
        except NotFound:
            return False
        except HTTPException as e:
            raise PlatformError(
                f"Could not delete self-role message {config.message_id}: {e}"
            ) from e
        return True


class DiscordActionLog:
    """Discord implementation of ActionLog protocol.

    Posts an embed to the menu's log channel. Failures are logged and never
    reach the member who toggled the role.
    """

    def __init__(self, client: Client):
        self.client = client

    async def role_changed(
        self,
        config: RoleMenuConfig,
        user_id: str,
        role_id: str,
        action: RoleAction,
    ) -> None:
        if not config.settings.log_channel_id:
            return

        channel = self.client.get_channel(int(config.settings.log_channel_id))
        if not isinstance(channel, TextChannel):
            logger.warning(
                f"Log channel {config.settings.log_channel_id} of menu "
                f"{config.message_id} is not available"
            )
            return

        embed = Embed(
            title=f"Self-Role {action.capitalize()}",
            color=(
                constants.ROLE_ASSIGNED_LOG_COLOR
                if action == "assigned"
                else constants.ROLE_REMOVED_LOG_COLOR
            ),
            timestamp=discord.utils.utcnow(),
        )
        embed.add_field(name="User", value=f"<@{user_id}> ({user_id})", inline=True)
        embed.add_field(name="Role", value=f"<@&{role_id}> ({role_id})", inline=True)
        embed.add_field(name="Action", value=action, inline=True)
        embed.add_field(name="Message ID", value=config.message_id, inline=True)

        member = channel.guild.get_member(int(user_id))
        if member is not None:
            embed.set_thumbnail(url=member.display_avatar.url)

        try:
            await channel.send(embed=embed)
        except HTTPException as e:
            logger.error(f"Error logging self-role action: {e}")
