"""Self-role menu management commands."""

import logging
from typing import Optional

from discord import Embed, Interaction, Permissions, Role, TextChannel, app_commands
from discord.app_commands import Choice, Range

from rolebot import discord_utils
from rolebot.bot import RoleBot
from rolebot.config import constants
from rolebot.decorators import guild_only, has_manage_guild
from rolebot.selfrole import ButtonStyle, RoleEntry, SelfRoleError

logger = logging.getLogger(__name__)

STYLE_CHOICES = [
    Choice(name="Primary (Blue)", value=ButtonStyle.PRIMARY.value),
    Choice(name="Secondary (Gray)", value=ButtonStyle.SECONDARY.value),
    Choice(name="Success (Green)", value=ButtonStyle.SUCCESS.value),
    Choice(name="Danger (Red)", value=ButtonStyle.DANGER.value),
]


def register_commands(client: RoleBot) -> None:
    """Register the /selfrole command group."""
    group = app_commands.Group(
        name="selfrole",
        description="Manage self-assignable roles with buttons",
        guild_only=True,
        default_permissions=Permissions(manage_guild=True),
    )

    @group.command(name="create", description="Create a new self-role message")
    @app_commands.describe(
        channel="Channel to send the self-role message",
        title="Title for the self-role embed",
        description="Description for the self-role embed",
        color="Hex color for the embed (e.g., #ff0000)",
    )
    @has_manage_guild()
    @guild_only()
    async def create(
        interaction: Interaction,
        channel: TextChannel,
        title: Range[str, 1, constants.EMBED_TITLE_LIMIT],
        description: Range[str, 1, constants.EMBED_DESCRIPTION_LIMIT],
        color: str | None = None,
    ) -> None:
        assert interaction.guild is not None  # Guaranteed by @guild_only()
        logger.info(
            f"User {interaction.user} issued /selfrole create in guild {interaction.guild_id}"
        )

        if not discord_utils.bot_can_post(interaction.guild, channel):
            await interaction.response.send_message(
                "❌ I don't have permission to send messages in that channel.",
                ephemeral=True,
            )
            return

        await interaction.response.defer(ephemeral=True)
        try:
            config = await client.manager.create_menu(
                guild_id=str(interaction.guild.id),
                channel_id=str(channel.id),
                title=title,
                description=description,
                actor=discord_utils.attribution_for(interaction),
                color=color,
            )
        except SelfRoleError as e:
            await discord_utils.send_error(interaction, e)
            return

        await interaction.followup.send(
            f"✅ Self-role message created successfully in {channel.mention}!\n\n"
            f"**Message ID:** `{config.message_id}`\n"
            "Use `/selfrole add-role` to add roles to this message.",
            ephemeral=True,
        )

    @group.command(
        name="add-role", description="Add a role to an existing self-role message"
    )
    @app_commands.rename(message_id="message-id")
    @app_commands.describe(
        message_id="ID of the self-role message",
        role="Role to add",
        label="Button label for this role",
        emoji="Emoji for the button (optional)",
        style="Button style",
        description="Role description (shown in embed)",
        position="Button position (0 = first)",
    )
    @app_commands.choices(style=STYLE_CHOICES)
    @has_manage_guild()
    @guild_only()
    async def add_role(
        interaction: Interaction,
        message_id: str,
        role: Role,
        label: Range[str, 1, constants.BUTTON_LABEL_LIMIT],
        emoji: str | None = None,
        style: Choice[str] | None = None,
        description: Optional[Range[str, 1, constants.ROLE_DESCRIPTION_LIMIT]] = None,
        position: Range[int, 0, constants.MAX_ROLES_PER_MENU - 1] = 0,
    ) -> None:
        assert interaction.guild is not None  # Guaranteed by @guild_only()
        logger.info(
            f"User {interaction.user} issued /selfrole add-role {role.id} "
            f"in guild {interaction.guild_id}"
        )

        problem = discord_utils.role_assignable_error(interaction.guild, role)
        if problem:
            await interaction.response.send_message(f"❌ {problem}", ephemeral=True)
            return

        await interaction.response.defer(ephemeral=True)
        entry = RoleEntry(
            role_id=str(role.id),
            role_name=role.name,
            label=label,
            emoji=emoji,
            description=description,
            style=ButtonStyle.parse(style.value if style else None),
            position=position,
        )
        try:
            await client.manager.add_role(
                str(interaction.guild.id),
                message_id,
                entry,
                discord_utils.attribution_for(interaction),
            )
        except SelfRoleError as e:
            await discord_utils.send_error(interaction, e)
            return

        await interaction.followup.send(
            f"✅ Successfully added **{role.name}** to the self-role message!",
            ephemeral=True,
        )

    @group.command(
        name="remove-role", description="Remove a role from a self-role message"
    )
    @app_commands.rename(message_id="message-id")
    @app_commands.describe(
        message_id="ID of the self-role message", role="Role to remove"
    )
    @has_manage_guild()
    @guild_only()
    async def remove_role(interaction: Interaction, message_id: str, role: Role) -> None:
        assert interaction.guild_id is not None  # Guaranteed by @guild_only()
        logger.info(
            f"User {interaction.user} issued /selfrole remove-role {role.id} "
            f"in guild {interaction.guild_id}"
        )
        await interaction.response.defer(ephemeral=True)

        try:
            await client.manager.remove_role(
                str(interaction.guild_id),
                message_id,
                str(role.id),
                discord_utils.attribution_for(interaction),
            )
        except SelfRoleError as e:
            await discord_utils.send_error(interaction, e)
            return

        await interaction.followup.send(
            f"✅ Successfully removed **{role.name}** from the self-role message!",
            ephemeral=True,
        )

    @group.command(name="edit", description="Edit an existing self-role message")
    @app_commands.rename(message_id="message-id")
    @app_commands.describe(
        message_id="ID of the self-role message",
        title="New title for the embed",
        description="New description for the embed",
        color="New hex color for the embed",
    )
    @has_manage_guild()
    @guild_only()
    async def edit(
        interaction: Interaction,
        message_id: str,
        title: Optional[Range[str, 1, constants.EMBED_TITLE_LIMIT]] = None,
        description: Optional[Range[str, 1, constants.EMBED_DESCRIPTION_LIMIT]] = None,
        color: str | None = None,
    ) -> None:
        assert interaction.guild_id is not None  # Guaranteed by @guild_only()
        logger.info(
            f"User {interaction.user} issued /selfrole edit {message_id} "
            f"in guild {interaction.guild_id}"
        )
        await interaction.response.defer(ephemeral=True)

        try:
            changes = await client.manager.edit_menu(
                str(interaction.guild_id),
                message_id,
                discord_utils.attribution_for(interaction),
                title=title,
                description=description,
                color=color,
            )
        except SelfRoleError as e:
            await discord_utils.send_error(interaction, e)
            return

        await interaction.followup.send(
            f"✅ Successfully updated: {', '.join(changes)}", ephemeral=True
        )

    @group.command(name="settings", description="Configure self-role message settings")
    @app_commands.rename(
        message_id="message-id",
        max_roles_per_user="max-roles-per-user",
        allow_role_removal="allow-role-removal",
        ephemeral_response="ephemeral-response",
        log_channel="log-channel",
    )
    @app_commands.describe(
        message_id="ID of the self-role message",
        max_roles_per_user="Maximum roles a user can have from this message (0 = unlimited)",
        allow_role_removal="Allow users to remove roles they have",
        ephemeral_response="Make role assignment responses only visible to the user",
        log_channel="Channel to log role assignments/removals",
    )
    @has_manage_guild()
    @guild_only()
    async def settings(
        interaction: Interaction,
        message_id: str,
        max_roles_per_user: Optional[
            Range[int, 0, constants.MAX_ROLES_PER_USER_CEILING]
        ] = None,
        allow_role_removal: bool | None = None,
        ephemeral_response: bool | None = None,
        log_channel: TextChannel | None = None,
    ) -> None:
        assert interaction.guild is not None  # Guaranteed by @guild_only()
        logger.info(
            f"User {interaction.user} issued /selfrole settings {message_id} "
            f"in guild {interaction.guild_id}"
        )

        if log_channel is not None and not discord_utils.bot_can_post(
            interaction.guild, log_channel
        ):
            await interaction.response.send_message(
                "❌ I don't have permission to send messages in that log channel.",
                ephemeral=True,
            )
            return

        await interaction.response.defer(ephemeral=True)

        try:
            changes = await client.manager.update_settings(
                str(interaction.guild_id),
                message_id,
                discord_utils.attribution_for(interaction),
                max_roles_per_user=max_roles_per_user,
                allow_role_removal=allow_role_removal,
                ephemeral_response=ephemeral_response,
                log_channel_id=str(log_channel.id) if log_channel else None,
            )
        except SelfRoleError as e:
            await discord_utils.send_error(interaction, e)
            return

        change_list = "\n".join(f"• {c}" for c in changes)
        await interaction.followup.send(
            f"✅ Successfully updated settings:\n{change_list}", ephemeral=True
        )

    @group.command(name="list", description="List all self-role messages in this server")
    @has_manage_guild()
    @guild_only()
    async def list_menus(interaction: Interaction) -> None:
        assert interaction.guild is not None  # Guaranteed by @guild_only()
        await interaction.response.defer(ephemeral=True)

        try:
            menus = await client.manager.list_menus(str(interaction.guild.id))
        except SelfRoleError as e:
            await discord_utils.send_error(interaction, e)
            return

        if not menus:
            await interaction.followup.send(
                "📝 No self-role messages found in this server.", ephemeral=True
            )
            return

        embed = Embed(
            title="📋 Self-Role Messages",
            description=f"Found {len(menus)} self-role message(s)",
            color=constants.INFO_EMBED_COLOR,
        )
        # Embeds hold at most 25 fields
        for index, config in enumerate(menus[:25], start=1):
            channel = interaction.guild.get_channel(int(config.channel_id))
            channel_name = f"#{channel.name}" if channel else "Unknown Channel"
            value = (
                f"**ID:** `{config.message_id}`\n"
                f"**Channel:** {channel_name}\n"
                f"**Roles:** {len(config.roles)}"
            )
            if config.created_at:
                value += f"\n**Created:** <t:{int(config.created_at.timestamp())}:R>"
            embed.add_field(
                name=f"{index}. {config.title}"[: constants.EMBED_TITLE_LIMIT],
                value=value,
                inline=True,
            )

        await interaction.followup.send(embed=embed, ephemeral=True)

    @group.command(name="delete", description="Delete a self-role message")
    @app_commands.rename(message_id="message-id")
    @app_commands.describe(message_id="ID of the self-role message to delete")
    @has_manage_guild()
    @guild_only()
    async def delete(interaction: Interaction, message_id: str) -> None:
        assert interaction.guild_id is not None  # Guaranteed by @guild_only()
        logger.info(
            f"User {interaction.user} issued /selfrole delete {message_id} "
            f"in guild {interaction.guild_id}"
        )
        await interaction.response.defer(ephemeral=True)

        try:
            await client.manager.delete_menu(str(interaction.guild_id), message_id)
        except SelfRoleError as e:
            await discord_utils.send_error(interaction, e)
            return

        await interaction.followup.send(
            "✅ Self-role message deleted successfully!", ephemeral=True
        )

    @group.command(name="stats", description="View self-role statistics")
    @app_commands.rename(message_id="message-id")
    @app_commands.describe(
        message_id="ID of specific message (optional, shows all if not provided)"
    )
    @has_manage_guild()
    @guild_only()
    async def stats(interaction: Interaction, message_id: str | None = None) -> None:
        assert interaction.guild is not None  # Guaranteed by @guild_only()
        await interaction.response.defer(ephemeral=True)

        try:
            stats = await client.manager.guild_stats(
                str(interaction.guild.id), message_id
            )
        except SelfRoleError as e:
            await discord_utils.send_error(interaction, e)
            return

        if stats is None:
            await interaction.followup.send("📊 No statistics available.", ephemeral=True)
            return

        embed = Embed(title="📊 Self-Role Statistics", color=constants.INFO_EMBED_COLOR)
        if message_id:
            embed.description = f"Statistics for message ID: `{message_id}`"
        else:
            embed.description = "Server-wide self-role statistics"
            embed.add_field(name="📝 Total Messages", value=str(stats.total_menus))
            embed.add_field(name="🎭 Total Roles", value=str(stats.total_roles))
        embed.add_field(name="🔄 Total Interactions", value=str(stats.total_interactions))
        embed.add_field(name="👥 Unique Users", value=str(stats.unique_users))

        popular = stats.most_popular(constants.MOST_POPULAR_ROLES_SHOWN)
        if popular:
            lines = []
            for stat in popular:
                role = interaction.guild.get_role(int(stat.role_id))
                role_name = role.name if role else "Unknown Role"
                lines.append(
                    f"{role_name}: {stat.assigned_count} assigned, "
                    f"{stat.removed_count} removed"
                )
            embed.add_field(
                name="🏆 Most Popular Roles", value="\n".join(lines), inline=False
            )

        await interaction.followup.send(embed=embed, ephemeral=True)

    @group.command(
        name="cleanup",
        description="Remove invalid/deleted roles from all self-role messages",
    )
    @has_manage_guild()
    @guild_only()
    async def cleanup(interaction: Interaction) -> None:
        assert interaction.guild_id is not None  # Guaranteed by @guild_only()
        logger.info(
            f"User {interaction.user} issued /selfrole cleanup in guild {interaction.guild_id}"
        )
        await interaction.response.defer(ephemeral=True)

        try:
            cleaned_count = await client.manager.cleanup_stale_roles(
                str(interaction.guild_id)
            )
        except SelfRoleError as e:
            await discord_utils.send_error(interaction, e)
            return

        await interaction.followup.send(
            f"✅ Cleanup completed! Removed {cleaned_count} invalid role(s) "
            "from self-role messages.",
            ephemeral=True,
        )

    client.tree.add_command(group)
