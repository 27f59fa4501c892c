"""Advanced self-role commands: limits, conflicts, ordering, bulk and data tools."""

import io
import logging
from typing import Literal, Optional

from discord import File, Interaction, Permissions, Role, app_commands
from discord.app_commands import Range

from rolebot import discord_utils
from rolebot.bot import RoleBot
from rolebot.config import constants
from rolebot.decorators import guild_only, has_administrator, has_manage_guild
from rolebot.selfrole import SelfRoleError

logger = logging.getLogger(__name__)


def format_bulk_result(success: int, failed: int, errors: list[str]) -> str:
    """Summarise a bulk assignment, listing errors only when there are few."""
    message = f"✅ Bulk assignment completed!\n• Success: {success}\n• Failed: {failed}"
    if len(errors) > constants.BULK_ASSIGN_MAX_ERRORS_SHOWN:
        message += f"\n\n**Errors:** {len(errors)} errors (too many to display)"
    elif errors:
        message += "\n\n**Errors:**\n" + "\n".join(f"• {e}" for e in errors)
    return message


def register_commands(client: RoleBot) -> None:
    """Register the /selfrole-advanced command group."""
    group = app_commands.Group(
        name="selfrole-advanced",
        description="Advanced self-role management options",
        guild_only=True,
        default_permissions=Permissions(manage_guild=True),
    )

    @group.command(name="role-limits", description="Set limits for a specific role")
    @app_commands.rename(
        message_id="message-id",
        max_assignments="max-assignments",
        required_role="required-role",
    )
    @app_commands.describe(
        message_id="ID of the self-role message",
        role="Role to configure",
        max_assignments="Maximum number of users who can have this role (0 = unlimited)",
        required_role="Role required to assign this role",
    )
    @has_manage_guild()
    @guild_only()
    async def role_limits(
        interaction: Interaction,
        message_id: str,
        role: Role,
        max_assignments: Optional[Range[int, 0, 10000]] = None,
        required_role: Role | None = None,
    ) -> None:
        assert interaction.guild_id is not None  # Guaranteed by @guild_only()
        logger.info(
            f"User {interaction.user} issued /selfrole-advanced role-limits {role.id} "
            f"in guild {interaction.guild_id}"
        )
        await interaction.response.defer(ephemeral=True)

        try:
            changes = await client.manager.set_role_limits(
                str(interaction.guild_id),
                message_id,
                str(role.id),
                discord_utils.attribution_for(interaction),
                max_assignments=max_assignments,
                required_role=str(required_role.id) if required_role else None,
            )
        except SelfRoleError as e:
            await discord_utils.send_error(interaction, e)
            return

        change_list = "\n".join(f"• {c}" for c in changes)
        await interaction.followup.send(
            f"✅ Successfully updated limits for **{role.name}**:\n{change_list}",
            ephemeral=True,
        )

    @group.command(name="role-conflicts", description="Set conflicting roles for a role")
    @app_commands.rename(message_id="message-id", conflicting_role="conflicting-role")
    @app_commands.describe(
        message_id="ID of the self-role message",
        role="Role to configure",
        conflicting_role="Role that conflicts with the main role",
        action="Action to perform",
    )
    @has_manage_guild()
    @guild_only()
    async def role_conflicts(
        interaction: Interaction,
        message_id: str,
        role: Role,
        conflicting_role: Role,
        action: Literal["add", "remove"],
    ) -> None:
        assert interaction.guild_id is not None  # Guaranteed by @guild_only()
        logger.info(
            f"User {interaction.user} issued /selfrole-advanced role-conflicts {action} "
            f"in guild {interaction.guild_id}"
        )
        await interaction.response.defer(ephemeral=True)

        update = (
            client.manager.add_conflict
            if action == "add"
            else client.manager.remove_conflict
        )
        try:
            await update(
                str(interaction.guild_id),
                message_id,
                str(role.id),
                str(conflicting_role.id),
                discord_utils.attribution_for(interaction),
            )
        except SelfRoleError as e:
            await discord_utils.send_error(interaction, e)
            return

        if action == "add":
            reply = f"✅ Successfully added **{conflicting_role.name}** as a conflicting role for **{role.name}**."
        else:
            reply = f"✅ Successfully removed **{conflicting_role.name}** from conflicting role for **{role.name}**."
        await interaction.followup.send(reply, ephemeral=True)

    @group.command(name="reorder-roles", description="Reorder role buttons")
    @app_commands.rename(message_id="message-id", new_position="new-position")
    @app_commands.describe(
        message_id="ID of the self-role message",
        role="Role to move",
        new_position="New position (0 = first)",
    )
    @has_manage_guild()
    @guild_only()
    async def reorder_roles(
        interaction: Interaction,
        message_id: str,
        role: Role,
        new_position: Range[int, 0, constants.MAX_ROLES_PER_MENU - 1],
    ) -> None:
        assert interaction.guild_id is not None  # Guaranteed by @guild_only()
        logger.info(
            f"User {interaction.user} issued /selfrole-advanced reorder-roles {role.id} "
            f"in guild {interaction.guild_id}"
        )
        await interaction.response.defer(ephemeral=True)

        try:
            await client.manager.reorder_role(
                str(interaction.guild_id),
                message_id,
                str(role.id),
                new_position,
                discord_utils.attribution_for(interaction),
            )
        except SelfRoleError as e:
            await discord_utils.send_error(interaction, e)
            return

        await interaction.followup.send(
            f"✅ Successfully moved **{role.name}** to position {new_position}.",
            ephemeral=True,
        )

    @group.command(name="bulk-assign", description="Bulk assign roles to users (admin only)")
    @app_commands.rename(message_id="message-id", user_ids="user-ids")
    @app_commands.describe(
        message_id="ID of the self-role message",
        role="Role to assign",
        user_ids="Comma-separated list of user IDs",
    )
    @has_administrator()
    @guild_only()
    async def bulk_assign(
        interaction: Interaction, message_id: str, role: Role, user_ids: str
    ) -> None:
        assert interaction.guild_id is not None  # Guaranteed by @guild_only()
        logger.info(
            f"User {interaction.user} issued /selfrole-advanced bulk-assign {role.id} "
            f"in guild {interaction.guild_id}"
        )
        await interaction.response.defer(ephemeral=True)

        try:
            result = await client.manager.bulk_assign(
                str(interaction.guild_id),
                message_id,
                str(role.id),
                discord_utils.parse_user_ids(user_ids),
            )
        except SelfRoleError as e:
            await discord_utils.send_error(interaction, e)
            return

        await interaction.followup.send(
            format_bulk_result(result.success, result.failed, result.errors),
            ephemeral=True,
        )

    @group.command(name="export-data", description="Export self-role data as JSON")
    @app_commands.rename(message_id="message-id")
    @app_commands.describe(message_id="ID of the self-role message (optional)")
    @has_manage_guild()
    @guild_only()
    async def export_data(
        interaction: Interaction, message_id: str | None = None
    ) -> None:
        assert interaction.guild is not None  # Guaranteed by @guild_only()
        logger.info(
            f"User {interaction.user} issued /selfrole-advanced export-data "
            f"in guild {interaction.guild_id}"
        )
        await interaction.response.defer(ephemeral=True)

        try:
            data = await client.manager.export_data(
                str(interaction.guild.id), interaction.guild.name, message_id
            )
        except SelfRoleError as e:
            await discord_utils.send_error(interaction, e)
            return

        filename = f"selfrole-{message_id or interaction.guild.id}.json"
        await interaction.followup.send(
            "✅ Self-role data exported successfully!",
            file=File(io.BytesIO(data), filename=filename),
            ephemeral=True,
        )

    @group.command(
        name="reset-stats", description="Reset statistics for a self-role message"
    )
    @app_commands.rename(message_id="message-id")
    @app_commands.describe(message_id="ID of the self-role message")
    @has_manage_guild()
    @guild_only()
    async def reset_stats(interaction: Interaction, message_id: str) -> None:
        assert interaction.guild_id is not None  # Guaranteed by @guild_only()
        logger.info(
            f"User {interaction.user} issued /selfrole-advanced reset-stats {message_id} "
            f"in guild {interaction.guild_id}"
        )
        await interaction.response.defer(ephemeral=True)

        try:
            await client.manager.reset_stats(
                str(interaction.guild_id),
                message_id,
                discord_utils.attribution_for(interaction),
            )
        except SelfRoleError as e:
            await discord_utils.send_error(interaction, e)
            return

        await interaction.followup.send(
            "✅ Successfully reset statistics for the self-role message.",
            ephemeral=True,
        )

    client.tree.add_command(group)
