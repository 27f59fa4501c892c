"""Discord bot event handlers."""

import logging

import discord
from discord import Interaction, InteractionType, Member
from discord.app_commands import AppCommandError, CheckFailure

from rolebot import discord_utils
from rolebot.bot import RoleBot
from rolebot.selfrole import OutcomeKind, StoreError, ToggleOutcome
from rolebot.selfrole.stores import MongoRoleMenuStore

logger = logging.getLogger(__name__)

_FIXED_REPLIES = {
    OutcomeKind.ROLE_MISSING_ON_PLATFORM: "❌ Role no longer exists in this server.",
    OutcomeKind.MENU_NOT_FOUND: (
        "❌ Self-role configuration not found. This message may be outdated."
    ),
    OutcomeKind.PLATFORM_FAILED: (
        "❌ Failed to update your roles. I may not have sufficient permissions."
    ),
    OutcomeKind.PERSISTENCE_FAILED: (
        "⚠️ Your roles were updated but I couldn't save the change. "
        "Please try again later."
    ),
}


def format_toggle_reply(outcome: ToggleOutcome, role_name: str) -> str:
    """Build the single message shown to a member after pressing a role button."""
    if outcome.kind == OutcomeKind.ASSIGNED:
        return f"✅ Successfully assigned the **{role_name}** role!"
    if outcome.kind == OutcomeKind.REMOVED:
        return f"✅ Successfully removed the **{role_name}** role!"
    if outcome.kind == OutcomeKind.DENIED_ASSIGN:
        return f"❌ Cannot assign role: {outcome.reason}"
    if outcome.kind == OutcomeKind.DENIED_REMOVE:
        return f"❌ {outcome.reason}"
    return _FIXED_REPLIES[outcome.kind]


async def handle_role_button(
    client: RoleBot, interaction: Interaction, message_id: str, role_id: str
) -> None:
    """Run a role toggle for a button press and reply to the member."""
    if interaction.guild is None or not isinstance(interaction.user, Member):
        return

    # Acknowledge without a visible reply so the follow-up can pick its own visibility
    await interaction.response.defer()

    try:
        outcome = await client.coordinator.handle_toggle(
            guild_id=str(interaction.guild.id),
            message_id=message_id,
            role_id=role_id,
            user_id=str(interaction.user.id),
            current_role_ids={str(role.id) for role in interaction.user.roles},
        )
    except StoreError as e:
        logger.error(f"Error handling self-role interaction: {e}")
        await interaction.followup.send(
            "❌ An error occurred while processing your request.", ephemeral=True
        )
        return

    role = interaction.guild.get_role(int(role_id))
    role_name = role.name if role is not None else role_id
    await interaction.followup.send(
        format_toggle_reply(outcome, role_name), ephemeral=outcome.ephemeral
    )


def register_events(client: RoleBot) -> None:
    """Register all event handlers for the bot."""

    @client.event
    async def on_ready() -> None:
        logger.info(f"We have logged in as {client.user}")

        if isinstance(client.store, MongoRoleMenuStore):
            try:
                await client.store.ensure_indexes()
            except StoreError as e:
                logger.error(f"Failed to create MongoDB indexes: {e}")

        # Sync slash commands
        try:
            if client.settings.testing_guild:
                guild = discord.Object(id=int(client.settings.testing_guild))
                client.tree.copy_global_to(guild=guild)
                synced = await client.tree.sync(guild=guild)
            else:
                synced = await client.tree.sync()
            logger.info(f"Synced {len(synced)} command(s)")
        except discord.HTTPException as e:
            logger.error(f"Failed to sync commands: {e}")

    @client.event
    async def on_interaction(interaction: Interaction) -> None:
        if interaction.type != InteractionType.component:
            return

        custom_id = interaction.data.get("custom_id") if interaction.data else None
        parsed = discord_utils.parse_toggle_custom_id(custom_id)
        if parsed is None:
            return

        message_id, role_id = parsed
        await handle_role_button(client, interaction, message_id, role_id)

    @client.tree.error
    async def on_app_command_error(
        interaction: Interaction, error: AppCommandError
    ) -> None:
        # Catch insufficient permissions exception, log all others
        if isinstance(error, CheckFailure):
            message = "You don't have permission to use this command."
        else:
            logger.error(f"Error running command: {error}")
            message = "❌ An error occurred while processing your request."

        if interaction.response.is_done():
            await interaction.followup.send(message, ephemeral=True)
        else:
            await interaction.response.send_message(message, ephemeral=True)
