"""Quick setup wizard for self-role menus."""

import logging
from typing import Optional

from discord import Embed, Interaction, Permissions, TextChannel, app_commands
from discord.app_commands import Choice, Range

from rolebot import discord_utils
from rolebot.bot import RoleBot
from rolebot.config import constants
from rolebot.decorators import guild_only, has_manage_guild
from rolebot.selfrole import SelfRoleError
from rolebot.selfrole.templates import CUSTOM

logger = logging.getLogger(__name__)

TEMPLATE_CHOICES = [
    Choice(name="Gaming Roles", value="gaming"),
    Choice(name="Notification Roles", value="notifications"),
    Choice(name="Color Roles", value="colors"),
    Choice(name="Interest Roles", value="interests"),
    Choice(name="Pronoun Roles", value="pronouns"),
    Choice(name="Custom", value=CUSTOM),
]


def register_commands(client: RoleBot) -> None:
    """Register the /selfrole-setup command."""

    @client.tree.command(
        name="selfrole-setup", description="Quick setup wizard for self-roles"
    )
    @app_commands.guild_only()
    @app_commands.default_permissions(manage_guild=True)
    @app_commands.describe(
        channel="Channel to send the self-role message",
        template="Choose a template",
        title="Custom title (only for custom template)",
        description="Custom description (only for custom template)",
    )
    @app_commands.choices(template=TEMPLATE_CHOICES)
    @has_manage_guild()
    @guild_only()
    async def selfrole_setup(
        interaction: Interaction,
        channel: TextChannel,
        template: Choice[str],
        title: Optional[Range[str, 1, constants.EMBED_TITLE_LIMIT]] = None,
        description: Optional[Range[str, 1, constants.EMBED_DESCRIPTION_LIMIT]] = None,
    ) -> None:
        assert interaction.guild is not None  # Guaranteed by @guild_only()
        logger.info(
            f"User {interaction.user} issued /selfrole-setup {template.value} "
            f"in guild {interaction.guild_id}"
        )

        if not discord_utils.bot_can_post(interaction.guild, channel):
            await interaction.response.send_message(
                "❌ I don't have permission to send messages in that channel.",
                ephemeral=True,
            )
            return

        await interaction.response.defer(ephemeral=True)
        try:
            config, menu_template = await client.manager.create_from_template(
                str(interaction.guild.id),
                str(channel.id),
                template.value,
                discord_utils.attribution_for(interaction),
                title=title,
                description=description,
            )
        except SelfRoleError as e:
            await discord_utils.send_error(interaction, e)
            return

        embed = Embed(
            title="✅ Self-Role Setup Complete!",
            description=(
                f"Successfully created a {template.value} self-role message "
                f"in {channel.mention}"
            ),
            color=constants.SUCCESS_EMBED_COLOR,
        )
        embed.add_field(name="📝 Message ID", value=f"`{config.message_id}`")
        embed.add_field(name="📋 Template", value=template.value)
        embed.add_field(
            name="🔧 Next Steps", value=menu_template.next_steps, inline=False
        )
        await interaction.followup.send(embed=embed, ephemeral=True)
