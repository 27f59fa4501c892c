"""Help command for the self-role system."""

from dataclasses import dataclass, field
from typing import Final

from discord import Embed, Interaction, app_commands
from discord.app_commands import Choice

from rolebot.bot import RoleBot
from rolebot.config import constants


@dataclass(frozen=True)
class HelpTopic:
    title: str
    color: int
    description: str
    fields: list[tuple[str, str]] = field(default_factory=list)
    footer: str | None = None


HELP_TOPICS: Final[dict[str, HelpTopic]] = {
    "getting-started": HelpTopic(
        title="🚀 Getting Started with Self-Roles",
        color=0x00FF00,
        description="Follow these steps to set up your first self-role system:",
        fields=[
            (
                "Step 1: Quick Setup",
                "Use `/selfrole-setup` to create a self-role message with a template:\n"
                "```/selfrole-setup channel:#roles template:gaming```",
            ),
            (
                "Step 2: Add Roles",
                "Add roles to your message:\n"
                '```/selfrole add-role message-id:123456 role:@Gamer label:"Gaming" emoji:🎮```',
            ),
            (
                "Step 3: Configure Settings",
                "Customize your self-role message:\n"
                "```/selfrole settings message-id:123456 max-roles-per-user:3 ephemeral-response:true```",
            ),
            (
                "✅ You're Done!",
                "Users can now click the buttons to get/remove roles. "
                "Use `/selfrole list` to see all your self-role messages.",
            ),
        ],
        footer="Tip: Start with a template and customize from there!",
    ),
    "basic-commands": HelpTopic(
        title="📋 Basic Commands",
        color=0x3498DB,
        description="Essential commands for managing self-roles:",
        fields=[
            (
                "🎯 Core Commands",
                "• `/selfrole create` - Create a new self-role message\n"
                "• `/selfrole add-role` - Add a role to a message\n"
                "• `/selfrole remove-role` - Remove a role from a message\n"
                "• `/selfrole edit` - Edit message title/description\n"
                "• `/selfrole delete` - Delete a self-role message",
            ),
            (
                "⚙️ Configuration",
                "• `/selfrole settings` - Configure message settings\n"
                "• `/selfrole list` - List all self-role messages\n"
                "• `/selfrole stats` - View usage statistics\n"
                "• `/selfrole cleanup` - Remove invalid roles",
            ),
            (
                "🚀 Quick Setup",
                "• `/selfrole-setup` - Setup wizard with templates\n"
                "• `/selfrole-help` - Get help (this command)",
            ),
        ],
        footer="All commands require Manage Guild permission",
    ),
    "advanced-features": HelpTopic(
        title="🔬 Advanced Features",
        color=0x9B59B6,
        description="Unlock the full potential of the self-role system:",
        fields=[
            (
                "🎯 Role Limits",
                "• Set maximum assignments per role\n"
                "• Require specific roles to assign others\n"
                "• Limit roles per user for each message",
            ),
            (
                "⚔️ Role Conflicts",
                "• Prevent conflicting roles (e.g., Team A vs Team B)\n"
                "• Members holding a conflicting role are refused\n"
                "• Support for multiple conflicts per role",
            ),
            (
                "📊 Advanced Management",
                "• Bulk role assignment\n• Role reordering\n• Statistics tracking\n"
                "• Data export\n• Cleanup of deleted roles",
            ),
            (
                "🔧 Commands",
                "• `/selfrole-advanced role-limits`\n"
                "• `/selfrole-advanced role-conflicts`\n"
                "• `/selfrole-advanced reorder-roles`\n"
                "• `/selfrole-advanced bulk-assign`\n"
                "• `/selfrole-advanced export-data`\n"
                "• `/selfrole-advanced reset-stats`",
            ),
        ],
        footer="Bulk assignment requires Administrator permission",
    ),
    "troubleshooting": HelpTopic(
        title="🔧 Troubleshooting",
        color=0xE74C3C,
        description="Common issues and their solutions:",
        fields=[
            (
                "❌ \"I cannot manage this role\"",
                "**Solution:** Make sure the bot's role is higher than the role "
                "you're trying to manage in the server's role hierarchy.",
            ),
            (
                "❌ \"Failed to update your roles\"",
                "**Solutions:**\n• Check bot permissions (Manage Roles)\n"
                "• Verify role hierarchy\n• Ensure role hasn't been deleted",
            ),
            (
                "❌ \"Self-role message not found\"",
                "**Solutions:**\n• Verify the message ID is correct\n"
                "• Check if message was deleted\n"
                "• Use `/selfrole list` to see all messages\n"
                "• Ensure you're in the right server",
            ),
            (
                "❌ \"Buttons not working\"",
                "**Solutions:**\n• Check if roles still exist\n• Run `/selfrole cleanup`\n"
                "• Verify bot is online\n• Check for role conflicts or limits",
            ),
        ],
        footer="Still having issues? Check the bot logs",
    ),
    "best-practices": HelpTopic(
        title="💡 Best Practices",
        color=0xF39C12,
        description="Tips for creating effective self-role systems:",
        fields=[
            (
                "🎨 Design Tips",
                "• Use clear, descriptive labels\n"
                "• Add relevant emojis for visual appeal\n"
                "• Keep descriptions concise\n• Group related roles together",
            ),
            (
                "⚙️ Configuration Tips",
                "• Set reasonable role limits\n"
                "• Use ephemeral responses to reduce clutter\n"
                "• Set up logging for moderation\n"
                "• Regular cleanup of invalid roles",
            ),
            (
                "🔒 Security",
                "• Use required roles for sensitive access\n"
                "• Monitor bulk assignments\n• Review logs periodically",
            ),
        ],
        footer="Following these practices ensures a smooth experience for everyone",
    ),
    "examples": HelpTopic(
        title="📚 Examples",
        color=0x1ABC9C,
        description="Real-world examples of self-role implementations:",
        fields=[
            (
                "🎮 Gaming Server Example",
                "**Setup:** Gaming roles with conflicts\n**Config:** Max 3 roles per user\n"
                "**Conflicts:** Team A ↔ Team B, Casual ↔ Competitive",
            ),
            (
                "🌈 Color Roles Example",
                "**Setup:** Cosmetic color roles\n"
                "**Config:** Max 1 role per user, all roles conflict",
            ),
            (
                "🔔 Notification Example",
                "**Setup:** Announcement pingable roles\n"
                "**Config:** Unlimited roles, removal allowed\n"
                "**Logging:** Track who opts in/out",
            ),
        ],
        footer="Adapt these examples to fit your server's needs",
    ),
}

TOPIC_CHOICES = [
    Choice(name="Getting Started", value="getting-started"),
    Choice(name="Basic Commands", value="basic-commands"),
    Choice(name="Advanced Features", value="advanced-features"),
    Choice(name="Troubleshooting", value="troubleshooting"),
    Choice(name="Best Practices", value="best-practices"),
    Choice(name="Examples", value="examples"),
]


def build_main_help_embed() -> Embed:
    embed = Embed(
        title="🎭 Self-Role System Help",
        color=constants.INFO_EMBED_COLOR,
        description=(
            "This system allows server administrators to create interactive "
            "role assignment messages with buttons."
        ),
    )
    embed.add_field(
        name="🚀 Quick Start",
        value=(
            "1. Use `/selfrole-setup` to create your first self-role message\n"
            "2. Add roles with `/selfrole add-role`\n"
            "3. Configure settings with `/selfrole settings`"
        ),
        inline=False,
    )
    embed.add_field(
        name="📋 Main Commands",
        value=(
            "• `/selfrole` - Main self-role management\n"
            "• `/selfrole-advanced` - Advanced features\n"
            "• `/selfrole-setup` - Quick setup wizard\n"
            "• `/selfrole-help` - This help command"
        ),
        inline=False,
    )
    embed.add_field(
        name="💡 Need Specific Help?",
        value="Use `/selfrole-help` with a topic:\n"
        + "\n".join(f"• `{choice.value}`" for choice in TOPIC_CHOICES),
        inline=False,
    )
    embed.set_footer(text="Self-Role System")
    return embed


def build_topic_embed(topic: str) -> Embed:
    help_topic = HELP_TOPICS.get(topic)
    if help_topic is None:
        embed = Embed(
            title="❓ Unknown Topic",
            color=0x95A5A6,
            description="The requested help topic was not found.",
        )
        embed.set_footer(text="Use /selfrole-help to see available topics")
        return embed

    embed = Embed(
        title=help_topic.title,
        color=help_topic.color,
        description=help_topic.description,
    )
    for name, value in help_topic.fields:
        embed.add_field(name=name, value=value, inline=False)
    if help_topic.footer:
        embed.set_footer(text=help_topic.footer)
    return embed


def register_commands(client: RoleBot) -> None:
    """Register the /selfrole-help command."""

    @client.tree.command(
        name="selfrole-help", description="Get help with the self-role system"
    )
    @app_commands.describe(topic="Get help on a specific topic")
    @app_commands.choices(topic=TOPIC_CHOICES)
    async def selfrole_help(
        interaction: Interaction, topic: Choice[str] | None = None
    ) -> None:
        if topic is None:
            embed = build_main_help_embed()
        else:
            embed = build_topic_embed(topic.value)
        await interaction.response.send_message(embed=embed, ephemeral=True)
