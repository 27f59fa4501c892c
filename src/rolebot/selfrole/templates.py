"""Starter templates for the self-role setup wizard."""

from dataclasses import dataclass
from typing import Final

from rolebot.config import constants


@dataclass(frozen=True)
class MenuTemplate:
    title: str
    description: str
    color: str
    next_steps: str


CUSTOM: Final = "custom"

TEMPLATES: Final[dict[str, MenuTemplate]] = {
    "gaming": MenuTemplate(
        title="🎮 Gaming Roles",
        description=(
            "Select your favorite games to get notified about gaming events and find teammates!\n\n"
            "Click the buttons below to toggle your gaming roles."
        ),
        color="#ff6b6b",
        next_steps=(
            "1. Use `/selfrole add-role` to add gaming roles\n"
            "2. Consider setting up conflicting roles for competitive games\n"
            "3. Set up a log channel to track role assignments"
        ),
    ),
    "notifications": MenuTemplate(
        title="🔔 Notification Roles",
        description=(
            "Choose which notifications you want to receive from this server.\n\n"
            "Click the buttons below to manage your notification preferences."
        ),
        color="#4ecdc4",
        next_steps=(
            "1. Add roles for different types of notifications\n"
            "2. Consider using role limits to prevent spam\n"
            "3. Set ephemeral responses to keep the channel clean"
        ),
    ),
    "colors": MenuTemplate(
        title="🌈 Color Roles",
        description=(
            "Pick a color for your username! Choose one that represents your personality.\n\n"
            "**Note:** You can only have one color role at a time."
        ),
        color="#ff9ff3",
        next_steps=(
            "1. Create color roles with different colors\n"
            "2. Set up conflicting roles so users can only have one color\n"
            '3. Use the "Danger" button style for remove options'
        ),
    ),
    "interests": MenuTemplate(
        title="🎯 Interest Roles",
        description=(
            "Let others know what you're interested in! This helps you connect with like-minded members.\n\n"
            "You can select multiple interests."
        ),
        color="#54a0ff",
        next_steps=(
            "1. Add various interest-based roles\n"
            "2. Consider setting a maximum number of roles per user\n"
            "3. Use descriptive labels and emojis for each role"
        ),
    ),
    "pronouns": MenuTemplate(
        title="💭 Pronoun Roles",
        description=(
            "Help others know how to address you by selecting your pronouns.\n\n"
            "Respecting everyone's pronouns creates an inclusive community."
        ),
        color="#5f27cd",
        next_steps=(
            "1. Add common pronoun roles (he/him, she/her, they/them, etc.)\n"
            "2. Consider making responses ephemeral for privacy\n"
            "3. Set up respectful descriptions for each option"
        ),
    ),
}

CUSTOM_NEXT_STEPS: Final = (
    "1. Use `/selfrole add-role` to add your custom roles\n"
    "2. Configure settings with `/selfrole settings`\n"
    "3. Use `/selfrole-advanced` for advanced features"
)


def get_template(
    key: str, title: str | None = None, description: str | None = None
) -> MenuTemplate | None:
    """Resolve a template by key.

    The custom template is built from the given title and description.

    Returns:
        The template, or None for a custom template missing its title or description.
    """
    if key in TEMPLATES:
        return TEMPLATES[key]

    if not title or not description:
        return None
    return MenuTemplate(
        title=title,
        description=description,
        color=constants.DEFAULT_MENU_COLOR,
        next_steps=CUSTOM_NEXT_STEPS,
    )
