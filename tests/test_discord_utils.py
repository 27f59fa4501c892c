"""Tests for Discord formatting and parsing helpers."""

import discord
import pytest

from rolebot import discord_utils
from rolebot.commands.help import HELP_TOPICS, build_main_help_embed, build_topic_embed
from rolebot.commands.selfrole_advanced import format_bulk_result
from rolebot.events import format_toggle_reply
from rolebot.selfrole.discord_impl import build_menu_embed, build_menu_view
from rolebot.selfrole.models import (
    ButtonStyle,
    MenuSettings,
    OutcomeKind,
    ToggleOutcome,
)
from tests.conftest import MESSAGE_ID, make_entry, make_menu


class TestCustomIds:
    """Tests for role button custom_id handling."""

    def test_round_trip(self):
        custom_id = discord_utils.build_toggle_custom_id(MESSAGE_ID, "123456")
        assert custom_id == f"selfrole_toggle_{MESSAGE_ID}_123456"
        assert discord_utils.parse_toggle_custom_id(custom_id) == (MESSAGE_ID, "123456")

    @pytest.mark.parametrize(
        "custom_id",
        [
            None,
            "",
            "vote_up_123",
            "selfrole_toggle_",
            "selfrole_toggle_123",
            "selfrole_toggle_abc_456",
            "selfrole_toggle_123_456_789",
        ],
    )
    def test_foreign_ids_are_ignored(self, custom_id):
        assert discord_utils.parse_toggle_custom_id(custom_id) is None


class TestParsing:
    """Tests for admin input parsing."""

    @pytest.mark.parametrize(
        "value, expected",
        [("#0099ff", 0x0099FF), ("#FFF", 0xFFFFFF), ("#f0a", 0xFF00AA)],
    )
    def test_parse_hex_color(self, value, expected):
        assert discord_utils.parse_hex_color(value) == expected

    def test_parse_user_ids(self):
        value = "123, <@456>, <@!789>,, 123 "
        assert discord_utils.parse_user_ids(value) == ["123", "456", "789"]


class TestReplies:
    """Tests for the text shown to members and admins."""

    @pytest.mark.parametrize(
        "outcome, expected",
        [
            (
                ToggleOutcome(OutcomeKind.ASSIGNED),
                "✅ Successfully assigned the **Gamer** role!",
            ),
            (
                ToggleOutcome(OutcomeKind.REMOVED),
                "✅ Successfully removed the **Gamer** role!",
            ),
            (
                ToggleOutcome(OutcomeKind.DENIED_ASSIGN, "Conflicting role detected"),
                "❌ Cannot assign role: Conflicting role detected",
            ),
            (
                ToggleOutcome(OutcomeKind.DENIED_REMOVE, "Role not found"),
                "❌ Role not found",
            ),
            (
                ToggleOutcome(OutcomeKind.ROLE_MISSING_ON_PLATFORM),
                "❌ Role no longer exists in this server.",
            ),
        ],
    )
    def test_toggle_replies(self, outcome, expected):
        assert format_toggle_reply(outcome, "Gamer") == expected

    def test_every_outcome_has_a_reply(self):
        for kind in OutcomeKind:
            assert format_toggle_reply(ToggleOutcome(kind, "reason"), "Gamer")

    def test_bulk_result_lists_few_errors(self):
        message = format_bulk_result(1, 2, ["User 1 not found", "<@2> already has the role"])
        assert "• Success: 1" in message
        assert "• Failed: 2" in message
        assert "• User 1 not found" in message

    def test_bulk_result_hides_many_errors(self):
        errors = [f"User {i} not found" for i in range(11)]
        message = format_bulk_result(0, 11, errors)
        assert "11 errors (too many to display)" in message
        assert "User 0 not found" not in message


class TestHelp:
    """Tests for the help embeds."""

    def test_main_help_lists_topics(self):
        embed = build_main_help_embed()
        topics_field = embed.fields[-1].value
        for topic in HELP_TOPICS:
            assert f"`{topic}`" in topics_field

    def test_topic(self):
        embed = build_topic_embed("troubleshooting")
        assert embed.title == HELP_TOPICS["troubleshooting"].title
        assert len(embed.fields) == len(HELP_TOPICS["troubleshooting"].fields)

    def test_unknown_topic(self):
        assert build_topic_embed("nonsense").title == "❓ Unknown Topic"


class TestMenuMessage:
    """Tests for the rendered menu embed and buttons."""

    def test_embed_lists_roles(self):
        config = make_menu(
            make_entry("1", emoji="🎮", description="Plays games"),
            make_entry("2", 1, max_assignments=5, current_assignments=2),
            settings=MenuSettings(max_roles_per_user=2, allow_role_removal=False),
        )

        embed = build_menu_embed(config)

        assert embed.title == "Pick your roles"
        assert embed.color.value == 0x0099FF
        roles_field, settings_field = embed.fields
        assert roles_field.value == "🎮 **1** - Plays games\n• **2** (2/5)"
        assert settings_field.value == "Max roles per user: 2\nRole removal disabled"

    def test_empty_menu_has_no_fields(self):
        embed = build_menu_embed(make_menu())
        assert embed.fields == []
        assert build_menu_view(make_menu()) is None

    def test_long_role_list_is_truncated(self):
        config = make_menu(
            *(make_entry(str(i), i, description="x" * 90) for i in range(20))
        )
        assert len(build_menu_embed(config).fields[0].value) == 1024

    async def test_buttons(self):
        config = make_menu(
            *(make_entry(str(i), i) for i in range(6)),
        )
        config.roles[0].style = ButtonStyle.DANGER
        config.roles[1].max_assignments = 1
        config.roles[1].current_assignments = 1

        view = build_menu_view(config)

        buttons = view.children
        assert len(buttons) == 6
        assert view.timeout is None
        assert buttons[0].custom_id == f"selfrole_toggle_{MESSAGE_ID}_0"
        assert buttons[0].style == discord.ButtonStyle.danger
        # Full roles stay enabled so holders can remove them
        assert not any(b.disabled for b in buttons)
        assert [b.row for b in buttons] == [0, 0, 0, 0, 0, 1]
