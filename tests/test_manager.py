"""Tests for RoleMenuManager."""

import json

import pytest

from rolebot.selfrole.errors import (
    DuplicateRoleError,
    MenuNotFoundError,
    PlatformError,
    RoleNotInMenuError,
    StoreError,
    ValidationError,
)
from tests.conftest import (
    ADMIN,
    CHANNEL_ID,
    FIXED_NOW,
    GUILD_ID,
    MESSAGE_ID,
    make_entry,
    make_menu,
)

FIRST_POSTED_ID = "900000000000000001"
OTHER_GUILD = "999999999999999999"


class TestCreateMenu:
    """Tests for posting and storing new menus."""

    async def test_create(self, manager, store, events):
        config = await manager.create_menu(
            GUILD_ID, CHANNEL_ID, "Roles", "Pick some", ADMIN
        )

        assert config.message_id == FIRST_POSTED_ID
        assert events == [("post", FIRST_POSTED_ID), ("save", FIRST_POSTED_ID)]
        saved = store.get(FIRST_POSTED_ID)
        assert saved.title == "Roles"
        assert saved.created_by.user_id == ADMIN.user_id
        assert saved.created_at == FIXED_NOW

    async def test_store_failure_removes_posted_message(
        self, manager, store, renderer, events
    ):
        store.fail_save = StoreError("disk full")

        with pytest.raises(StoreError):
            await manager.create_menu(GUILD_ID, CHANNEL_ID, "Roles", "Pick", ADMIN)

        assert events[-1] == ("delete_message", FIRST_POSTED_ID)
        assert renderer.posted == set()
        assert store.documents == {}

    async def test_post_failure_stores_nothing(self, manager, store, renderer):
        renderer.fail_post = PlatformError("Missing Access")

        with pytest.raises(PlatformError):
            await manager.create_menu(GUILD_ID, CHANNEL_ID, "Roles", "Pick", ADMIN)

        assert store.documents == {}

    async def test_invalid_input_posts_nothing(self, manager, events):
        with pytest.raises(ValidationError):
            await manager.create_menu(
                GUILD_ID, CHANNEL_ID, "Roles", "Pick", ADMIN, color="nope"
            )
        assert events == []

    async def test_from_template(self, manager, store):
        config, template = await manager.create_from_template(
            GUILD_ID, CHANNEL_ID, "gaming", ADMIN
        )

        assert config.title == "🎮 Gaming Roles"
        assert config.color == "#ff6b6b"
        assert "add-role" in template.next_steps
        assert store.get(config.message_id) is not None

    async def test_custom_template_needs_title_and_description(self, manager, events):
        with pytest.raises(ValidationError, match="requires both"):
            await manager.create_from_template(
                GUILD_ID, CHANNEL_ID, "custom", ADMIN, title="Only a title"
            )
        assert events == []

    async def test_custom_template(self, manager):
        config, _ = await manager.create_from_template(
            GUILD_ID, CHANNEL_ID, "custom", ADMIN, title="Mine", description="Yours"
        )
        assert (config.title, config.description) == ("Mine", "Yours")


class TestEditing:
    """Tests for changing existing menus."""

    async def test_menu_from_another_guild_not_found(self, manager, store):
        store.put(make_menu())
        with pytest.raises(MenuNotFoundError, match="message ID is correct"):
            await manager.get_menu(OTHER_GUILD, MESSAGE_ID)

    async def test_add_role_redraws(self, manager, store, events):
        store.put(make_menu())

        await manager.add_role(GUILD_ID, MESSAGE_ID, make_entry("gamer"), ADMIN)

        assert events == [("save", MESSAGE_ID), ("refresh", MESSAGE_ID)]
        saved = store.get(MESSAGE_ID)
        assert saved.role_ids() == {"gamer"}
        assert saved.last_modified_by.user_id == ADMIN.user_id
        assert saved.last_modified_by.timestamp == FIXED_NOW

    async def test_failed_add_writes_nothing(self, manager, store, events):
        store.put(make_menu(make_entry("gamer")))
        with pytest.raises(DuplicateRoleError):
            await manager.add_role(GUILD_ID, MESSAGE_ID, make_entry("gamer", 1), ADMIN)
        assert events == []

    async def test_remove_role(self, manager, store):
        store.put(make_menu(make_entry("gamer"), make_entry("artist", 1)))
        removed = await manager.remove_role(GUILD_ID, MESSAGE_ID, "gamer", ADMIN)
        assert removed.role_id == "gamer"
        assert store.get(MESSAGE_ID).role_ids() == {"artist"}

    async def test_refresh_failure_does_not_fail_edit(self, manager, store, renderer):
        store.put(make_menu())
        renderer.fail_refresh = PlatformError("Unknown Message")

        changes = await manager.edit_menu(GUILD_ID, MESSAGE_ID, ADMIN, title="New")

        assert changes == ["title"]
        assert store.get(MESSAGE_ID).title == "New"

    async def test_edit_without_changes(self, manager, store):
        store.put(make_menu())
        with pytest.raises(ValidationError, match="No changes"):
            await manager.edit_menu(GUILD_ID, MESSAGE_ID, ADMIN)

    async def test_settings_without_changes(self, manager, store):
        store.put(make_menu())
        with pytest.raises(ValidationError, match="No settings"):
            await manager.update_settings(GUILD_ID, MESSAGE_ID, ADMIN)

    async def test_conflicts_do_not_redraw(self, manager, store, events):
        store.put(make_menu(make_entry("teamA"), make_entry("teamB", 1)))

        await manager.add_conflict(GUILD_ID, MESSAGE_ID, "teamA", "teamB", ADMIN)

        assert events == [("save", MESSAGE_ID)]
        assert store.get(MESSAGE_ID).roles[0].conflicting_roles == ["teamB"]

    async def test_reset_stats(self, manager, store):
        config = make_menu(make_entry("gamer", current_assignments=4))
        config.statistics.total_interactions = 9
        store.put(config)

        await manager.reset_stats(GUILD_ID, MESSAGE_ID, ADMIN)

        saved = store.get(MESSAGE_ID)
        assert saved.roles[0].current_assignments == 0
        assert saved.statistics.total_interactions == 0


class TestDeleteAndCleanup:
    """Tests for removing menus and stale roles."""

    async def test_delete(self, manager, store, events):
        store.put(make_menu())

        await manager.delete_menu(GUILD_ID, MESSAGE_ID)

        assert events == [("delete_message", MESSAGE_ID), ("delete", MESSAGE_ID)]
        assert store.get(MESSAGE_ID) is None

    async def test_delete_when_message_cannot_be_deleted(
        self, manager, store, renderer
    ):
        store.put(make_menu())
        renderer.fail_delete = PlatformError("Missing Permissions")

        await manager.delete_menu(GUILD_ID, MESSAGE_ID)

        assert store.get(MESSAGE_ID) is None

    async def test_cleanup_stale_roles(self, manager, store, events):
        store.put(make_menu(make_entry("gamer"), make_entry("deleted-role", 1)))
        store.put(make_menu(make_entry("artist"), message_id="2"))

        removed = await manager.cleanup_stale_roles(GUILD_ID)

        assert removed == 1
        assert store.get(MESSAGE_ID).role_ids() == {"gamer"}
        assert events == [("save", MESSAGE_ID), ("refresh", MESSAGE_ID)]

    async def test_cleanup_unknown_guild(self, manager, store):
        store.put(make_menu(make_entry("gamer")))
        assert await manager.cleanup_stale_roles(OTHER_GUILD) == 0


class TestBulkAssign:
    """Tests for granting a role to many members at once."""

    async def test_mixed_results(self, manager, store, platform, events):
        store.put(make_menu(make_entry("gamer", max_assignments=1)))
        platform.add_member(GUILD_ID, "u1")
        platform.add_member(GUILD_ID, "u2", "gamer")
        platform.add_member(GUILD_ID, "u4")
        platform.add_member(GUILD_ID, "u5")
        platform.fail_for_users = {"u4"}

        result = await manager.bulk_assign(
            GUILD_ID, MESSAGE_ID, "gamer", ["u1", "u2", "u3", "u4", "u5"]
        )

        assert result.success == 2
        assert result.failed == 3
        assert result.errors == [
            "<@u2> already has the role",
            "User u3 not found",
            "u4: Missing permissions",
        ]
        saved = store.get(MESSAGE_ID)
        # Limits don't apply to bulk assignment
        assert saved.roles[0].current_assignments == 2
        assert events.count(("save", MESSAGE_ID)) == 1

    async def test_nothing_granted_writes_nothing(self, manager, store, events):
        store.put(make_menu(make_entry("gamer")))
        result = await manager.bulk_assign(GUILD_ID, MESSAGE_ID, "gamer", ["ghost"])
        assert result.success == 0
        assert events == []

    async def test_role_not_on_menu(self, manager, store):
        store.put(make_menu(make_entry("gamer")))
        with pytest.raises(RoleNotInMenuError):
            await manager.bulk_assign(GUILD_ID, MESSAGE_ID, "artist", ["u1"])


class TestStatsAndExport:
    """Tests for statistics aggregation and JSON export."""

    async def test_guild_stats(self, manager, store, coordinator):
        store.put(make_menu(make_entry("gamer"), make_entry("artist", 1)))
        store.put(make_menu(make_entry("gamer"), message_id="2"))
        await coordinator.handle_toggle(GUILD_ID, MESSAGE_ID, "gamer", "u1", [])
        await coordinator.handle_toggle(GUILD_ID, MESSAGE_ID, "artist", "u1", [])
        await coordinator.handle_toggle(GUILD_ID, "2", "gamer", "u2", [])

        stats = await manager.guild_stats(GUILD_ID)

        assert stats.total_menus == 2
        assert stats.total_roles == 3
        assert stats.total_interactions == 3
        assert stats.unique_users == 2
        assert stats.role_totals["gamer"].assigned_count == 2
        assert stats.most_popular(1)[0].role_id == "gamer"

    async def test_stats_for_one_menu(self, manager, store):
        store.put(make_menu(make_entry("gamer")))
        store.put(make_menu(make_entry("artist"), message_id="2"))

        stats = await manager.guild_stats(GUILD_ID, "2")

        assert stats.total_menus == 1
        assert stats.total_roles == 1

    async def test_no_stats_without_menus(self, manager):
        assert await manager.guild_stats(GUILD_ID) is None

    async def test_export_single_menu(self, manager, store):
        store.put(make_menu(make_entry("gamer")))

        export = json.loads(
            await manager.export_data(GUILD_ID, "Test Guild", MESSAGE_ID)
        )

        assert export["guildId"] == GUILD_ID
        assert export["guildName"] == "Test Guild"
        assert export["exported"] == FIXED_NOW.isoformat()
        assert export["data"]["messageId"] == MESSAGE_ID
        assert export["data"]["createdAt"] == FIXED_NOW.isoformat()

    async def test_export_all_menus(self, manager, store):
        store.put(make_menu())
        store.put(make_menu(message_id="2"))
        store.put(make_menu(message_id="3"))

        export = json.loads(await manager.export_data(GUILD_ID, "Test Guild"))

        assert len(export["data"]) == 3
