"""Role menu storage backends."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pymongo import ASCENDING, DESCENDING, AsyncMongoClient
from pymongo.errors import PyMongoError

from rolebot.config import constants
from rolebot.config.settings import RoleBotSettings
from rolebot.selfrole.errors import StoreError
from rolebot.selfrole.models import RoleMenuConfig, json_default

logger = logging.getLogger(__name__)

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


class MongoRoleMenuStore:
    """RoleMenuStore backed by a MongoDB collection, one document per menu."""

    def __init__(self, uri: str, database: str) -> None:
        self._client: AsyncMongoClient = AsyncMongoClient(uri, tz_aware=True)
        self._collection = self._client[database][constants.MONGODB_COLLECTION]

    async def ensure_indexes(self) -> None:
        """Create the indexes menu lookups rely on. Safe to call repeatedly."""
        try:
            await self._collection.create_index("messageId", unique=True)
            await self._collection.create_index(
                [("guildId", ASCENDING), ("messageId", ASCENDING)]
            )
            await self._collection.create_index(
                [("guildId", ASCENDING), ("channelId", ASCENDING)]
            )
            await self._collection.create_index("roles.roleId")
        except PyMongoError as e:
            raise StoreError(f"Could not create indexes: {e}") from e

    async def find(self, message_id: str) -> RoleMenuConfig | None:
        try:
            doc = await self._collection.find_one({"messageId": message_id})
        except PyMongoError as e:
            raise StoreError(f"Could not load menu {message_id}: {e}") from e

        if doc is None:
            return None
        return RoleMenuConfig.from_document(doc)

    async def save(self, config: RoleMenuConfig) -> None:
        # Whole-document replace, no version check
        try:
            await self._collection.replace_one(
                {"messageId": config.message_id}, config.to_document(), upsert=True
            )
        except PyMongoError as e:
            raise StoreError(f"Could not save menu {config.message_id}: {e}") from e

    async def delete(self, message_id: str) -> bool:
        try:
            result = await self._collection.delete_one({"messageId": message_id})
        except PyMongoError as e:
            raise StoreError(f"Could not delete menu {message_id}: {e}") from e
        return result.deleted_count > 0

    async def list_by_guild(self, guild_id: str) -> list[RoleMenuConfig]:
        try:
            cursor = self._collection.find({"guildId": guild_id}).sort(
                "createdAt", DESCENDING
            )
            docs = await cursor.to_list(length=None)
        except PyMongoError as e:
            raise StoreError(f"Could not list menus of guild {guild_id}: {e}") from e
        return [RoleMenuConfig.from_document(doc) for doc in docs]

    async def close(self) -> None:
        await self._client.close()


class JsonRoleMenuStore:
    """RoleMenuStore backed by a single JSON file.

    The whole state is kept in memory and dumped to disk after every change:
    {"role_menus": {<message_id>: <menu document>}}
    """

    def __init__(self, state_file: Path) -> None:
        """Initialize the store and load existing menus from disk.

        Args:
            state_file: Path to the state file.
        """
        self._state_file = state_file
        self._menus: dict[str, dict[str, Any]] = {}

        try:
            with open(state_file) as f:
                state_str = f.read()
        except FileNotFoundError:
            # Expected on first run or after setting a new custom state filepath.
            state_str = None
        except IOError:
            logger.error(f"Could not read state from {state_file}")
            raise

        if state_str:
            self._menus = json.loads(state_str).get("role_menus", {})
            logger.info(f"Loaded {len(self._menus)} role menu(s) from {state_file}")
        else:
            logger.info("No existing role menu state file found, starting fresh")

    # None of the methods below await, so no other task can observe the
    # in-memory state half-way through an update.

    async def find(self, message_id: str) -> RoleMenuConfig | None:
        doc = self._menus.get(message_id)
        if doc is None:
            return None
        # from_document builds new objects, so callers never alias stored state
        return RoleMenuConfig.from_document(doc)

    async def save(self, config: RoleMenuConfig) -> None:
        previous = self._menus.get(config.message_id)
        self._menus[config.message_id] = config.to_document()
        try:
            self._write()
        except StoreError:
            # Keep memory in line with what is on disk
            if previous is None:
                del self._menus[config.message_id]
            else:
                self._menus[config.message_id] = previous
            raise

    async def delete(self, message_id: str) -> bool:
        previous = self._menus.pop(message_id, None)
        if previous is None:
            return False
        try:
            self._write()
        except StoreError:
            self._menus[message_id] = previous
            raise
        return True

    async def list_by_guild(self, guild_id: str) -> list[RoleMenuConfig]:
        menus = [
            RoleMenuConfig.from_document(doc)
            for doc in self._menus.values()
            if doc["guildId"] == guild_id
        ]
        menus.sort(key=lambda m: m.created_at or _OLDEST, reverse=True)
        return menus

    def _write(self) -> None:
        try:
            with open(self._state_file, "w") as f:
                # Indented so the file is easy for a human to look through
                f.write(
                    json.dumps(
                        {"role_menus": self._menus}, indent=2, default=json_default
                    )
                )
        except OSError as e:
            raise StoreError(f"Could not write {self._state_file}: {e}") from e


def create_store(settings: RoleBotSettings) -> MongoRoleMenuStore | JsonRoleMenuStore:
    """Pick the storage backend configured in settings."""
    if settings.mongodb_uri:
        logger.info(f"Storing role menus in MongoDB database {settings.mongodb_database}")
        return MongoRoleMenuStore(settings.mongodb_uri, settings.mongodb_database)

    logger.info(f"Storing role menus in {settings.state_file}")
    return JsonRoleMenuStore(settings.state_file)
