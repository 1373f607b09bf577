"""Client-side merge of HTTP responses and pushed events.

A client that creates a study group receives the snapshot twice: once in the
HTTP response and once as ``group-created`` on the class room. Either may
arrive first. :class:`EntityListCache` merges both by id so the list never
holds duplicates, never regresses to an older snapshot and never resurrects a
deleted entity.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

Entity = dict[str, Any]


class EntityListCache:
    """Ordered id -> snapshot cache with idempotent upsert/remove."""

    def __init__(self, items: Iterable[Entity] = (), version_key: str = "updatedAt"):
        self._items: dict[Any, Entity] = {}
        self._removed: set[Any] = set()
        self.version_key = version_key
        for item in items:
            self.upsert(item)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, entity_id) -> bool:
        return entity_id in self._items

    def get(self, entity_id) -> Entity | None:
        return self._items.get(entity_id)

    def items(self) -> list[Entity]:
        return list(self._items.values())

    def ids(self) -> list[Any]:
        return list(self._items)

    def _is_older(self, incoming: Entity, current: Entity) -> bool:
        new, old = incoming.get(self.version_key), current.get(self.version_key)
        # ISO-8601 timestamps from the API compare correctly as strings.
        return new is not None and old is not None and new < old

    def upsert(self, entity: Entity) -> bool:
        """Insert or replace by id. Returns True when the cache changed."""
        entity_id = entity["id"]
        if entity_id in self._removed:
            return False
        current = self._items.get(entity_id)
        if current is not None and (current == entity or self._is_older(entity, current)):
            return False
        self._items[entity_id] = dict(entity)
        return True

    def remove(self, entity_id) -> bool:
        self._removed.add(entity_id)
        return self._items.pop(entity_id, None) is not None


class RoomCache:
    """Lists a client keeps for one page: study groups, classes, chat."""

    def __init__(self) -> None:
        self.study_groups = EntityListCache()
        self.classes = EntityListCache(version_key="createdAt")
        self.messages: dict[int, EntityListCache] = {}

    def chat(self, chat_id: int) -> EntityListCache:
        if chat_id not in self.messages:
            self.messages[chat_id] = EntityListCache(version_key="createdAt")
        return self.messages[chat_id]

    def apply_event(self, event: str, payload: Any) -> bool:
        """Apply one server event. Unknown events are ignored."""
        if event in ("group-created", "group-updated"):
            return self.study_groups.upsert(payload)
        if event == "group-deleted":
            return self.study_groups.remove(_entity_id(payload))
        if event == "class-created":
            return self.classes.upsert(payload)
        if event == "class-deleted":
            return self.classes.remove(_entity_id(payload))
        if event == "chat-message":
            return self.chat(payload["chatId"]).upsert(payload["message"])
        return False


def _entity_id(payload: Any):
    if isinstance(payload, dict):
        return payload["id"]
    return payload
