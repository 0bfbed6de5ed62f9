from __future__ import annotations

from datetime import datetime, timezone

from summary_memory.core.memorystore.base import BaseMemoryStore, MemoryEntry, MemoryWriteResult


class InMemoryMemoryStore(BaseMemoryStore):
    def __init__(self):
        self._store: dict[str, dict[str, MemoryEntry]] = {}

    async def get_all_user_memories(self, user_id: str) -> list[MemoryEntry]:
        return list(self._store.get(user_id, {}).values())

    async def set_memory(
        self,
        user_id: str,
        key: str,
        value: str,
        token_count: int | None = None,
    ) -> MemoryWriteResult:
        entry = MemoryEntry(
            user_id=user_id,
            key=key,
            value=value,
            token_count=token_count,
            updated_at=datetime.now(timezone.utc),
        )
        self._store.setdefault(user_id, {})[key] = entry
        return MemoryWriteResult(ok=True, entry=entry)

    async def delete_memory(self, user_id: str, key: str) -> bool:
        bucket = self._store.get(user_id, {})
        return bucket.pop(key, None) is not None
