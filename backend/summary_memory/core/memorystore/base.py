from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class MemoryEntry:
    user_id: str
    key: str
    value: str
    token_count: int | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class MemoryWriteResult:
    ok: bool
    entry: MemoryEntry | None = None
    error: str | None = None


class BaseMemoryStore:
    """Per-user key/value store for memory entries.

    Keys are unique per ``(user_id, key)``; writes upsert.
    """

    async def get_all_user_memories(self, user_id: str) -> list[MemoryEntry]:
        raise NotImplementedError

    async def set_memory(
        self,
        user_id: str,
        key: str,
        value: str,
        token_count: int | None = None,
    ) -> MemoryWriteResult:
        raise NotImplementedError

    async def delete_memory(self, user_id: str, key: str) -> bool:
        raise NotImplementedError
