from __future__ import annotations

import asyncio
import time
from datetime import datetime, timezone

from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from summary_memory.core.memorystore.base import BaseMemoryStore, MemoryEntry, MemoryWriteResult
from summary_memory.core.memorystore.models import MemoryEntryRecord


class SQLMemoryStore(BaseMemoryStore):
    def __init__(self, engine: Engine | None = None):
        if engine is None:
            from summary_memory.core.database import get_app_engine

            engine = get_app_engine()
        self.engine = engine

    @staticmethod
    def _record_to_entry(record: MemoryEntryRecord) -> MemoryEntry:
        return MemoryEntry(
            user_id=record.user_id,
            key=record.key,
            value=record.value,
            token_count=record.token_count,
            updated_at=datetime.fromtimestamp(float(record.updated_at), tz=timezone.utc),
        )

    def _list_sync(self, user_id: str) -> list[MemoryEntry]:
        with Session(self.engine) as session:
            records = session.exec(
                select(MemoryEntryRecord)
                .where(MemoryEntryRecord.user_id == user_id)
                .order_by(MemoryEntryRecord.updated_at.asc(), MemoryEntryRecord.id.asc())
            ).all()
            return [self._record_to_entry(record) for record in records]

    def _upsert_sync(
        self,
        user_id: str,
        key: str,
        value: str,
        token_count: int | None,
    ) -> MemoryEntry:
        now = time.time()
        with Session(self.engine) as session:
            record = session.exec(
                select(MemoryEntryRecord)
                .where(MemoryEntryRecord.user_id == user_id)
                .where(MemoryEntryRecord.key == key)
            ).first()
            if record:
                record.value = value
                record.token_count = token_count
                record.updated_at = now
            else:
                record = MemoryEntryRecord(
                    user_id=user_id,
                    key=key,
                    value=value,
                    token_count=token_count,
                    created_at=now,
                    updated_at=now,
                )
            session.add(record)
            session.commit()
            session.refresh(record)
            return self._record_to_entry(record)

    def _delete_sync(self, user_id: str, key: str) -> bool:
        with Session(self.engine) as session:
            record = session.exec(
                select(MemoryEntryRecord)
                .where(MemoryEntryRecord.user_id == user_id)
                .where(MemoryEntryRecord.key == key)
            ).first()
            if not record:
                return False
            session.delete(record)
            session.commit()
            return True

    async def get_all_user_memories(self, user_id: str) -> list[MemoryEntry]:
        return await asyncio.to_thread(self._list_sync, user_id)

    async def set_memory(
        self,
        user_id: str,
        key: str,
        value: str,
        token_count: int | None = None,
    ) -> MemoryWriteResult:
        entry = await asyncio.to_thread(self._upsert_sync, user_id, key, value, token_count)
        return MemoryWriteResult(ok=True, entry=entry)

    async def delete_memory(self, user_id: str, key: str) -> bool:
        return await asyncio.to_thread(self._delete_sync, user_id, key)
