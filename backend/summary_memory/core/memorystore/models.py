import time
from typing import Optional

from sqlmodel import Field, SQLModel, UniqueConstraint


class MemoryEntryRecord(SQLModel, table=True):
    __tablename__ = "memory_entries"
    __table_args__ = (UniqueConstraint("user_id", "key"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    key: str = Field(index=True)
    value: str
    token_count: Optional[int] = None
    created_at: float = Field(default_factory=time.time)
    updated_at: float = Field(default_factory=time.time)
