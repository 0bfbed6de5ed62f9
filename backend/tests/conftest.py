from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from summary_memory.core.memorystore.base import BaseMemoryStore, MemoryWriteResult
from summary_memory.core.memorystore.models import MemoryEntryRecord
from summary_memory.core.memorystore.providers.memory import InMemoryMemoryStore
from summary_memory.summaries.schemas import MemoryConfig

_ = MemoryEntryRecord


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def memory_config():
    return MemoryConfig(disabled=False, summary_cadence=3, char_limit=2000)


@pytest.fixture()
def mock_store():
    store = MagicMock(spec=BaseMemoryStore)
    store.get_all_user_memories = AsyncMock(return_value=[])
    store.set_memory = AsyncMock(return_value=MemoryWriteResult(ok=True))
    store.delete_memory = AsyncMock(return_value=True)
    return store


@pytest.fixture()
def memory_store():
    return InMemoryMemoryStore()
