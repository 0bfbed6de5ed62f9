import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from summary_memory.core.memorystore.models import MemoryEntryRecord
from summary_memory.core.memorystore.providers.sql import SQLMemoryStore
from summary_memory.summaries.manager import ConversationSummaryManager
from summary_memory.summaries.schemas import MemoryConfig


@pytest.mark.asyncio
async def test_set_and_list_entries_per_user(engine):
    store = SQLMemoryStore(engine=engine)

    result = await store.set_memory("user-1", "convo-summary-demo-1", "First", token_count=4)
    await store.set_memory("user-2", "convo-summary-demo-1", "Other user")

    entries = await store.get_all_user_memories("user-1")

    assert result.ok
    assert result.entry.key == "convo-summary-demo-1"
    assert [(entry.key, entry.value, entry.token_count) for entry in entries] == [
        ("convo-summary-demo-1", "First", 4)
    ]
    assert entries[0].updated_at is not None


@pytest.mark.asyncio
async def test_set_memory_upserts_existing_key(engine):
    store = SQLMemoryStore(engine=engine)

    await store.set_memory("user-1", "convo-summary-demo-1", "First", token_count=4)
    await store.set_memory("user-1", "convo-summary-demo-1", "Rewritten", token_count=9)

    entries = await store.get_all_user_memories("user-1")
    assert len(entries) == 1
    assert entries[0].value == "Rewritten"
    assert entries[0].token_count == 9


@pytest.mark.asyncio
async def test_delete_memory(engine):
    store = SQLMemoryStore(engine=engine)
    await store.set_memory("user-1", "convo-summary-demo-1", "First")

    assert await store.delete_memory("user-1", "convo-summary-demo-1") is True
    assert await store.delete_memory("user-1", "convo-summary-demo-1") is False
    assert await store.get_all_user_memories("user-1") == []


def test_user_key_pair_is_unique(engine):
    with Session(engine) as session:
        session.add(MemoryEntryRecord(user_id="user-1", key="convo-summary-demo-1", value="a"))
        session.add(MemoryEntryRecord(user_id="user-1", key="convo-summary-demo-1", value="b"))
        with pytest.raises(IntegrityError):
            session.commit()


@pytest.mark.asyncio
async def test_manager_round_trip_across_instances(engine):
    store = SQLMemoryStore(engine=engine)
    config = MemoryConfig(summary_cadence=1, char_limit=2000)

    writer = ConversationSummaryManager(user_id="user-1", store=store, memory_config=config)
    await writer.persist_summary(conversation_id="Trip Plan", summary="Booked flights", token_count=3)
    await writer.persist_summary(conversation_id="Trip Plan", summary="Booked hotel", token_count=3)

    reader = ConversationSummaryManager(
        user_id="user-1",
        store=store,
        memory_config=config,
        conversation_id="Trip Plan",
    )
    message = await reader.get_latest_summary_message()

    assert message.message_id == "convo-summary-trip-plan-2"
    assert message.summary == "Booked hotel"
    assert reader.persisted_count == 2
    assert reader.generated_count == 2
