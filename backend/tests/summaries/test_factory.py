from summary_memory import create_summary_manager
from summary_memory.core.config import settings
from summary_memory.core.memorystore.providers.memory import InMemoryMemoryStore
from summary_memory.core.memorystore.service import clear_memory_store_cache
from summary_memory.summaries.schemas import MemoryConfig


def test_factory_reads_policy_from_settings(monkeypatch, memory_store):
    monkeypatch.setattr(settings, "MEMORY_DISABLED", False)
    monkeypatch.setattr(settings, "MEMORY_SUMMARY_CADENCE", "5")
    monkeypatch.setattr(settings, "MEMORY_CHAR_LIMIT", "750")

    manager = create_summary_manager("user-1", conversation_id="abc", store=memory_store)

    assert manager.enabled
    assert manager.summary_cadence == 5
    assert manager.char_limit == 750
    assert manager.conversation_id == "abc"
    assert manager.store is memory_store


def test_factory_builds_store_from_provider_setting(monkeypatch):
    monkeypatch.setattr(settings, "MEMORY_STORE_PROVIDER", "memory")
    clear_memory_store_cache()

    manager = create_summary_manager(
        "user-1",
        memory_config=MemoryConfig(disabled=True),
        personalization_enabled=True,
    )

    assert isinstance(manager.store, InMemoryMemoryStore)
    assert manager.enabled is False
    clear_memory_store_cache()
