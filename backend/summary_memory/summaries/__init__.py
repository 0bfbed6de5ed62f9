from collections.abc import Mapping

from summary_memory.core.memorystore import BaseMemoryStore, create_memory_store
from summary_memory.summaries.manager import ConversationSummaryManager
from summary_memory.summaries.policy import memory_config_from_settings
from summary_memory.summaries.schemas import (
    LoadResult,
    MemoryConfig,
    PersistResult,
    SummaryEntry,
    SummaryMessage,
)


def create_summary_manager(
    user_id: str | None,
    conversation_id: str | None = None,
    personalization_enabled: bool | None = None,
    memory_config: MemoryConfig | Mapping | None = None,
    store: BaseMemoryStore | None = None,
) -> ConversationSummaryManager:
    return ConversationSummaryManager(
        user_id=user_id,
        store=store or create_memory_store(),
        memory_config=memory_config if memory_config is not None else memory_config_from_settings(),
        personalization_enabled=personalization_enabled,
        conversation_id=conversation_id,
    )


__all__ = [
    "ConversationSummaryManager",
    "LoadResult",
    "MemoryConfig",
    "PersistResult",
    "SummaryEntry",
    "SummaryMessage",
    "create_summary_manager",
]
