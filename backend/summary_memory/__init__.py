from summary_memory.summaries import (
    ConversationSummaryManager,
    MemoryConfig,
    SummaryMessage,
    create_summary_manager,
)

__all__ = [
    "ConversationSummaryManager",
    "MemoryConfig",
    "SummaryMessage",
    "create_summary_manager",
]
