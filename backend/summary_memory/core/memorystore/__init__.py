from summary_memory.core.memorystore.base import BaseMemoryStore, MemoryEntry, MemoryWriteResult
from summary_memory.core.memorystore.service import clear_memory_store_cache, create_memory_store

__all__ = [
    "BaseMemoryStore",
    "MemoryEntry",
    "MemoryWriteResult",
    "clear_memory_store_cache",
    "create_memory_store",
]
