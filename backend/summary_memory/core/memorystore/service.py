from typing import Dict

from sqlalchemy.engine import Engine

from summary_memory.core.config import settings
from summary_memory.core.memorystore.base import BaseMemoryStore
from summary_memory.core.memorystore.providers.memory import InMemoryMemoryStore
from summary_memory.core.memorystore.providers.sql import SQLMemoryStore

PROVIDER_ALIASES = {
    "in_memory": "memory",
    "postgres": "sql",
    "database": "sql",
}

MEMORY_STORE_REGISTRY = {
    "memory": InMemoryMemoryStore,
    "sql": SQLMemoryStore,
}

# cache instance per provider
_instances: Dict[str, BaseMemoryStore] = {}


def create_memory_store(
    provider: str | None = None,
    engine: Engine | None = None,
    use_cache: bool = True,
) -> BaseMemoryStore:
    provider = (provider or settings.MEMORY_STORE_PROVIDER or "").strip().lower()
    provider = PROVIDER_ALIASES.get(provider, provider)

    if provider not in MEMORY_STORE_REGISTRY:
        raise ValueError(f"Unsupported memory store provider: {provider}")

    # An explicit engine always gets its own store.
    if engine is not None:
        use_cache = False

    if use_cache and provider in _instances:
        return _instances[provider]

    if provider == "sql":
        instance = SQLMemoryStore(engine=engine)
    else:
        instance = InMemoryMemoryStore()

    if use_cache:
        _instances[provider] = instance

    return instance


def clear_memory_store_cache() -> None:
    _instances.clear()
