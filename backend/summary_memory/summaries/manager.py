"""Durable bookkeeping for generated conversation summaries.

The manager decides which candidate summaries reach the memory store, under
which ``convo-summary-<id>-<n>`` key, and rebuilds its cadence state from the
store the first time a conversation is touched. Store failures are logged and
degrade to "no memory"; they never propagate to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from summary_memory.core.memorystore.base import BaseMemoryStore, MemoryEntry
from summary_memory.summaries.keys import extract_index, key_prefix, matches_prefix, summary_key
from summary_memory.summaries.policy import (
    coerce_memory_config,
    resolve_char_limit,
    resolve_summary_cadence,
)
from summary_memory.summaries.schemas import (
    LoadResult,
    MemoryConfig,
    PersistResult,
    SummaryEntry,
    SummaryMessage,
)

logger = logging.getLogger(__name__)


@dataclass
class CadenceState:
    conversation_id: str | None = None
    loaded_conversation_id: str | None = None
    cached_summaries: list[SummaryEntry] = field(default_factory=list)
    persisted_count: int = 0
    generated_count: int = 0
    last_persisted_value: str | None = None

    def reset(self) -> None:
        self.cached_summaries = []
        self.persisted_count = 0
        self.generated_count = 0
        self.last_persisted_value = None


class ConversationSummaryManager:
    def __init__(
        self,
        user_id: str | None,
        store: BaseMemoryStore,
        memory_config: MemoryConfig | Mapping | None = None,
        personalization_enabled: bool | None = None,
        conversation_id: str | None = None,
    ):
        self.user_id = str(user_id) if user_id else None
        self.store = store
        self.memory_config = coerce_memory_config(memory_config)
        self.personalization_enabled = personalization_enabled is not False

        raw_cadence = self.memory_config.summary_cadence if self.memory_config else None
        raw_char_limit = self.memory_config.char_limit if self.memory_config else None
        self.summary_cadence = resolve_summary_cadence(raw_cadence)
        self.char_limit = resolve_char_limit(raw_char_limit)

        self.state = CadenceState(conversation_id=str(conversation_id) if conversation_id else None)

    @property
    def enabled(self) -> bool:
        if not self.user_id:
            return False
        if self.memory_config is None or self.memory_config.disabled:
            return False
        return self.personalization_enabled

    @property
    def conversation_id(self) -> str | None:
        return self.state.conversation_id

    @property
    def loaded_conversation_id(self) -> str | None:
        return self.state.loaded_conversation_id

    @property
    def cached_summaries(self) -> list[SummaryEntry]:
        return list(self.state.cached_summaries)

    @property
    def persisted_count(self) -> int:
        return self.state.persisted_count

    @property
    def generated_count(self) -> int:
        return self.state.generated_count

    @property
    def last_persisted_value(self) -> str | None:
        return self.state.last_persisted_value

    def _resolve_target(self, conversation_id: str | None) -> str | None:
        target = conversation_id if conversation_id is not None else self.state.conversation_id
        if not target:
            return None
        return str(target)

    def set_conversation(self, conversation_id: str | None) -> None:
        if not conversation_id:
            return
        conversation_id = str(conversation_id)
        if self.state.conversation_id != conversation_id:
            self.state.conversation_id = conversation_id
            self.state.loaded_conversation_id = None
            self.state.reset()

    @staticmethod
    def _to_summary_entry(entry: MemoryEntry) -> SummaryEntry:
        index = extract_index(entry.key)
        return SummaryEntry(
            key=entry.key,
            value=entry.value,
            index=index if index is not None else 0,
            token_count=entry.token_count,
            updated_at=entry.updated_at,
        )

    async def load_summaries(self, conversation_id: str | None = None) -> LoadResult:
        if not self.enabled:
            return LoadResult(status="skipped")

        target_id = self._resolve_target(conversation_id)
        if not target_id:
            return LoadResult(status="skipped")

        state = self.state
        if state.loaded_conversation_id and state.loaded_conversation_id != target_id:
            state.reset()

        if state.loaded_conversation_id == target_id and state.cached_summaries:
            return LoadResult(
                status="cached",
                conversation_id=target_id,
                entries=list(state.cached_summaries),
            )

        try:
            memories = await self.store.get_all_user_memories(self.user_id)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Failed to load summaries for conversation %s: %s",
                target_id,
                exc,
                exc_info=True,
            )
            state.loaded_conversation_id = target_id
            state.reset()
            return LoadResult(status="failed", conversation_id=target_id, error=str(exc))

        prefix = key_prefix(target_id)
        relevant = sorted(
            (self._to_summary_entry(entry) for entry in memories if matches_prefix(entry.key, prefix)),
            key=lambda item: item.sort_key,
        )

        state.loaded_conversation_id = target_id
        state.cached_summaries = relevant
        state.persisted_count = len(relevant)
        state.generated_count = max(state.generated_count, state.persisted_count)
        state.last_persisted_value = relevant[-1].value if relevant else None
        return LoadResult(status="loaded", conversation_id=target_id, entries=list(relevant))

    async def ensure_loaded(self, conversation_id: str | None = None) -> list[SummaryEntry]:
        result = await self.load_summaries(conversation_id)
        return result.entries

    async def get_latest_summary_message(self, conversation_id: str | None = None) -> SummaryMessage | None:
        if not self.enabled:
            return None

        target_id = self._resolve_target(conversation_id)
        if not target_id:
            return None

        entries = await self.ensure_loaded(target_id)
        if not entries:
            return None

        latest = entries[-1]
        if not isinstance(latest.value, str) or not latest.value.strip():
            return None

        content = latest.value.strip()
        token_count = latest.token_count if latest.token_count is not None else len(content)

        self.state.last_persisted_value = content

        return SummaryMessage(
            message_id=summary_key(target_id, latest.index),
            summary=content,
            summary_token_count=token_count,
            token_count=token_count,
        )

    def should_persist(self, attempt_index: int, summary: str | None) -> bool:
        if not self.enabled:
            return False
        if not summary:
            return False
        if self.state.last_persisted_value and self.state.last_persisted_value == summary:
            return False
        if self.summary_cadence <= 1:
            return True
        if attempt_index == 1:
            return True
        return attempt_index % self.summary_cadence == 0

    async def persist_summary(
        self,
        conversation_id: str | None = None,
        summary: str | None = None,
        token_count: int | None = None,
    ) -> PersistResult:
        if not self.enabled:
            return PersistResult(status="skipped", reason="disabled")

        target_id = self._resolve_target(conversation_id)
        if not target_id:
            return PersistResult(status="skipped", reason="no_conversation")
        if not isinstance(summary, str):
            return PersistResult(status="skipped", reason="invalid_summary")

        trimmed = summary.strip()
        if not trimmed:
            return PersistResult(status="skipped", reason="empty_summary")

        await self.ensure_loaded(target_id)

        state = self.state
        # Counts as an attempt even when the write below fails.
        attempt_index = state.generated_count + 1
        state.generated_count = attempt_index

        bounded = trimmed[: self.char_limit]
        if bounded == state.last_persisted_value:
            return PersistResult(status="skipped", attempt_index=attempt_index, reason="duplicate")

        if not self.should_persist(attempt_index, trimmed):
            reason = "duplicate" if trimmed == state.last_persisted_value else "cadence"
            return PersistResult(status="skipped", attempt_index=attempt_index, reason=reason)

        storage_index = state.persisted_count + 1
        key = summary_key(target_id, storage_index)

        try:
            result = await self.store.set_memory(
                user_id=self.user_id,
                key=key,
                value=bounded,
                token_count=token_count,
            )
        except Exception as exc:  # noqa: BLE001
            logger.warning("Failed to persist summary %s: %s", key, exc, exc_info=True)
            return PersistResult(status="failed", key=key, attempt_index=attempt_index, reason=str(exc))

        if result is not None and not result.ok:
            logger.warning("Memory store rejected summary %s: %s", key, result.error)
            return PersistResult(
                status="failed",
                key=key,
                attempt_index=attempt_index,
                reason=result.error or "rejected",
            )

        state.persisted_count = storage_index
        state.generated_count = max(state.generated_count, state.persisted_count)
        state.last_persisted_value = bounded
        state.loaded_conversation_id = None
        logger.debug("Persisted summary %s (attempt %d)", key, attempt_index)
        return PersistResult(status="persisted", key=key, attempt_index=attempt_index)

    async def clear_summaries(self, conversation_id: str | None = None) -> int:
        if not self.enabled:
            return 0

        target_id = self._resolve_target(conversation_id)
        if not target_id:
            return 0

        self.state.loaded_conversation_id = None
        entries = await self.ensure_loaded(target_id)

        # Highest indices go first so a partial failure leaves 1..k without gaps.
        deleted = 0
        for entry in reversed(entries):
            try:
                if await self.store.delete_memory(self.user_id, entry.key):
                    deleted += 1
            except Exception as exc:  # noqa: BLE001
                logger.warning("Failed to delete summary %s: %s", entry.key, exc)
                break

        self.state.reset()
        self.state.loaded_conversation_id = None
        return deleted
