from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

LoadStatus = Literal["skipped", "cached", "loaded", "failed"]
PersistStatus = Literal["persisted", "skipped", "failed"]


class MemoryConfig(BaseModel):
    """Account-level memory policy.

    Cadence and character limit are kept as raw values; the policy module
    decides what counts as valid.
    """

    model_config = ConfigDict(extra="ignore")

    disabled: bool = False
    summary_cadence: Any = Field(
        default=None,
        validation_alias=AliasChoices("summary_cadence", "summaryCadence"),
    )
    char_limit: Any = Field(
        default=None,
        validation_alias=AliasChoices("char_limit", "charLimit"),
    )


class SummaryMessage(BaseModel):
    message_id: str
    summary: str
    summary_token_count: int
    token_count: int


@dataclass(frozen=True)
class SummaryEntry:
    key: str
    value: str
    index: int = 0
    token_count: int | None = None
    updated_at: datetime | None = None

    @property
    def sort_key(self) -> tuple[int, float]:
        updated = self.updated_at.timestamp() if self.updated_at else 0.0
        return self.index, updated


@dataclass
class LoadResult:
    status: LoadStatus
    conversation_id: str | None = None
    entries: list[SummaryEntry] = field(default_factory=list)
    error: str | None = None


@dataclass
class PersistResult:
    status: PersistStatus
    key: str | None = None
    attempt_index: int | None = None
    reason: str | None = None

    @property
    def persisted(self) -> bool:
        return self.status == "persisted"
