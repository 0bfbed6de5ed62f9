import math
from collections.abc import Mapping

from summary_memory.core.config import Settings, settings as app_settings
from summary_memory.summaries.schemas import MemoryConfig

DEFAULT_SUMMARY_CADENCE = 3
MAX_SUMMARY_CADENCE = 25
DEFAULT_CHAR_LIMIT = 10000


def _as_number(value) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        try:
            return float(stripped)
        except ValueError:
            return None
    return None


def resolve_summary_cadence(value) -> int:
    number = _as_number(value)
    if number is not None and math.isfinite(number) and number.is_integer() and number >= 1:
        return min(int(number), MAX_SUMMARY_CADENCE)
    return DEFAULT_SUMMARY_CADENCE


def resolve_char_limit(value) -> int:
    """Positive finite limit, floored.

    Unlike a plain floor, a limit below 1 (e.g. 0.5) falls back to the default
    instead of truncating every summary to an empty string.
    """
    number = _as_number(value)
    if number is not None and math.isfinite(number) and number > 0:
        limit = math.floor(number)
        if limit >= 1:
            return limit
    return DEFAULT_CHAR_LIMIT


def coerce_memory_config(config: MemoryConfig | Mapping | None) -> MemoryConfig | None:
    if config is None or isinstance(config, MemoryConfig):
        return config
    return MemoryConfig.model_validate(dict(config))


def memory_config_from_settings(settings: Settings | None = None) -> MemoryConfig:
    settings = settings or app_settings
    return MemoryConfig(
        disabled=settings.MEMORY_DISABLED,
        summary_cadence=settings.MEMORY_SUMMARY_CADENCE,
        char_limit=settings.MEMORY_CHAR_LIMIT,
    )
