import re

KEY_NAMESPACE = "convo-summary"
FALLBACK_ID = "conversation"

_UNSAFE_CHARS = re.compile(r"[^a-z0-9_-]")
_DASH_RUNS = re.compile(r"-{2,}")
_TRAILING_INDEX = re.compile(r"-([0-9]+)\Z")


def sanitize_id(value) -> str:
    raw = "" if value is None else str(value)
    sanitized = _UNSAFE_CHARS.sub("-", raw.lower())
    sanitized = _DASH_RUNS.sub("-", sanitized).strip("-")
    return sanitized or FALLBACK_ID


def key_prefix(conversation_id) -> str:
    return f"{KEY_NAMESPACE}-{sanitize_id(conversation_id)}"


def summary_key(conversation_id, index: int) -> str:
    return f"{key_prefix(conversation_id)}-{index}"


def extract_index(key: str | None) -> int | None:
    if not key:
        return None
    match = _TRAILING_INDEX.search(key)
    return int(match.group(1)) if match else None


def matches_prefix(key: str | None, prefix: str) -> bool:
    if not key:
        return False
    return key == prefix or key.startswith(f"{prefix}-")
