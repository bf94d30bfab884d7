"""
Memory scoring - the pure parts of the memory engine.

Everything here is deterministic given its inputs (including "now"), so the
decay curve, the focus boost and the privacy filter can be reasoned about
without a vector index.

Decay model (humanized mode):
    decay_rate      = round(BASE_DECAY_RATE * (10 - importance) / 10)   # % per month
    decay_factor    = (1 - decay_rate / 100) ** months_elapsed
    current_strength = strength * decay_factor
    score           = similarity * current_strength / INITIAL_STRENGTH

A memory whose current_strength drops below FORGET_THRESHOLD is forgotten.
"""

import hashlib
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from weave.features.memory.models import (
    BASE_DECAY_RATE,
    DAYS_PER_MONTH,
    FORGET_THRESHOLD,
    INITIAL_STRENGTH,
    FocusModeConfig,
    MemoryMode,
    MemoryType,
    PrivacyLevel,
    SearchOptions,
    SHAREABLE_PRIVACY_LEVELS,
)

SECONDS_PER_MONTH = DAYS_PER_MONTH * 24 * 60 * 60


def content_hash(content: str) -> str:
    """SHA-256 hex digest used for per-user deduplication."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def calculate_decay_rate(importance: float, mode: MemoryMode) -> int:
    """
    Monthly decay percentage for a new memory.

    Persistent mode never decays. In humanized mode importance 10 never
    decays, importance 5 loses 25% per month and importance 0 loses 50%.
    """
    if MemoryMode(mode) == MemoryMode.PERSISTENT:
        return 0

    importance_factor = (10 - importance) / 10
    return int(round(BASE_DECAY_RATE * importance_factor))


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp into an aware datetime (UTC if naive)."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def current_strength(metadata: Dict[str, Any], now: datetime) -> float:
    """Strength of a memory after decaying since its timestamp."""
    strength = float(metadata.get("strength", INITIAL_STRENGTH))
    decay_rate = float(metadata.get("decayRate", 0) or 0)
    created = parse_timestamp(metadata.get("timestamp"))

    if decay_rate <= 0 or created is None:
        return strength

    months_elapsed = max(0.0, (now - created).total_seconds() / SECONDS_PER_MONTH)
    decay_factor = (1 - decay_rate / 100) ** months_elapsed
    return strength * decay_factor


def apply_degradation(
    matches: List[Dict[str, Any]],
    now: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    """
    Scale match scores by their decayed strength and drop forgotten ones.

    Permanent memories and matches without metadata pass through untouched.
    Degraded matches get currentStrength added to their metadata.
    """
    now = now or datetime.now(timezone.utc)
    degraded = []

    for match in matches:
        metadata = match.get("metadata")
        if not metadata or metadata.get("isPermanent"):
            degraded.append(match)
            continue

        strength = current_strength(metadata, now)
        if strength < FORGET_THRESHOLD:
            continue

        degraded.append({
            **match,
            "score": (match.get("score") or 0) * (strength / INITIAL_STRENGTH),
            "metadata": {**metadata, "currentStrength": strength},
        })

    return degraded


def matches_focus(category: Optional[str], focus: FocusModeConfig) -> bool:
    """A category is in focus when any focus category is a substring of it."""
    category = (category or "").lower()
    return any(focus_category.lower() in category for focus_category in focus.categories)


def apply_focus_boost(
    matches: List[Dict[str, Any]],
    focus: FocusModeConfig,
) -> List[Dict[str, Any]]:
    """Multiply the score of in-focus matches by the boost factor."""
    boosted = []
    for match in matches:
        category = (match.get("metadata") or {}).get("category")
        if matches_focus(category, focus):
            boosted.append({
                **match,
                "score": (match.get("score") or 0) * focus.boost_factor,
                "boosted": True,
            })
        else:
            boosted.append(match)
    return boosted


def rank(matches: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Sort matches by score, highest first."""
    return sorted(matches, key=lambda m: m.get("score") or 0, reverse=True)


def build_search_filter(user_id: str, options: SearchOptions) -> Dict[str, Any]:
    """
    Build the Pinecone metadata filter for a search.

    Vault memories are never matched. Private memories are only matched when
    include_private is set, and only those carrying one of private_tags when
    tags are given.
    """
    search_filter: Dict[str, Any] = {"userId": {"$eq": user_id}}

    if not options.include_private:
        search_filter["privacyLevel"] = {"$in": list(SHAREABLE_PRIVACY_LEVELS)}
    elif options.private_tags:
        search_filter["$or"] = [
            {"privacyLevel": {"$in": list(SHAREABLE_PRIVACY_LEVELS)}},
            {
                "$and": [
                    {"privacyLevel": {"$eq": PrivacyLevel.PRIVATE.value}},
                    {"tags": {"$in": list(options.private_tags)}},
                ]
            },
        ]
    else:
        search_filter["privacyLevel"] = {
            "$in": SHAREABLE_PRIVACY_LEVELS + [PrivacyLevel.PRIVATE.value]
        }

    if options.categories:
        search_filter["category"] = {"$in": list(options.categories)}

    if options.memory_types:
        search_filter["memoryType"] = {
            "$in": [MemoryType(t).value for t in options.memory_types]
        }

    if options.min_importance is not None:
        search_filter["importance"] = {"$gte": options.min_importance}

    return search_filter


def summarize_stats(rows: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    """Per-user memory statistics from relational rows."""
    rows = list(rows)
    total = len(rows)

    by_type = {t.value: 0 for t in MemoryType}
    by_privacy = {p.value: 0 for p in PrivacyLevel}
    for row in rows:
        if row.get("memory_type") in by_type:
            by_type[row["memory_type"]] += 1
        if row.get("privacy_level") in by_privacy:
            by_privacy[row["privacy_level"]] += 1

    def _average(column: str) -> float:
        if not total:
            return 0
        return sum(row.get(column) or 0 for row in rows) / total

    return {
        "total": total,
        "by_type": by_type,
        "by_privacy": by_privacy,
        "avg_importance": _average("importance"),
        "avg_strength": _average("strength"),
        "permanent": sum(1 for row in rows if row.get("is_permanent")),
    }
