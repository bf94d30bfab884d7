"""
Memory engine types.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class MemoryMode(str, Enum):
    """How a user's memories age."""
    PERSISTENT = "persistent"  # Everything forever, no degradation
    HUMANIZED = "humanized"  # Biomimetic decay plus focus


class PrivacyLevel(str, Enum):
    """Privacy tier of a memory, from most to least shareable."""
    PUBLIC = "public"
    CONTEXTUAL = "contextual"
    PRIVATE = "private"  # Only recalled when explicitly asked for by tag
    VAULT = "vault"  # Requires auth; never returned by search


class MemoryType(str, Enum):
    """Memory tier."""
    WORKING = "working"
    CONSOLIDATED = "consolidated"
    WISDOM = "wisdom"


# Privacy levels recalled by default
SHAREABLE_PRIVACY_LEVELS = [PrivacyLevel.PUBLIC.value, PrivacyLevel.CONTEXTUAL.value]

DEFAULT_IMPORTANCE = 5
MIN_IMPORTANCE = 0
MAX_IMPORTANCE = 10

# Strength of a fresh memory; recall is scaled by current_strength / INITIAL_STRENGTH
INITIAL_STRENGTH = 10

# Memories weaker than this are forgotten at recall time
FORGET_THRESHOLD = 1.0

# Monthly decay (percent) of a memory with importance 0
BASE_DECAY_RATE = 50

DAYS_PER_MONTH = 30

# Pinecone metadata size limit
MAX_METADATA_CONTENT_LENGTH = 1000


@dataclass
class FocusModeConfig:
    """A temporary boost for memories in the given categories."""
    categories: List[str]
    boost_factor: float = 2.0
    duration_hours: int = 4


@dataclass
class SearchOptions:
    """Filters applied to a memory search."""
    top_k: int = 10
    include_private: bool = False
    private_tags: List[str] = field(default_factory=list)
    categories: List[str] = field(default_factory=list)
    memory_types: List[str] = field(default_factory=list)
    min_importance: Optional[float] = None
