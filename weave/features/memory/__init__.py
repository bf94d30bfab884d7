"""
Memory Feature Module - Dual-mode memory engine

Stores memories as Pinecone vectors plus Supabase rows:
- Deduplicated per user by content hash
- Privacy tiers: public, contextual, private, vault
- Persistent mode keeps everything; humanized mode lets unimportant
  memories fade and supports focus sessions

Usage:
    from weave.features.memory import get_memory_system, SearchOptions

    memory = get_memory_system()

    memory_id = await memory.store_memory(user_id, "Prefers morning meetings", importance=7)
    results = await memory.search_memories(user_id, "meetings", SearchOptions(top_k=5))
"""

from weave.features.memory.models import (
    FocusModeConfig,
    MemoryMode,
    MemoryType,
    PrivacyLevel,
    SearchOptions,
)
from weave.features.memory.service import PineconeMemorySystem, get_memory_system

__all__ = [
    "PineconeMemorySystem",
    "get_memory_system",
    "FocusModeConfig",
    "MemoryMode",
    "MemoryType",
    "PrivacyLevel",
    "SearchOptions",
]
