"""
Memory Service - Dual-mode memory engine on Pinecone

Every memory lives twice: a vector in Pinecone (for similarity recall and
metadata filtering) and a row in Supabase (full content, access tracking,
statistics). The row holds pinecone_id, the vector metadata holds the row ID
as memoryId, and memories are deduplicated per user by the SHA-256 of the
content.

Modes (per user, stored on the user row):
1. PERSISTENT - everything forever, no degradation
2. HUMANIZED  - biomimetic memory: unimportant memories fade month by month
                and are eventually forgotten; focus mode temporarily boosts
                chosen categories

Privacy tiers:
- public / contextual: recalled by default
- private: recalled only with include_private (optionally narrowed by tags)
- vault: requires auth, never recalled by search
"""

import logging
import random
import string
import time
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Union

from weave.core.config import settings
from weave.core.logging_utils import preview
from weave.core.tracing import get_tracer
from weave.features.memory import scoring
from weave.features.memory.embeddings import EmbeddingService
from weave.features.memory.models import (
    DEFAULT_IMPORTANCE,
    INITIAL_STRENGTH,
    MAX_IMPORTANCE,
    MAX_METADATA_CONTENT_LENGTH,
    MIN_IMPORTANCE,
    FocusModeConfig,
    MemoryMode,
    MemoryType,
    PrivacyLevel,
    SearchOptions,
)
from weave.features.memory.vector_store import PineconeVectorStore
from weave.shared.errors import MemorySystemNotConfigured

logger = logging.getLogger("Weave.Memory")
tracer = get_tracer(__name__)


def _generate_vector_id(user_id: str) -> str:
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"{user_id}_{int(time.time() * 1000)}_{suffix}"


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


class PineconeMemorySystem:
    """
    Dual-mode memory system backed by Pinecone and Supabase.

    Designed to be a singleton - use get_memory_system().
    """

    def __init__(
        self,
        db=None,
        vector_store: Optional[PineconeVectorStore] = None,
        embedder: Optional[EmbeddingService] = None,
    ):
        self._db = db
        self.vector_store = vector_store if vector_store is not None else PineconeVectorStore()
        self.embedder = embedder if embedder is not None else EmbeddingService()

    @property
    def db(self):
        """Lazy load database client."""
        if self._db is None:
            from weave.features.database import get_database_client
            self._db = get_database_client()
        return self._db

    @property
    def initialized(self) -> bool:
        return self.vector_store.is_configured

    # =========================================================================
    # MODE
    # =========================================================================

    async def get_memory_mode(self, user_id: str) -> MemoryMode:
        """The user's memory mode, humanized unless configured otherwise."""
        stored = self.db.users.get_memory_mode(user_id)
        try:
            return MemoryMode(stored or settings.DEFAULT_MEMORY_MODE)
        except ValueError:
            logger.warning(f"Unknown memory mode {stored!r} for user {user_id}, using humanized")
            return MemoryMode.HUMANIZED

    async def toggle_memory_mode(self, user_id: str, mode: Union[MemoryMode, str]) -> MemoryMode:
        """
        Switch a user's memory mode.

        Memories stored afterwards get the new mode's decay; search applies
        degradation only while the user is in humanized mode.
        """
        mode = MemoryMode(mode)
        self.db.users.set_memory_mode(user_id, mode.value)
        logger.info(f"User {user_id} switched to {mode.value} mode")
        return mode

    # =========================================================================
    # STORE
    # =========================================================================

    async def store_memory(
        self,
        user_id: str,
        content: str,
        chat_id: Optional[str] = None,
        privacy_level: Union[PrivacyLevel, str] = PrivacyLevel.CONTEXTUAL,
        category: Optional[str] = None,
        tags: Optional[List[str]] = None,
        importance: Optional[float] = None,
        memory_type: Union[MemoryType, str] = MemoryType.WORKING,
    ) -> str:
        """
        Store a new memory, or return the ID of an identical existing one.

        Args:
            user_id: Owner of the memory
            content: The memory text
            chat_id: Chat the memory came from, if any
            privacy_level: public, contextual, private or vault
            category: Free-form category used by focus mode and filters
            tags: Tags; private memories can be recalled by tag
            importance: 0-10, default 5; higher decays slower
            memory_type: working, consolidated or wisdom

        Returns:
            Memory ID

        Raises:
            MemorySystemNotConfigured: If Pinecone is not configured
            ValueError: On empty content or out-of-range importance
        """
        if not self.initialized:
            raise MemorySystemNotConfigured()

        if not content or not content.strip():
            raise ValueError("Content is required")

        importance = DEFAULT_IMPORTANCE if importance is None else importance
        if not MIN_IMPORTANCE <= importance <= MAX_IMPORTANCE:
            raise ValueError(f"Importance must be between {MIN_IMPORTANCE} and {MAX_IMPORTANCE}")

        privacy_level = PrivacyLevel(privacy_level or PrivacyLevel.CONTEXTUAL)
        memory_type = MemoryType(memory_type or MemoryType.WORKING)
        tags = list(tags or [])

        with tracer.start_as_current_span("memory.store") as span:
            span.set_attribute("memory.user_id", user_id)

            self.vector_store.ensure_index()
            memory_mode = await self.get_memory_mode(user_id)

            digest = scoring.content_hash(content)
            existing = self.db.memories.find_by_hash(user_id, digest)
            if existing:
                logger.info(f"Duplicate memory detected, skipping: {preview(content)}")
                span.set_attribute("memory.duplicate", True)
                return existing["id"]

            embedding = await self.embedder.embed(content)

            decay_rate = scoring.calculate_decay_rate(importance, memory_mode)
            is_permanent = memory_mode == MemoryMode.PERSISTENT
            requires_auth = privacy_level == PrivacyLevel.VAULT
            memory_id = str(uuid.uuid4())
            vector_id = _generate_vector_id(user_id)

            metadata: Dict[str, Any] = {
                "userId": user_id,
                "memoryId": memory_id,
                "chatId": chat_id or "",
                "content": content[:MAX_METADATA_CONTENT_LENGTH],
                "contentHash": digest,
                "memoryType": memory_type.value,
                "privacyLevel": privacy_level.value,
                "category": category or "",
                "importance": importance,
                "strength": INITIAL_STRENGTH,
                "decayRate": decay_rate,
                "isPermanent": is_permanent,
                "requiresAuth": requires_auth,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
            # Pinecone rejects empty lists in metadata
            if tags:
                metadata["tags"] = tags

            self.vector_store.upsert(vector_id, embedding, metadata)

            memory = self.db.memories.create({
                "id": memory_id,
                "user_id": user_id,
                "chat_id": chat_id,
                "content": content,
                "content_hash": digest,
                "pinecone_id": vector_id,
                "memory_type": memory_type.value,
                "privacy_level": privacy_level.value,
                "category": category,
                "tags": tags,
                "importance": importance,
                "strength": INITIAL_STRENGTH,
                "decay_rate": decay_rate,
                "is_permanent": is_permanent,
                "requires_auth": requires_auth,
                "metadata": {
                    "source": "chat",
                    "context": f"chat:{chat_id}" if chat_id else "manual",
                },
            })

            logger.info(
                f"Stored memory {memory['id']} in {memory_mode.value} mode (decay: {decay_rate})",
                extra={"user_id": user_id, "privacy_level": privacy_level.value},
            )
            return memory["id"]

    # =========================================================================
    # SEARCH
    # =========================================================================

    async def search_memories(
        self,
        user_id: str,
        query: str,
        options: Optional[SearchOptions] = None,
    ) -> List[Dict[str, Any]]:
        """
        Recall memories by semantic similarity.

        Results are degraded (humanized mode), focus-boosted (active focus
        session) and sorted by the final score. Every returned memory has its
        access count bumped.

        Returns:
            Matches as {"id", "vector_id", "score", "metadata"} dicts, where id
            is the memory row ID; empty when Pinecone
            is not configured
        """
        if not self.initialized:
            logger.warning("Search skipped - Pinecone not configured")
            return []

        options = options or SearchOptions()

        with tracer.start_as_current_span("memory.search") as span:
            span.set_attribute("memory.user_id", user_id)
            span.set_attribute("memory.top_k", options.top_k)

            self.vector_store.ensure_index()
            query_embedding = await self.embedder.embed(query)
            memory_mode = await self.get_memory_mode(user_id)

            matches = self.vector_store.query(
                vector=query_embedding,
                filter=scoring.build_search_filter(user_id, options),
                top_k=options.top_k,
            )

            if memory_mode == MemoryMode.HUMANIZED:
                matches = scoring.apply_degradation(matches)

            focus = await self.get_active_focus(user_id)
            if focus:
                matches = scoring.apply_focus_boost(matches, focus)

            matches = scoring.rank(matches)

            # Callers address memories by row ID; the vector ID stays available
            for match in matches:
                match["vector_id"] = match["id"]
                match["id"] = match["metadata"].get("memoryId") or match["id"]

            hashes = [
                m["metadata"]["contentHash"]
                for m in matches
                if m.get("metadata", {}).get("contentHash")
            ]
            if hashes:
                self.db.memories.record_access(user_id, hashes)

            span.set_attribute("memory.results", len(matches))
            logger.debug(f"Found {len(matches)} memories for query: {preview(query, 30)}")
            return matches

    # =========================================================================
    # FOCUS MODE
    # =========================================================================

    async def activate_focus_mode(self, user_id: str, config: FocusModeConfig) -> str:
        """
        Start a focus session, replacing any active one.

        Returns:
            Focus session ID
        """
        if not config.categories:
            raise ValueError("Categories array is required")
        if config.duration_hours <= 0:
            raise ValueError("Duration must be positive")

        self.db.focus_sessions.deactivate_all(user_id)

        expires_at = datetime.now(timezone.utc) + timedelta(hours=config.duration_hours)
        session = self.db.focus_sessions.create({
            "user_id": user_id,
            "categories": list(config.categories),
            "boost_factor": int(round(config.boost_factor * 100)),
            "duration_hours": config.duration_hours,
            "expires_at": expires_at.isoformat(),
        })

        logger.info(f"Focus mode activated for {', '.join(config.categories)}")
        return session["id"]

    async def deactivate_focus_mode(self, user_id: str) -> None:
        self.db.focus_sessions.deactivate_all(user_id)
        logger.info(f"Focus mode deactivated for user {user_id}")

    async def get_active_focus(self, user_id: str) -> Optional[FocusModeConfig]:
        """The active, unexpired focus session as a config (200 -> 2.0x)."""
        session = self.db.focus_sessions.get_active(user_id)
        if not session:
            return None

        return FocusModeConfig(
            categories=list(session.get("categories") or []),
            boost_factor=(session.get("boost_factor") or 100) / 100,
            duration_hours=session.get("duration_hours") or 0,
        )

    # =========================================================================
    # MANAGEMENT
    # =========================================================================

    async def get_memory_stats(self, user_id: str) -> Dict[str, Any]:
        return scoring.summarize_stats(self.db.memories.list_for_stats(user_id))

    async def list_memories(
        self,
        user_id: str,
        limit: int = 50,
        memory_type: Optional[str] = None,
        privacy_level: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        return self.db.memories.list_for_user(
            user_id,
            limit=limit,
            memory_type=MemoryType(memory_type).value if memory_type else None,
            privacy_level=PrivacyLevel(privacy_level).value if privacy_level else None,
        )

    async def delete_memory(self, user_id: str, memory_id: str) -> bool:
        """
        Forget a memory: remove its row, then its vector.

        Args:
            memory_id: Row ID, or the Pinecone vector ID of the memory

        Returns:
            False if the memory does not exist or belongs to another user
        """
        if _is_uuid(memory_id):
            memory = self.db.memories.get(user_id, memory_id)
        else:
            memory = self.db.memories.get_by_pinecone_id(user_id, memory_id)
        if not memory:
            return False

        self.db.memories.delete(memory["id"])

        pinecone_id = memory.get("pinecone_id")
        if pinecone_id and self.initialized:
            try:
                self.vector_store.delete([pinecone_id])
            except Exception as e:
                logger.error(f"Deleted memory {memory['id']} but its vector {pinecone_id} remains: {e}")

        logger.info(f"Deleted memory {memory['id']}")
        return True


# Singleton instance
_memory_system: Optional[PineconeMemorySystem] = None


def get_memory_system() -> PineconeMemorySystem:
    """Get or create the memory system singleton."""
    global _memory_system
    if _memory_system is None:
        _memory_system = PineconeMemorySystem()
    return _memory_system
