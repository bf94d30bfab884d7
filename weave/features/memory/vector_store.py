"""
Pinecone vector index holding one vector per memory.

The index is created on first use (serverless, cosine metric). Query results
are normalized to plain dicts: {"id", "score", "metadata"}.
"""

import logging
from typing import Any, Dict, List, Optional

from pinecone import Pinecone, ServerlessSpec

from weave.core.config import settings

logger = logging.getLogger("Weave.Memory.Pinecone")


def _match_to_dict(match: Any) -> Dict[str, Any]:
    if isinstance(match, dict):
        return {
            "id": match.get("id"),
            "score": match.get("score") or 0,
            "metadata": dict(match.get("metadata") or {}),
        }
    return {
        "id": getattr(match, "id", None),
        "score": getattr(match, "score", None) or 0,
        "metadata": dict(getattr(match, "metadata", None) or {}),
    }


class PineconeVectorStore:
    """Thin wrapper around a single Pinecone index."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        index_name: Optional[str] = None,
        dimension: Optional[int] = None,
        cloud: Optional[str] = None,
        region: Optional[str] = None,
        client: Optional[Pinecone] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.PINECONE_API_KEY
        self.index_name = index_name or settings.PINECONE_INDEX_NAME
        self.dimension = dimension or settings.EMBEDDING_DIMENSIONS
        self.cloud = cloud or settings.PINECONE_CLOUD
        self.region = region or settings.PINECONE_REGION

        self._client = client
        self._index = None
        self._index_ready = False

        if self._client is None and self.api_key:
            self._client = Pinecone(api_key=self.api_key)
            logger.info("Pinecone initialized successfully")
        elif self._client is None:
            logger.warning("Pinecone API key not configured - memory system disabled")

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    def ensure_index(self) -> None:
        """Create the index if it does not exist yet."""
        if self._index_ready:
            return
        if self._client is None:
            from weave.shared.errors import MemorySystemNotConfigured
            raise MemorySystemNotConfigured("Pinecone not initialized - add PINECONE_API_KEY to .env")

        existing = self._client.list_indexes().names()
        if self.index_name not in existing:
            logger.info(f"Creating Pinecone index: {self.index_name}")
            self._client.create_index(
                name=self.index_name,
                dimension=self.dimension,
                metric="cosine",
                spec=ServerlessSpec(cloud=self.cloud, region=self.region),
            )
            logger.info("Index created successfully")

        self._index = self._client.Index(self.index_name)
        self._index_ready = True

    @property
    def index(self):
        self.ensure_index()
        return self._index

    def upsert(self, vector_id: str, values: List[float], metadata: Dict[str, Any]) -> None:
        self.index.upsert(vectors=[{"id": vector_id, "values": values, "metadata": metadata}])

    def query(
        self,
        vector: List[float],
        filter: Dict[str, Any],
        top_k: int = 10,
    ) -> List[Dict[str, Any]]:
        response = self.index.query(
            vector=vector,
            filter=filter,
            top_k=top_k,
            include_metadata=True,
        )
        matches = response.get("matches") if isinstance(response, dict) else getattr(response, "matches", None)
        return [_match_to_dict(m) for m in matches or []]

    def delete(self, vector_ids: List[str]) -> None:
        if vector_ids:
            self.index.delete(ids=vector_ids)
