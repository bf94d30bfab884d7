"""
Embedding generation for memories and queries.
"""

import logging
from typing import List, Optional

from openai import AsyncOpenAI

from weave.core.config import settings
from weave.core.retry import retry_with_backoff

logger = logging.getLogger("Weave.Memory.Embeddings")


class EmbeddingService:
    """Turns text into vectors with the configured OpenAI embedding model."""

    def __init__(
        self,
        client: Optional[AsyncOpenAI] = None,
        model: Optional[str] = None,
        dimensions: Optional[int] = None,
    ):
        self._client = client
        self.model = model or settings.EMBEDDING_MODEL
        self.dimensions = dimensions or settings.EMBEDDING_DIMENSIONS

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            from weave.services.openai_client import get_openai_client
            self._client = get_openai_client()
        return self._client

    async def embed(self, text: str) -> List[float]:
        """Embed a single text, retrying transient OpenAI failures."""
        response = await retry_with_backoff(
            lambda: self.client.embeddings.create(model=self.model, input=text),
            operation="embedding",
        )
        embedding = response.data[0].embedding
        logger.debug(f"Generated {len(embedding)}-dim embedding with {self.model}")
        return embedding
