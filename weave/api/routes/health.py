from fastapi import APIRouter, Depends

from weave.api.dependencies import get_memory
from weave.features.memory import PineconeMemorySystem

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(memory: PineconeMemorySystem = Depends(get_memory)):
    """Simple health endpoint for monitoring."""
    return {
        "status": "healthy",
        "memory": "configured" if memory.initialized else "not_configured",
    }
