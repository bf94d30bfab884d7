"""
Memory API Routes

Provides endpoints for:
- Storing memories
- Searching memories (with degradation and focus boost applied)
- Focus mode (activate, deactivate, inspect)
- Memory mode and statistics
- Listing and deleting memories
"""

import logging
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from weave.api.dependencies import get_memory, get_user_id
from weave.features.memory import FocusModeConfig, PineconeMemorySystem, SearchOptions
from weave.shared.errors import WeaveError

router = APIRouter(tags=["Memory"])
logger = logging.getLogger("Weave.API.Memory")


# ============================================================================
# REQUEST MODELS
# ============================================================================

class StoreMemoryRequest(BaseModel):
    """Request to store a memory."""
    content: Optional[str] = Field(default=None, description="The memory content in natural language")
    chat_id: Optional[str] = None
    privacy_level: Literal["public", "contextual", "private", "vault"] = "contextual"
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    importance: Optional[float] = Field(default=None, description="0-10, default 5")
    memory_type: Literal["working", "consolidated", "wisdom"] = "working"

    class Config:
        json_schema_extra = {
            "example": {
                "content": "Acme prefers async updates over meetings",
                "category": "clients/acme",
                "importance": 7,
            }
        }


class SearchMemoryRequest(BaseModel):
    """Request to search memories."""
    query: Optional[str] = Field(default=None, description="Natural language search query")
    top_k: int = Field(default=10, ge=1, le=100)
    include_private: bool = False
    private_tags: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    memory_types: List[Literal["working", "consolidated", "wisdom"]] = Field(default_factory=list)
    min_importance: Optional[float] = None


class FocusModeRequest(BaseModel):
    categories: List[str] = Field(default_factory=list)
    boost_factor: float = Field(default=2.0, gt=0)
    duration_hours: int = Field(default=4, gt=0)


class MemoryModeRequest(BaseModel):
    mode: Optional[str] = None


# ============================================================================
# STORE / SEARCH
# ============================================================================

@router.post("/memory/store")
async def store_memory(
    request: StoreMemoryRequest,
    user_id: str = Depends(get_user_id),
    memory: PineconeMemorySystem = Depends(get_memory),
):
    """Store a memory. Identical content returns the existing memory's ID."""
    if not request.content or not request.content.strip():
        raise HTTPException(status_code=400, detail="Content is required")

    try:
        memory_id = await memory.store_memory(
            user_id=user_id,
            content=request.content,
            chat_id=request.chat_id,
            privacy_level=request.privacy_level,
            category=request.category,
            tags=request.tags,
            importance=request.importance,
            memory_type=request.memory_type,
        )
    except WeaveError:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Failed to store memory")
        raise HTTPException(status_code=500, detail=str(e))

    return {
        "success": True,
        "memory_id": memory_id,
        "message": "Memory stored successfully",
    }


@router.post("/memory/search")
async def search_memories(
    request: SearchMemoryRequest,
    user_id: str = Depends(get_user_id),
    memory: PineconeMemorySystem = Depends(get_memory),
):
    if not request.query or not request.query.strip():
        raise HTTPException(status_code=400, detail="Query string is required")

    options = SearchOptions(
        top_k=request.top_k,
        include_private=request.include_private,
        private_tags=request.private_tags,
        categories=request.categories,
        memory_types=list(request.memory_types),
        min_importance=request.min_importance,
    )

    try:
        results = await memory.search_memories(user_id, request.query, options)
    except Exception as e:
        logger.exception("Failed to search memories")
        raise HTTPException(status_code=500, detail=str(e))

    return {
        "success": True,
        "query": request.query,
        "results": results,
        "count": len(results),
    }


# ============================================================================
# FOCUS MODE
# ============================================================================

@router.post("/memory/focus")
async def activate_focus_mode(
    request: FocusModeRequest,
    user_id: str = Depends(get_user_id),
    memory: PineconeMemorySystem = Depends(get_memory),
):
    if not request.categories:
        raise HTTPException(status_code=400, detail="Categories array is required")

    config = FocusModeConfig(
        categories=request.categories,
        boost_factor=request.boost_factor,
        duration_hours=request.duration_hours,
    )
    try:
        session_id = await memory.activate_focus_mode(user_id, config)
    except Exception as e:
        logger.exception("Failed to activate focus mode")
        raise HTTPException(status_code=500, detail=str(e))

    return {
        "success": True,
        "session_id": session_id,
        "categories": request.categories,
        "boost_factor": request.boost_factor,
        "duration_hours": request.duration_hours,
        "message": f"Focus mode activated for: {', '.join(request.categories)}",
    }


@router.delete("/memory/focus")
async def deactivate_focus_mode(
    user_id: str = Depends(get_user_id),
    memory: PineconeMemorySystem = Depends(get_memory),
):
    try:
        await memory.deactivate_focus_mode(user_id)
    except Exception as e:
        logger.exception("Failed to deactivate focus mode")
        raise HTTPException(status_code=500, detail=str(e))

    return {"success": True, "message": "Focus mode deactivated"}


@router.get("/memory/focus")
async def get_focus_mode(
    user_id: str = Depends(get_user_id),
    memory: PineconeMemorySystem = Depends(get_memory),
):
    focus = await memory.get_active_focus(user_id)
    if not focus:
        return {"active": False}

    return {
        "active": True,
        "categories": focus.categories,
        "boost_factor": focus.boost_factor,
        "duration_hours": focus.duration_hours,
    }


# ============================================================================
# MODE / STATS
# ============================================================================

@router.post("/memory/mode")
async def set_memory_mode(
    request: MemoryModeRequest,
    user_id: str = Depends(get_user_id),
    memory: PineconeMemorySystem = Depends(get_memory),
):
    if request.mode not in ("persistent", "humanized"):
        raise HTTPException(status_code=400, detail='Invalid mode. Must be "persistent" or "humanized"')

    try:
        await memory.toggle_memory_mode(user_id, request.mode)
    except Exception as e:
        logger.exception("Failed to toggle memory mode")
        raise HTTPException(status_code=500, detail=str(e))

    return {
        "success": True,
        "mode": request.mode,
        "message": f"Memory mode switched to {request.mode}",
    }


@router.get("/memory/mode")
async def get_memory_stats(
    user_id: str = Depends(get_user_id),
    memory: PineconeMemorySystem = Depends(get_memory),
):
    """Memory statistics for the user."""
    try:
        stats = await memory.get_memory_stats(user_id)
    except Exception as e:
        logger.exception("Failed to get memory stats")
        raise HTTPException(status_code=500, detail=str(e))

    return {"stats": stats}


# ============================================================================
# LIST / DELETE
# ============================================================================

@router.get("/memory")
async def list_memories(
    limit: int = 50,
    memory_type: Optional[Literal["working", "consolidated", "wisdom"]] = None,
    privacy_level: Optional[Literal["public", "contextual", "private", "vault"]] = None,
    user_id: str = Depends(get_user_id),
    memory: PineconeMemorySystem = Depends(get_memory),
):
    """List the user's memories, newest first."""
    memories = await memory.list_memories(
        user_id,
        limit=min(max(limit, 1), 200),
        memory_type=memory_type,
        privacy_level=privacy_level,
    )
    return {"success": True, "count": len(memories), "memories": memories}


@router.delete("/memory/{memory_id}")
async def delete_memory(
    memory_id: str,
    user_id: str = Depends(get_user_id),
    memory: PineconeMemorySystem = Depends(get_memory),
):
    deleted = await memory.delete_memory(user_id, memory_id)
    if not deleted:
        raise HTTPException(status_code=404, detail=f"Memory not found: {memory_id}")

    return {"success": True, "memory_id": memory_id, "message": "Memory deleted"}
