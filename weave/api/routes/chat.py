"""
Chat API Routes.

Conversational endpoint backed by Claude with the user's memories as context.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from weave.api.dependencies import get_chat, get_user_id
from weave.core.config import settings
from weave.features.chat import ChatRequest, ChatResponse, ChatService

logger = logging.getLogger("Weave.API.Chat")
router = APIRouter(tags=["Chat"])


@router.post("/chat", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    user_id: str = Depends(get_user_id),
    service: ChatService = Depends(get_chat),
):
    """
    Process a conversational message with tool use.

    Relevant memories are recalled into the prompt, and Claude can store,
    search and forget memories or switch focus and memory mode through tools.

    Example requests:
    - "Remember that Acme's launch moved to March 3rd"
    - "What do you know about Acme?"
    - "I'm working on Acme for the next two hours"
    """
    if not request.message or not request.message.strip():
        raise HTTPException(status_code=400, detail="Message is required")

    try:
        response = await service.process_message(user_id, request)
    except Exception as e:
        logger.exception("Chat endpoint error")
        raise HTTPException(status_code=500, detail=str(e))

    logger.info(f"Chat processed. Tools used: {response.tools_used}")
    return response


@router.get("/chat/health")
async def chat_health():
    """Check if chat service is configured."""
    return {
        "status": "ok" if settings.ANTHROPIC_API_KEY else "not_configured",
        "model": settings.CLAUDE_CHAT_MODEL,
    }
