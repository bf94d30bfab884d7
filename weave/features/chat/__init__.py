"""Chat feature module."""

from weave.features.chat.service import ChatService, ChatRequest, ChatResponse, get_chat_service
from weave.features.chat.tools import TOOLS, execute_tool

__all__ = [
    "ChatService",
    "ChatRequest",
    "ChatResponse",
    "get_chat_service",
    "TOOLS",
    "execute_tool",
]
