from typing import Optional

from fastapi import Header, HTTPException

from weave.features.chat import ChatService, get_chat_service
from weave.features.database import DatabaseClient, get_database_client
from weave.features.linear import LinearClient, get_linear_client
from weave.features.memory import PineconeMemorySystem, get_memory_system
from weave.shared.constants import USER_ID_HEADER


def get_memory() -> PineconeMemorySystem:
    """Provide the memory system singleton for request handlers."""
    return get_memory_system()


def get_database() -> DatabaseClient:
    """Provide the Supabase repositories for request handlers."""
    return get_database_client()


def get_linear() -> LinearClient:
    return get_linear_client()


def get_chat() -> ChatService:
    return get_chat_service()


def get_user_id(x_user_id: Optional[str] = Header(default=None, alias=USER_ID_HEADER)) -> str:
    """The acting tenant. Authentication happens upstream; the header is trusted."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Unauthorized")
    return x_user_id.strip()
