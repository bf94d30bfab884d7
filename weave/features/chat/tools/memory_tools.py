"""
Memory Tools for Chat.

This module contains tools that let Claude use the memory engine on the
user's behalf: storing and recalling memories, focus mode, switching the
memory mode and forgetting.
"""

import logging
from typing import Any, Dict

from weave.core.logging_utils import preview
from weave.features.memory import FocusModeConfig, SearchOptions, get_memory_system

logger = logging.getLogger("Weave.Chat.Tools.Memory")


# =============================================================================
# TOOL DEFINITIONS
# =============================================================================

MEMORY_TOOLS = [
    {
        "name": "store_memory",
        "description": """Store something worth remembering about the user for future conversations.
Use when the user shares preferences, facts about their work or life, decisions, or asks you to remember something.

Importance guides how long the memory lasts in humanized mode: 10 never fades, 0 fades fast.

Examples:
- "I prefer morning meetings" (importance 6, category "preferences")
- "Acme's launch is March 3rd" (importance 8, category "clients/acme")
- "My bank PIN hint is..." (privacy "vault")""",
        "input_schema": {
            "type": "object",
            "properties": {
                "content": {
                    "type": "string",
                    "description": "The information to remember"
                },
                "category": {
                    "type": "string",
                    "description": "Category such as 'work', 'preferences' or 'clients/acme'"
                },
                "importance": {
                    "type": "number",
                    "minimum": 0,
                    "maximum": 10,
                    "description": "0-10, default 5"
                },
                "privacy_level": {
                    "type": "string",
                    "enum": ["public", "contextual", "private", "vault"],
                    "description": "Default contextual. Private memories are only recalled when asked for."
                },
                "tags": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Tags; private memories can be recalled by tag"
                },
                "memory_type": {
                    "type": "string",
                    "enum": ["working", "consolidated", "wisdom"],
                    "description": "Default working"
                }
            },
            "required": ["content"]
        }
    },
    {
        "name": "search_memories",
        "description": """Search the user's memories by meaning.
Use when you need to recall what you know about a topic, person or project.""",
        "input_schema": {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "What to recall"
                },
                "limit": {
                    "type": "integer",
                    "description": "Max results",
                    "default": 5
                },
                "categories": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Only memories in these categories"
                },
                "include_private": {
                    "type": "boolean",
                    "description": "Also recall private memories (only when the user asks)",
                    "default": False
                },
                "private_tags": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Limit private recall to memories with these tags"
                }
            },
            "required": ["query"]
        }
    },
    {
        "name": "activate_focus_mode",
        "description": """Boost memories in some categories for a few hours.
Use when the user says they are working on a specific client, project or topic.""",
        "input_schema": {
            "type": "object",
            "properties": {
                "categories": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Categories to focus on"
                },
                "boost_factor": {
                    "type": "number",
                    "description": "Score multiplier, default 2.0",
                    "default": 2.0
                },
                "duration_hours": {
                    "type": "integer",
                    "description": "How long the focus lasts, default 4",
                    "default": 4
                }
            },
            "required": ["categories"]
        }
    },
    {
        "name": "deactivate_focus_mode",
        "description": "End the current focus session.",
        "input_schema": {
            "type": "object",
            "properties": {},
            "required": []
        }
    },
    {
        "name": "set_memory_mode",
        "description": """Switch how memories age.
- persistent: remember everything forever
- humanized: unimportant memories fade over months""",
        "input_schema": {
            "type": "object",
            "properties": {
                "mode": {
                    "type": "string",
                    "enum": ["persistent", "humanized"]
                }
            },
            "required": ["mode"]
        }
    },
    {
        "name": "get_memory_stats",
        "description": "Summarize the user's memories: counts by type and privacy, average importance and strength.",
        "input_schema": {
            "type": "object",
            "properties": {},
            "required": []
        }
    },
    {
        "name": "forget_memory",
        "description": """Delete a memory by ID.
Use search_memories first to find the ID when the user asks you to forget something.""",
        "input_schema": {
            "type": "object",
            "properties": {
                "memory_id": {
                    "type": "string",
                    "description": "ID of the memory to delete"
                }
            },
            "required": ["memory_id"]
        }
    },
]


# =============================================================================
# TOOL IMPLEMENTATIONS
# =============================================================================

async def _store_memory(tool_input: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    """Store a memory for the user."""
    content = (tool_input.get("content") or "").strip()
    if not content:
        return {"error": "No content provided to remember"}

    memory_id = await get_memory_system().store_memory(
        user_id=user_id,
        content=content,
        chat_id=tool_input.get("chat_id"),
        privacy_level=tool_input.get("privacy_level") or "contextual",
        category=tool_input.get("category"),
        tags=tool_input.get("tags") or [],
        importance=tool_input.get("importance"),
        memory_type=tool_input.get("memory_type") or "working",
    )
    return {
        "status": "remembered",
        "memory_id": memory_id,
        "message": f"Remembered: '{preview(content, 80)}'"
    }


async def _search_memories(tool_input: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    """Search the user's memories."""
    query = (tool_input.get("query") or "").strip()
    if not query:
        return {"error": "No search query provided"}

    options = SearchOptions(
        top_k=tool_input.get("limit", 5),
        include_private=bool(tool_input.get("include_private", False)),
        private_tags=tool_input.get("private_tags") or [],
        categories=tool_input.get("categories") or [],
    )
    matches = await get_memory_system().search_memories(user_id, query, options)

    if not matches:
        return {
            "status": "no_results",
            "message": f"I don't have any memories about '{query}'",
            "memories": []
        }

    memories = []
    for match in matches:
        metadata = match.get("metadata") or {}
        memories.append({
            "id": match.get("id"),
            "content": metadata.get("content", ""),
            "category": metadata.get("category") or None,
            "importance": metadata.get("importance"),
            "score": round(match.get("score") or 0, 4),
            "created_at": metadata.get("timestamp"),
        })

    return {
        "status": "found",
        "count": len(memories),
        "memories": memories,
        "message": f"Found {len(memories)} memories about '{query}'"
    }


async def _activate_focus_mode(tool_input: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    categories = tool_input.get("categories") or []
    if not categories:
        return {"error": "Provide at least one category to focus on"}

    config = FocusModeConfig(
        categories=categories,
        boost_factor=tool_input.get("boost_factor", 2.0),
        duration_hours=tool_input.get("duration_hours", 4),
    )
    session_id = await get_memory_system().activate_focus_mode(user_id, config)
    return {
        "status": "focused",
        "session_id": session_id,
        "message": f"Focus mode on for {', '.join(categories)} ({config.duration_hours}h, {config.boost_factor}x)"
    }


async def _deactivate_focus_mode(tool_input: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    await get_memory_system().deactivate_focus_mode(user_id)
    return {"status": "unfocused", "message": "Focus mode deactivated"}


async def _set_memory_mode(tool_input: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    mode = tool_input.get("mode")
    if mode not in ("persistent", "humanized"):
        return {"error": "Mode must be 'persistent' or 'humanized'"}

    new_mode = await get_memory_system().toggle_memory_mode(user_id, mode)
    return {"status": "updated", "mode": new_mode.value, "message": f"Memory mode set to {new_mode.value}"}


async def _get_memory_stats(tool_input: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    stats = await get_memory_system().get_memory_stats(user_id)
    return {"status": "ok", "stats": stats}


async def _forget_memory(tool_input: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    """Delete a memory by ID."""
    memory_id = (tool_input.get("memory_id") or "").strip()
    if not memory_id:
        return {"error": "Provide memory_id to specify what to forget"}

    deleted = await get_memory_system().delete_memory(user_id, memory_id)
    if not deleted:
        return {
            "status": "FAILED",
            "error": f"No memory with ID {memory_id} - nothing was deleted",
        }

    logger.info(f"Forgot memory {memory_id} for user {user_id}")
    return {"status": "deleted", "deleted_id": memory_id, "message": f"Deleted memory {memory_id}"}
