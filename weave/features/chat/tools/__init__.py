"""
Chat Tools Package.

This package provides all tools available to the Claude chat interface.
Tools are organized by domain into separate modules.

Usage:
    from weave.features.chat.tools import TOOLS, execute_tool

    result = await execute_tool("search_memories", {"query": "acme"}, user_id)

Modules:
    - memory_tools: Memory engine (store, recall, focus, mode, forget)
    - linear_tools: Linear issues (create, update, comment, team lookups)
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List

from weave.core.logging_utils import sanitize_for_logging

from .memory_tools import MEMORY_TOOLS
from .memory_tools import (
    _store_memory, _search_memories, _activate_focus_mode,
    _deactivate_focus_mode, _set_memory_mode, _get_memory_stats,
    _forget_memory,
)
from .linear_tools import LINEAR_TOOLS
from .linear_tools import (
    _linear_create_issue, _linear_update_issue, _linear_add_comment,
    _linear_get_team_states, _linear_get_team_members,
)

logger = logging.getLogger("Weave.Chat.Tools")


# =============================================================================
# COMBINED TOOLS LIST
# =============================================================================

TOOLS: List[Dict[str, Any]] = MEMORY_TOOLS + LINEAR_TOOLS

ToolHandler = Callable[[Dict[str, Any], str], Awaitable[Dict[str, Any]]]

TOOL_HANDLERS: Dict[str, ToolHandler] = {
    "store_memory": _store_memory,
    "search_memories": _search_memories,
    "activate_focus_mode": _activate_focus_mode,
    "deactivate_focus_mode": _deactivate_focus_mode,
    "set_memory_mode": _set_memory_mode,
    "get_memory_stats": _get_memory_stats,
    "forget_memory": _forget_memory,
    "linear_create_issue": _linear_create_issue,
    "linear_update_issue": _linear_update_issue,
    "linear_add_comment": _linear_add_comment,
    "linear_get_team_states": _linear_get_team_states,
    "linear_get_team_members": _linear_get_team_members,
}


# =============================================================================
# TOOL EXECUTION
# =============================================================================

async def execute_tool(tool_name: str, tool_input: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    """Execute a tool for a user and return the result.

    Tool failures are returned to the model as {"error": ...} rather than
    raised, so the conversation can continue.
    """
    handler = TOOL_HANDLERS.get(tool_name)
    if handler is None:
        return {"error": f"Unknown tool: {tool_name}"}

    logger.info(f"Executing tool {tool_name}", extra={"tool_input": sanitize_for_logging(tool_input)})
    try:
        return await handler(tool_input, user_id)
    except Exception as e:
        logger.error(f"Tool execution error [{tool_name}]: {e}")
        return {"error": str(e)}


__all__ = [
    "TOOLS",
    "TOOL_HANDLERS",
    "MEMORY_TOOLS",
    "LINEAR_TOOLS",
    "execute_tool",
]
