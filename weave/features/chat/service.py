"""
Chat Service - Conversational AI with memory.

Each message:
1. Recalls the user's relevant (non-private) memories and adds them to the
   system prompt
2. Calls Claude with the memory tools
3. Executes tool calls in a loop until Claude answers (bounded by MAX_TOOL_CALLS)
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import anthropic
from pydantic import BaseModel, Field

from weave.core.config import settings
from weave.core.logging_utils import preview
from weave.features.chat.tools import TOOLS, execute_tool
from weave.features.memory import SearchOptions

logger = logging.getLogger("Weave.Chat")

MAX_TOOL_CALLS = 5  # Prevent infinite loops
MAX_HISTORY_MESSAGES = 10
MEMORY_CONTEXT_LIMIT = 5


class ChatMessage(BaseModel):
    """A single message in the conversation."""
    role: str  # "user" or "assistant"
    content: str


class ChatRequest(BaseModel):
    """Request to the chat endpoint."""
    message: str
    chat_id: Optional[str] = None
    conversation_history: List[ChatMessage] = Field(default_factory=list)
    use_memory: bool = True


class ChatResponse(BaseModel):
    """Response from the chat endpoint."""
    response: str
    tools_used: List[str] = Field(default_factory=list)
    memories_used: int = 0
    error: Optional[str] = None


# =============================================================================
# SYSTEM PROMPT
# =============================================================================

SYSTEM_PROMPT_TEMPLATE = """You are Weave, an AI assistant for agencies and their clients, with a long-term memory of the user.

CURRENT CONTEXT:
- Date: {current_date}
- Time: {current_time} (UTC)

AVAILABLE TOOLS:
- **store_memory**: save facts, preferences and decisions worth keeping
- **search_memories**: recall what you know about a topic
- **activate_focus_mode / deactivate_focus_mode**: prioritize memories about one client or project
- **set_memory_mode**: persistent (keep everything) or humanized (unimportant memories fade)
- **get_memory_stats**: summarize what you remember
- **forget_memory**: delete a memory by ID
- **linear_create_issue / linear_update_issue**: create or change issues in the user's connected Linear teams
- **linear_add_comment**: comment on a synced Linear issue
- **linear_get_team_states / linear_get_team_members**: look up status IDs and people before updating issues

GUIDELINES:
1. **Remember proactively** - Store durable facts the user shares, with an honest importance
2. **Respect privacy** - Use private or vault for sensitive information; never reveal private memories unless asked
3. **Be concise** - Answer directly, then offer detail
4. **No results = say so** - Don't invent memories
{memory_context}"""


def format_memory_context(matches: List[Dict[str, Any]]) -> str:
    """Render recalled memories as a system prompt section."""
    if not matches:
        return ""

    lines = ["", "RELEVANT MEMORIES:"]
    for match in matches:
        metadata = match.get("metadata") or {}
        category = metadata.get("category")
        prefix = f"[{category}] " if category else ""
        lines.append(f"- {prefix}{metadata.get('content', '')} (id: {match.get('id')})")
    return "\n".join(lines)


# =============================================================================
# CHAT PROCESSING
# =============================================================================

class ChatService:
    """Handles conversational AI with tool use."""

    def __init__(self, client: Optional[anthropic.AsyncAnthropic] = None, memory_system=None):
        self.client = client or anthropic.AsyncAnthropic(api_key=settings.ANTHROPIC_API_KEY)
        self._memory_system = memory_system

    @property
    def memory_system(self):
        if self._memory_system is None:
            from weave.features.memory import get_memory_system
            self._memory_system = get_memory_system()
        return self._memory_system

    async def _recall(self, user_id: str, message: str) -> List[Dict[str, Any]]:
        """Relevant memories for the prompt; recall failures never block chat."""
        try:
            return await self.memory_system.search_memories(
                user_id, message, SearchOptions(top_k=MEMORY_CONTEXT_LIMIT)
            )
        except Exception as e:
            logger.warning(f"Memory recall failed, continuing without context: {e}")
            return []

    def _build_system_prompt(self, memories: List[Dict[str, Any]]) -> str:
        """Build system prompt with current date/time and recalled memories."""
        now = datetime.now(timezone.utc)
        return SYSTEM_PROMPT_TEMPLATE.format(
            current_date=now.strftime("%A, %B %d, %Y"),
            current_time=now.strftime("%I:%M %p"),
            memory_context=format_memory_context(memories),
        )

    async def process_message(self, user_id: str, request: ChatRequest) -> ChatResponse:
        """Process a user message and return a response."""
        try:
            memories = await self._recall(user_id, request.message) if request.use_memory else []
            system_prompt = self._build_system_prompt(memories)

            messages: List[Dict[str, Any]] = [
                {"role": msg.role, "content": msg.content}
                for msg in request.conversation_history[-MAX_HISTORY_MESSAGES:]
            ]
            messages.append({"role": "user", "content": request.message})

            tools_used: List[str] = []
            tool_call_count = 0

            while tool_call_count < MAX_TOOL_CALLS:
                response = await self.client.messages.create(
                    model=settings.CLAUDE_CHAT_MODEL,
                    max_tokens=2000,
                    system=system_prompt,
                    tools=TOOLS,
                    messages=messages,
                )

                if response.stop_reason != "tool_use":
                    final_response = "".join(
                        block.text for block in response.content if getattr(block, "type", None) == "text"
                    )
                    return ChatResponse(
                        response=final_response,
                        tools_used=list(dict.fromkeys(tools_used)),
                        memories_used=len(memories),
                    )

                tool_call_count += 1
                tool_results = []

                for block in response.content:
                    if block.type != "tool_use":
                        continue

                    logger.info(f"Tool call: {block.name} with input: {preview(json.dumps(block.input), 200)}")
                    tools_used.append(block.name)

                    tool_input = dict(block.input)
                    if block.name == "store_memory" and request.chat_id:
                        tool_input.setdefault("chat_id", request.chat_id)

                    result = await execute_tool(block.name, tool_input, user_id)
                    tool_results.append({
                        "type": "tool_result",
                        "tool_use_id": block.id,
                        "content": json.dumps(result, default=str),
                    })

                messages.append({"role": "assistant", "content": response.content})
                messages.append({"role": "user", "content": tool_results})

            # Max tool calls reached
            return ChatResponse(
                response="I've done a lot of work on this but couldn't finish. Could you try a more specific question?",
                tools_used=list(dict.fromkeys(tools_used)),
                memories_used=len(memories),
                error="max_tool_calls_reached",
            )

        except anthropic.APIError as e:
            logger.error(f"Anthropic API error: {e}")
            return ChatResponse(
                response="Sorry, I'm having trouble reaching the model. Please try again.",
                error=str(e),
            )


# Singleton instance
_chat_service: Optional[ChatService] = None


def get_chat_service() -> ChatService:
    """Get or create the chat service singleton."""
    global _chat_service
    if _chat_service is None:
        _chat_service = ChatService()
    return _chat_service
