"""Tests for the chat tool registry and memory tools."""

import pytest

from weave.features.chat.tools import TOOL_HANDLERS, TOOLS, execute_tool


@pytest.fixture(autouse=True)
def use_memory_system(monkeypatch, memory_system):
    monkeypatch.setattr(
        "weave.features.chat.tools.memory_tools.get_memory_system",
        lambda: memory_system,
    )


class TestToolDefinitions:

    def test_all_tools_present(self):
        names = {tool["name"] for tool in TOOLS}
        assert names == {
            "store_memory",
            "search_memories",
            "activate_focus_mode",
            "deactivate_focus_mode",
            "set_memory_mode",
            "get_memory_stats",
            "forget_memory",
            "linear_create_issue",
            "linear_update_issue",
            "linear_add_comment",
            "linear_get_team_states",
            "linear_get_team_members",
        }

    def test_every_tool_has_a_handler(self):
        assert {tool["name"] for tool in TOOLS} == set(TOOL_HANDLERS)

    def test_schemas_are_objects(self):
        for tool in TOOLS:
            assert tool["input_schema"]["type"] == "object"
            assert tool["description"]


class TestExecuteTool:

    @pytest.mark.asyncio
    async def test_unknown_tool(self, user_id):
        assert await execute_tool("launch_rocket", {}, user_id) == {"error": "Unknown tool: launch_rocket"}

    @pytest.mark.asyncio
    async def test_store_and_search(self, user_id):
        stored = await execute_tool(
            "store_memory", {"content": "Acme launch is March 3rd", "category": "acme", "importance": 8}, user_id
        )
        assert stored["status"] == "remembered"

        found = await execute_tool("search_memories", {"query": "acme launch"}, user_id)
        assert found["status"] == "found"
        assert found["memories"][0]["id"]
        assert found["memories"][0]["content"] == "Acme launch is March 3rd"

    @pytest.mark.asyncio
    async def test_search_without_results(self, user_id):
        result = await execute_tool("search_memories", {"query": "nothing"}, user_id)
        assert result["status"] == "no_results"

    @pytest.mark.asyncio
    async def test_store_requires_content(self, user_id):
        assert "error" in await execute_tool("store_memory", {"content": "  "}, user_id)

    @pytest.mark.asyncio
    async def test_engine_errors_returned_not_raised(self, user_id):
        result = await execute_tool("store_memory", {"content": "x", "importance": 42}, user_id)
        assert "error" in result

    @pytest.mark.asyncio
    async def test_focus_mode_round_trip(self, memory_system, user_id):
        result = await execute_tool("activate_focus_mode", {"categories": ["acme"]}, user_id)
        assert result["status"] == "focused"
        assert (await memory_system.get_active_focus(user_id)).categories == ["acme"]

        await execute_tool("deactivate_focus_mode", {}, user_id)
        assert await memory_system.get_active_focus(user_id) is None

    @pytest.mark.asyncio
    async def test_set_memory_mode(self, memory_system, user_id):
        result = await execute_tool("set_memory_mode", {"mode": "persistent"}, user_id)
        assert result["mode"] == "persistent"
        assert "error" in await execute_tool("set_memory_mode", {"mode": "sometimes"}, user_id)

    @pytest.mark.asyncio
    async def test_stats(self, user_id):
        await execute_tool("store_memory", {"content": "one"}, user_id)
        result = await execute_tool("get_memory_stats", {}, user_id)
        assert result["stats"]["total"] == 1

    @pytest.mark.asyncio
    async def test_forget(self, user_id):
        stored = await execute_tool("store_memory", {"content": "forget me"}, user_id)

        result = await execute_tool("forget_memory", {"memory_id": stored["memory_id"]}, user_id)
        assert result["status"] == "deleted"

        again = await execute_tool("forget_memory", {"memory_id": stored["memory_id"]}, user_id)
        assert again["status"] == "FAILED"

    @pytest.mark.asyncio
    async def test_forget_with_id_from_search(self, supabase, vector_store, user_id):
        await execute_tool("store_memory", {"content": "Acme launch is March 3rd"}, user_id)
        found = await execute_tool("search_memories", {"query": "acme launch"}, user_id)

        result = await execute_tool("forget_memory", {"memory_id": found["memories"][0]["id"]}, user_id)

        assert result["status"] == "deleted"
        assert supabase.rows("memories") == []
        assert vector_store.vectors == {}
