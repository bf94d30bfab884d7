"""Tests for the Linear pull sync."""

import pytest

from weave.features.linear import get_sync_status, sync_linear_data, update_team_mapping
from weave.shared.errors import LinearAPIError


class StubLinearClient:
    """Serves teams, projects and issues; teams listed in failing_teams raise."""

    def __init__(self, teams, projects, issues, failing_teams=()):
        self.teams = teams
        self.projects = projects
        self.issues = issues
        self.failing_teams = set(failing_teams)
        self.project_requests = []

    async def get_teams(self):
        return self.teams

    async def get_projects(self, team_id):
        self.project_requests.append(team_id)
        if team_id in self.failing_teams:
            raise LinearAPIError("Linear API error: 500")
        return self.projects.get(team_id, [])

    async def get_issues(self, project_id):
        return self.issues.get(project_id, [])


TEAMS = [
    {"id": "t1", "name": "Acme", "key": "ACM"},
    {"id": "t2", "name": "Globex", "key": "GLX"},
]

PROJECTS = {
    "t1": [{"id": "lp1", "name": "Website", "state": "started", "lead": {"name": "Ada", "email": "ada@acme.com"}}],
    "t2": [{"id": "lp2", "name": "Rebrand"}],
}

ISSUES = {
    "lp1": [
        {"id": "i1", "identifier": "ACM-1", "title": "Fix login", "state": {"name": "Todo", "type": "unstarted"}},
        {"id": "i2", "identifier": "ACM-2", "title": "New footer", "labels": {"nodes": [{"name": "design"}]}},
    ],
    "lp2": [{"id": "i3", "identifier": "GLX-1", "title": "New logo"}],
}


def stub(**kwargs):
    return StubLinearClient(TEAMS, PROJECTS, ISSUES, **kwargs)


class TestSyncLinearData:

    @pytest.mark.asyncio
    async def test_first_sync_creates_everything(self, db, supabase):
        result = await sync_linear_data(db, stub(), "user-1")

        assert result["success"] is True
        assert result["errors"] == []
        assert result["stats"] == {
            "teams_created": 2,
            "teams_existing": 0,
            "projects_created": 2,
            "projects_updated": 0,
            "issues_created": 3,
            "issues_updated": 0,
        }

        project = next(p for p in supabase.rows("linear_projects") if p["linear_project_id"] == "lp1")
        assert project["lead_email"] == "ada@acme.com"
        issue = next(i for i in supabase.rows("linear_issues") if i["identifier"] == "ACM-2")
        assert issue["linear_project_id"] == project["id"]
        assert issue["labels"] == [{"name": "design"}]
        assert issue["user_id"] == "user-1"

    @pytest.mark.asyncio
    async def test_second_sync_updates(self, db, supabase):
        await sync_linear_data(db, stub(), "user-1")
        result = await sync_linear_data(db, stub(), "user-1")

        assert result["stats"]["teams_existing"] == 2
        assert result["stats"]["projects_updated"] == 2
        assert result["stats"]["issues_updated"] == 3
        assert result["stats"]["issues_created"] == 0
        assert len(supabase.rows("linear_issues")) == 3

    @pytest.mark.asyncio
    async def test_rows_carry_bound_project(self, db, supabase):
        await sync_linear_data(db, stub(), "user-1")
        await update_team_mapping(db, "user-1", "t1", project_id="proj-acme")
        await sync_linear_data(db, stub(), "user-1")

        acme = [i for i in supabase.rows("linear_issues") if i["linear_team_id"] == "t1"]
        assert {i["project_id"] for i in acme} == {"proj-acme"}

    @pytest.mark.asyncio
    async def test_single_team(self, db, supabase):
        client = stub()
        result = await sync_linear_data(db, client, "user-1", team_id="t2")

        assert client.project_requests == ["t2"]
        assert result["stats"]["issues_created"] == 1
        assert [i["identifier"] for i in supabase.rows("linear_issues")] == ["GLX-1"]

    @pytest.mark.asyncio
    async def test_disabled_team_skipped(self, db):
        await sync_linear_data(db, stub(), "user-1")
        await update_team_mapping(db, "user-1", "t1", sync_enabled=False)

        client = stub()
        await sync_linear_data(db, client, "user-1")
        assert client.project_requests == ["t2"]

    @pytest.mark.asyncio
    async def test_team_failure_does_not_stop_others(self, db, supabase):
        result = await sync_linear_data(db, stub(failing_teams={"t1"}), "user-1")

        assert result["success"] is False
        assert len(result["errors"]) == 1
        assert result["errors"][0].startswith("Team Acme:")
        assert [i["identifier"] for i in supabase.rows("linear_issues")] == ["GLX-1"]

    @pytest.mark.asyncio
    async def test_team_list_failure_raises(self, db):
        class Unreachable(StubLinearClient):
            async def get_teams(self):
                raise LinearAPIError("Linear API error: 401")

        with pytest.raises(LinearAPIError):
            await sync_linear_data(db, Unreachable(TEAMS, PROJECTS, ISSUES), "user-1")


class TestSyncStatus:

    @pytest.mark.asyncio
    async def test_not_connected(self, db):
        assert await get_sync_status(db, "user-1") == {"connected": False, "last_sync": None, "teams": []}

    @pytest.mark.asyncio
    async def test_reports_last_sync_per_team(self, db):
        await sync_linear_data(db, stub(failing_teams={"t2"}), "user-1")

        status = await get_sync_status(db, "user-1")
        teams = {t["id"]: t for t in status["teams"]}
        assert status["connected"] is True
        assert teams["t1"]["last_sync"] == status["last_sync"]
        assert teams["t2"]["last_sync"] is None
        assert teams["t1"]["pinecone_index"] == "client-acme"
