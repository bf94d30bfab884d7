"""
Shared constants for the Weave service.
"""

SERVICE_NAME = "weave-intelligence-service"

API_PREFIX = "/api/v1"

# Header carrying the acting tenant; authentication happens upstream
USER_ID_HEADER = "X-User-Id"

# Supabase table names
USERS_TABLE = "users"
MEMORIES_TABLE = "memories"
FOCUS_SESSIONS_TABLE = "focus_sessions"
LINEAR_TEAM_MAPPINGS_TABLE = "linear_team_mappings"
LINEAR_PROJECTS_TABLE = "linear_projects"
LINEAR_ISSUES_TABLE = "linear_issues"
INTERACTIONS_TABLE = "interactions"
