"""Database Repositories - Organized data access."""

from weave.features.database.repositories.focus_sessions import FocusSessionsRepository
from weave.features.database.repositories.linear import LinearRepository
from weave.features.database.repositories.memories import MemoriesRepository
from weave.features.database.repositories.team_mappings import TeamMappingsRepository
from weave.features.database.repositories.users import UsersRepository

__all__ = [
    "FocusSessionsRepository",
    "LinearRepository",
    "MemoriesRepository",
    "TeamMappingsRepository",
    "UsersRepository",
]
