# Shared constants and utilities
from .constants import (
    SERVICE_NAME,
    API_PREFIX,
    USER_ID_HEADER,
)

__all__ = [
    "SERVICE_NAME",
    "API_PREFIX",
    "USER_ID_HEADER",
]
