"""
Utility modules for the AEO metrics pipeline
"""

from .database import (
    get_db_context,
    get_sync_db,
    init_db,
    close_db,
)
from .numbers import (
    round_half_up,
    clamp,
)

__all__ = [
    # Database
    "get_db_context",
    "get_sync_db",
    "init_db",
    "close_db",
    # Numbers
    "round_half_up",
    "clamp",
]
