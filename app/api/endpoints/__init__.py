"""
API endpoints module
"""

from . import auth, track, stats, content, integrations, health

__all__ = [
    "auth",
    "track",
    "stats",
    "content",
    "integrations",
    "health"
]
