"""
API v1 router exports.
Provides API endpoint routers.
"""
from devfolio.api.v1 import auth, chat, projects, threads, users

__all__ = [
    "auth",
    "chat",
    "projects",
    "threads",
    "users",
]
