from jobtalk.api import (
    career_routes,
    chat_routes,
    qualification_routes,
    workspace_routes,
)

__all__ = [
    "career_routes",
    "chat_routes",
    "qualification_routes",
    "workspace_routes",
]
