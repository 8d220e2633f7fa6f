"""Task manager API."""

from .base import APIGroup, Endpoint


class TaskManager(APIGroup):
    health = Endpoint("GET", "/api/task_manager/_health", "Get task manager health.")
