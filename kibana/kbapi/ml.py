"""Machine learning API."""

from .base import APIGroup, Endpoint


class ML(APIGroup):
    sync_saved_objects = Endpoint(
        "GET", "/api/ml/saved_objects/sync", "Synchronize machine learning saved objects."
    )
