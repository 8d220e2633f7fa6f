"""Short URL API."""

from .base import APIGroup, Endpoint


class ShortURL(APIGroup):
    create = Endpoint("POST", "/api/short_url", "Create a short URL.")
    get = Endpoint("GET", "/api/short_url/{id}", "Get a short URL.")
    delete = Endpoint("DELETE", "/api/short_url/{id}", "Delete a short URL.")
    resolve = Endpoint("GET", "/api/short_url/_slug/{slug}", "Resolve a short URL by slug.")
