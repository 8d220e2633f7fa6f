"""Logstash centralized pipeline management API."""

from .base import APIGroup, Endpoint


class Logstash(APIGroup):
    get = Endpoint("GET", "/api/logstash/pipeline/{id}", "Get a Logstash pipeline.")
    put = Endpoint("PUT", "/api/logstash/pipeline/{id}", "Create or update a Logstash pipeline.")
    delete = Endpoint("DELETE", "/api/logstash/pipeline/{id}", "Delete a Logstash pipeline.")
    list = Endpoint("GET", "/api/logstash/pipelines", "List Logstash pipelines.")
