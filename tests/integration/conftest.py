"""Fixtures for tests against a running Kibana.

Set ``TEST_KIBANA_URL`` (and optionally ``TEST_KIBANA_USERNAME`` /
``TEST_KIBANA_PASSWORD``) to run them; they are skipped otherwise.
"""

import os

import pytest

from kibana import Client, Config

ENV_KIBANA_URL = "TEST_KIBANA_URL"


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if os.environ.get(ENV_KIBANA_URL):
        return
    skip = pytest.mark.skip(reason=f"{ENV_KIBANA_URL} not set")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)


@pytest.fixture(scope="session")
def client():
    """Client for the Kibana under test, TLS verification disabled."""
    config = Config(
        addresses=[os.environ[ENV_KIBANA_URL]],
        username=os.environ.get("TEST_KIBANA_USERNAME", "elastic"),
        password=os.environ.get("TEST_KIBANA_PASSWORD", "changeme"),
        verify=False,
    )
    with Client(config) as client:
        yield client
