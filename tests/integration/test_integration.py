"""Smoke tests against a live Kibana."""

import uuid

import pytest

from kibana import APIError, Client

pytestmark = pytest.mark.integration


class TestStatus:
    """Test the status endpoint."""

    def test_available(self, client: Client) -> None:
        """Verify Kibana reports its overall status."""
        response = client.status.get(params={"v8format": True})
        assert response.ok
        assert "overall" in response.body["status"]


class TestSpaces:
    """Test space management."""

    def test_get_default(self, client: Client) -> None:
        """Verify the default space exists."""
        response = client.spaces.get(id="default")
        assert response.body["id"] == "default"

    def test_get_all(self, client: Client) -> None:
        """Verify listing includes the default space."""
        response = client.spaces.get_all()
        assert "default" in [space["id"] for space in response.body]

    def test_create_and_delete(self, client: Client) -> None:
        """Verify a space can be created, read and removed."""
        space_id = f"test-{uuid.uuid4().hex[:8]}"
        client.spaces.create(body={"id": space_id, "name": space_id})
        try:
            assert client.spaces.get(id=space_id).body["name"] == space_id
        finally:
            client.spaces.delete(id=space_id)

        with pytest.raises(APIError) as exc_info:
            client.spaces.get(id=space_id)
        assert exc_info.value.status_code == 404


class TestFleet:
    """Test Fleet agent policies."""

    def test_list_agent_policies(self, client: Client) -> None:
        """Verify agent policies are listed."""
        response = client.fleet.agent_policies.list(params={"perPage": 10})
        assert isinstance(response.body["items"], list)
