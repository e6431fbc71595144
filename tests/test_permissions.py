import json

import pytest
import responses

from cfclient.permissions import Permission, PermissionsMixin
from cfclient.transport import ApiError, Transport

HOST = "https://api.example.com"


class _Client(Transport, PermissionsMixin):
    pass


@pytest.fixture
def mocked():
    with responses.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def client():
    return _Client(HOST, "token", "")


PERMISSIONS = [
    {"id": "1", "role": "team-a", "action": "read", "resource": "pipeline", "attributes": ["*"]},
    {"id": "2", "role": "team-a", "action": "run", "resource": "pipeline"},
    {"id": "3", "role": "team-b", "action": "read", "resource": "cluster"},
]


def test_from_dict_maps_wire_names():
    permission = Permission.from_dict(PERMISSIONS[0])
    assert permission.team == "team-a"
    assert permission.tags == ["*"]
    assert permission.id == "1"


def test_to_create_dict_uses_create_names():
    permission = Permission(id="x", team="t", action="read", resource="pipeline", tags=["a"])
    assert permission.to_create_dict() == {
        "_id": "x",
        "team": "t",
        "resource": "pipeline",
        "action": "read",
        "tags": ["a"],
    }


def test_to_create_dict_omits_empty():
    assert Permission().to_create_dict() == {}


def test_permission_list_without_filters(mocked, client):
    mocked.add(responses.GET, f"{HOST}/abac", json=PERMISSIONS)
    assert [p.id for p in PermissionsMixin.get_permission_list(client)] == ["1", "2", "3"]


def test_permission_list_filters(mocked, client):
    mocked.add(responses.GET, f"{HOST}/abac", json=PERMISSIONS)
    result = PermissionsMixin.get_permission_list(client, "team-a", "read", "")
    assert [p.id for p in result] == ["1"]


def test_permission_list_no_match_is_empty(mocked, client):
    mocked.add(responses.GET, f"{HOST}/abac", json=PERMISSIONS)
    assert PermissionsMixin.get_permission_list(client, "", "", "nothing") == []


def test_create_permission_fetches_created(mocked, client):
    mocked.add(responses.POST, f"{HOST}/abac", json=[{"id": "new"}])
    mocked.add(
        responses.GET,
        f"{HOST}/abac/new",
        json={"id": "new", "role": "t", "action": "read", "resource": "pipeline"},
    )
    created = client.create_permission(Permission(team="t", action="read", resource="pipeline"))
    assert created.id == "new"
    assert created.team == "t"
    sent = json.loads(mocked.calls[0].request.body)
    assert sent["team"] == "t"
    assert "role" not in sent


def test_create_permission_unexpected_response(mocked, client):
    mocked.add(responses.POST, f"{HOST}/abac", json=[{"id": "a"}, {"id": "b"}])
    with pytest.raises(ValueError, match="unknown response"):
        client.create_permission(Permission(team="t"))


def test_delete_permission_error(mocked, client):
    mocked.add(responses.DELETE, f"{HOST}/abac/1", status=500, body="boom")
    with pytest.raises(ApiError) as info:
        PermissionsMixin.delete_permission(client, "1")
    assert info.value.status == 500