import pytest

from cfclient.accounts import Account, Build, Limits
from cfclient.permissions import Permission
from cfclient.resources import (
    account_from_config,
    account_to_state,
    flatten_build,
    flatten_limits,
    permission_from_config,
    permission_to_state,
    sync_account_admins,
    validate_permission_action,
    validate_permission_resource,
)


class FakeAdminClient:
    def __init__(self, admins):
        self.admins = admins
        self.calls = []

    def get_account_by_id(self, account_id):
        return Account(id=account_id, admins=list(self.admins))

    def set_user_as_account_admin(self, account_id, user_id):
        self.calls.append(("add", account_id, user_id))

    def delete_user_as_account_admin(self, account_id, user_id):
        self.calls.append(("delete", account_id, user_id))


def test_flatten_limits_and_build():
    assert flatten_limits(Limits(collaborators=10, data_retention_weeks=3)) == {
        "collaborators": 10,
        "data_retention_weeks": 3,
    }
    assert flatten_build(Build(parallel=2, nodes=4)) == {"parallel": 2, "nodes": 4}


def test_account_from_config_applies_defaults():
    account = account_from_config(
        {"name": "acme", "limits": [{"collaborators": 10}], "build": [{"parallel": 2}]}
    )
    assert account.name == "acme"
    assert account.features["abac"] is True
    assert len(account.features) == 5
    assert account.limits.data_retention_weeks == 5
    assert account.build.nodes == 1


def test_account_without_blocks_has_no_limits_or_build():
    account = account_from_config({"id": "a1", "name": "acme", "features": {}})
    assert account.id == "a1"
    assert account.limits is None
    assert account.build is None
    assert account.features == {}


def test_account_state_round_trip():
    config = {
        "name": "acme",
        "features": {"abac": False},
        "limits": [{"collaborators": 7, "data_retention_weeks": 2}],
        "build": [{"parallel": 3, "nodes": 2}],
    }
    assert account_to_state(account_from_config(config)) == config


def test_account_limits_require_collaborators():
    with pytest.raises(ValueError):
        account_from_config({"name": "acme", "limits": [{"data_retention_weeks": 2}]})


def test_account_features_must_be_bool():
    with pytest.raises(TypeError):
        account_from_config({"name": "acme", "features": {"abac": "yes"}})


def test_sync_account_admins_deletes_then_adds():
    client = FakeAdminClient(["u1", "u2"])
    to_add, to_delete = sync_account_admins(client, "acc", ["u2", "u3"])
    assert (to_add, to_delete) == (["u3"], ["u1"])
    assert client.calls == [("delete", "acc", "u1"), ("add", "acc", "u3")]


def test_sync_account_admins_no_change():
    client = FakeAdminClient(["u1"])
    assert sync_account_admins(client, "acc", ["u1"]) == ([], [])
    assert client.calls == []


@pytest.mark.parametrize("value", ["cluster", "pipeline"])
def test_valid_permission_resources(value):
    assert validate_permission_resource(value) == value


def test_invalid_permission_resource():
    with pytest.raises(ValueError, match="got: project"):
        validate_permission_resource("project")


@pytest.mark.parametrize(
    "value", ["create", "read", "update", "delete", "run", "approve", "debug"]
)
def test_valid_permission_actions(value):
    assert validate_permission_action(value) == value


def test_invalid_permission_action():
    with pytest.raises(ValueError, match="got: admin"):
        validate_permission_action("admin")


def test_permission_defaults_tags():
    permission = permission_from_config({"team": "t1", "action": "read", "resource": "pipeline"})
    assert permission.tags == ["*", "untagged"]
    assert permission.team == "t1"


def test_permission_state_round_trip():
    config = {"id": "p1", "team": "t1", "action": "run", "resource": "cluster", "tags": ["prod"]}
    state = permission_to_state(permission_from_config(config))
    assert state == {"_id": "p1", "team": "t1", "action": "run", "resource": "cluster", "tags": ["prod"]}


def test_permission_from_config_rejects_bad_action():
    with pytest.raises(ValueError):
        permission_from_config({"team": "t1", "action": "own", "resource": "pipeline"})


def test_permission_to_state_copies_tags():
    permission = Permission(id="p1", tags=["a"])
    state = permission_to_state(permission)
    state["tags"].append("b")
    assert permission.tags == ["a"]