import json

import pytest

from cfclient.idps import IDP, IdpsMixin
from cfclient.transport import ApiError

IDPS = [
    {"_id": "idp-1", "clientName": "github", "clientType": "github", "accounts": ["a1"]},
    {"_id": "idp-2", "clientName": "okta", "clientType": "okta", "scopes": ["openid"]},
]


class FakeClient(IdpsMixin):
    def __init__(self, response=b"[]"):
        self.response = response
        self.calls = []

    def request(self, method, path, body=None, query=None):
        self.calls.append((method, path, body, query))
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def test_from_dict_maps_api_keys():
    idp = IDP.from_dict(IDPS[0])
    assert idp.id == "idp-1"
    assert idp.client_name == "github"
    assert idp.accounts == ["a1"]


def test_round_trip():
    idp = IDP(
        id="idp-3",
        client_name="azure",
        display_name="Azure",
        tenant="tenant",
        scopes=["openid", "email"],
        api_url="https://api.example.com",
    )
    assert IDP.from_dict(idp.to_dict()) == idp


def test_to_dict_omits_empty_fields():
    data = IDP(id="idp-1").to_dict()
    assert data == {"_id": "idp-1"}


def test_get_idps_lists_all():
    client = FakeClient(json.dumps(IDPS).encode())
    idps = IdpsMixin.get_idps(client)
    assert [i.id for i in idps] == ["idp-1", "idp-2"]
    assert client.calls[0][:2] == ("GET", "/admin/idp")


def test_get_idp_by_name():
    client = FakeClient(json.dumps(IDPS).encode())
    assert IdpsMixin.get_idp_by_name(client, "okta").id == "idp-2"


def test_get_idp_by_name_missing():
    client = FakeClient(json.dumps(IDPS).encode())
    with pytest.raises(LookupError):
        IdpsMixin.get_idp_by_name(client, "gitlab")


def test_get_idp_by_id():
    client = FakeClient(json.dumps(IDPS).encode())
    assert IdpsMixin.get_idp_by_id(client, "idp-1").client_name == "github"
    with pytest.raises(LookupError):
        IdpsMixin.get_idp_by_id(client, "missing")


def test_get_account_idps_uses_account_path():
    client = FakeClient(json.dumps(IDPS[:1]).encode())
    idps = IdpsMixin.get_account_idps(client)
    assert [i.id for i in idps] == ["idp-1"]
    assert client.calls[0][1] == "/idp/account"


def test_add_account_to_idp_body():
    client = FakeClient(b"{}")
    IdpsMixin.add_account_to_idp(client, "acc", "idp")
    method, path, body, _ = client.calls[0]
    assert (method, path) == ("POST", "/admin/idp/addAccount")
    assert json.loads(body) == {"accountId": "acc", "IDPConfigId": "idp"}


def test_errors_propagate():
    client = FakeClient(ApiError("fail", status=500))
    with pytest.raises(ApiError):
        client.get_idps()