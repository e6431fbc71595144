"""Identity providers."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping

from .transport import encode_json

_FIELDS = (
    ("access_token", "access_token"),
    ("accounts", "accounts"),
    ("api_host", "apiHost"),
    ("api_path_prefix", "apiPathPrefix"),
    ("api_url", "apiURL"),
    ("app_id", "appId"),
    ("auth_url", "authURL"),
    ("client_host", "clientHost"),
    ("client_id", "clientId"),
    ("client_name", "clientName"),
    ("client_secret", "clientSecret"),
    ("client_type", "clientType"),
    ("cookie_iv", "cookieIv"),
    ("cookie_key", "cookieKey"),
    ("display_name", "displayName"),
    ("id", "_id"),
    ("idp_login_url", "IDPLoginUrl"),
    ("login_url", "loginUrl"),
    ("redirect_ui_url", "redirectUiUrl"),
    ("redirect_url", "redirectUrl"),
    ("refresh_token_url", "refreshTokenURL"),
    ("scopes", "scopes"),
    ("tenant", "tenant"),
    ("token_secret", "tokenSecret"),
    ("token_url", "tokenURL"),
    ("user_profile_url", "userProfileURL"),
)


@dataclass
class IDP:
    """An identity provider configuration."""

    id: str = ""
    client_name: str = ""
    display_name: str = ""
    client_type: str = ""
    client_host: str = ""
    client_id: str = ""
    client_secret: str = ""
    access_token: str = ""
    accounts: list[str] = field(default_factory=list)
    scopes: list[str] = field(default_factory=list)
    api_host: str = ""
    api_path_prefix: str = ""
    api_url: str = ""
    app_id: str = ""
    auth_url: str = ""
    cookie_iv: str = ""
    cookie_key: str = ""
    idp_login_url: str = ""
    login_url: str = ""
    redirect_ui_url: str = ""
    redirect_url: str = ""
    refresh_token_url: str = ""
    tenant: str = ""
    token_secret: str = ""
    token_url: str = ""
    user_profile_url: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "IDP":
        kwargs: dict[str, Any] = {}
        for attr, key in _FIELDS:
            value = data.get(key)
            if value is None:
                continue
            kwargs[attr] = list(value) if isinstance(value, list) else value
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for attr, key in _FIELDS:
            value = getattr(self, attr)
            if value:
                result[key] = list(value) if isinstance(value, list) else value
        return result


class IdpsMixin:
    """Identity provider operations; mixed into a class providing ``request``."""

    def get_idps(self) -> list[IDP]:
        return [IDP.from_dict(item) for item in json.loads(self.request("GET", "/admin/idp")) or []]

    def get_idp_by_name(self, name: str) -> IDP:
        for idp in self.get_idps():
            if idp.client_name == name:
                return idp
        raise LookupError(f"[ERROR] IDP with name {name} isn't found.")

    def get_idp_by_id(self, idp_id: str) -> IDP:
        for idp in self.get_idps():
            if idp.id == idp_id:
                return idp
        raise LookupError(f"[ERROR] IDP with ID {idp_id} isn't found.")

    def get_account_idps(self) -> list[IDP]:
        resp = self.request("GET", "/idp/account")
        return [IDP.from_dict(item) for item in json.loads(resp) or []]

    def add_account_to_idp(self, account_id: str, idp_id: str) -> None:
        body = encode_json({"accountId": account_id, "IDPConfigId": idp_id})
        self.request("POST", "/admin/idp/addAccount", body)