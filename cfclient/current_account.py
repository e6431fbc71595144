"""The account the current token is acting in, with its users."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any


@dataclass
class CurrentAccountUser:
    """A user of the current account."""

    id: str = ""
    user_name: str = ""
    email: str = ""


@dataclass
class CurrentAccount:
    """The active account and its users."""

    id: str = ""
    name: str = ""
    users: list[CurrentAccountUser] = field(default_factory=list)


def _as_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def _get(mapping: Any, key: str) -> str:
    return _as_string(mapping.get(key)) if isinstance(mapping, dict) else ""


class CurrentAccountMixin:
    """Current account lookup; mixed into a class providing ``request``."""

    def get_current_account(self) -> CurrentAccount:
        user = json.loads(self.request("GET", "/user"))
        if not isinstance(user, dict):
            raise ValueError("GetCurrentAccount - user response is not an object")

        active_name = _get(user, "activeAccountName")
        if not active_name:
            raise LookupError("GetCurrentAccount - cannot get activeAccountName")
        current = CurrentAccount(name=active_name)

        accounts = user.get("account")
        for account in accounts if isinstance(accounts, list) else []:
            if _get(account, "name") == active_name:
                current.id = _get(account, "id")
                break
        if not current.id:
            raise LookupError("GetCurrentAccount - cannot get activeAccountName")

        resp = self.request("GET", f"/accounts/{current.id}/users")
        try:
            users = json.loads(resp)
        except ValueError as exc:
            raise ValueError(
                f"Cannot unmarshal accountUsers responce for accountId={current.id}: {exc}"
            ) from exc
        if users is None:
            users = []
        if not isinstance(users, list):
            raise ValueError(
                f"Cannot unmarshal accountUsers responce for accountId={current.id}: not a list"
            )
        current.users = [
            CurrentAccountUser(
                id=_get(item, "_id"),
                user_name=_get(item, "userName"),
                email=_get(item, "email"),
            )
            for item in users
        ]
        return current