"""Attribute-based access control permissions."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping

from .transport import encode_json


@dataclass
class Permission:
    """A rule granting a team an action on tagged resources."""

    id: str = ""
    team: str = ""
    resource: str = ""
    action: str = ""
    account: str = ""
    tags: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Permission":
        return cls(
            id=data.get("id") or "",
            team=data.get("role") or "",
            resource=data.get("resource") or "",
            action=data.get("action") or "",
            account=data.get("account") or "",
            tags=list(data.get("attributes") or []),
        )

    def to_create_dict(self) -> dict[str, Any]:
        """Body accepted by the create endpoint."""
        pairs = (
            ("_id", self.id),
            ("team", self.team),
            ("resource", self.resource),
            ("action", self.action),
            ("account", self.account),
            ("tags", list(self.tags)),
        )
        return {key: value for key, value in pairs if value}


class PermissionsMixin:
    """Permission operations; mixed into a class providing ``request``."""

    def get_permission_list(
        self, team_id: str = "", action: str = "", resource: str = ""
    ) -> list[Permission]:
        """List permissions, keeping those matching every non-empty filter."""
        permissions = [Permission.from_dict(item) for item in json.loads(self.request("GET", "/abac")) or []]
        return [
            p
            for p in permissions
            if (not team_id or p.team == team_id)
            and (not action or p.action == action)
            and (not resource or p.resource == resource)
        ]

    def get_permission_by_id(self, permission_id: str) -> Permission:
        return Permission.from_dict(json.loads(self.request("GET", f"/abac/{permission_id}")))

    def create_permission(self, permission: Permission) -> Permission:
        """Create a permission and return it as stored by the API."""
        resp = self.request("POST", "/abac", encode_json(permission.to_create_dict()))
        created = [Permission.from_dict(item) for item in json.loads(resp) or []]
        if len(created) != 1:
            raise ValueError(f"createPermission - unknown response lenght!=1:  {created}")
        return self.get_permission_by_id(created[0].id)

    def delete_permission(self, permission_id: str) -> None:
        self.request("DELETE", f"/abac/{permission_id}")