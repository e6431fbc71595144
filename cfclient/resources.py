"""Mapping of account, account admin and permission resources to and from configuration."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from .accounts import Account, Build, Limits, account_admins_diff
from .permissions import Permission

DEFAULT_FEATURES = {
    "OfflineLogging": True,
    "ssoManagement": True,
    "teamsManagement": True,
    "abac": True,
    "customKubernetesCluster": True,
}
DEFAULT_DATA_RETENTION_WEEKS = 5
DEFAULT_BUILD_NODES = 1

PERMISSION_RESOURCES = ("cluster", "pipeline")
PERMISSION_ACTIONS = ("create", "read", "update", "delete", "run", "approve", "debug")
DEFAULT_PERMISSION_TAGS = ("*", "untagged")


def flatten_limits(limits: Limits) -> dict[str, Any]:
    return {
        "collaborators": limits.collaborators,
        "data_retention_weeks": limits.data_retention_weeks,
    }


def flatten_build(build: Build) -> dict[str, Any]:
    return {"parallel": build.parallel, "nodes": build.nodes}


def _first_block(config: Mapping[str, Any], key: str) -> Mapping[str, Any] | None:
    blocks = config.get(key) or []
    return blocks[0] if blocks else None


def _required(block: Mapping[str, Any], key: str, section: str) -> Any:
    if key not in block:
        raise ValueError(f"{section}.0.{key} is required")
    return block[key]


def account_from_config(config: Mapping[str, Any]) -> Account:
    """Build an account from resource configuration, applying schema defaults."""
    account = Account(id=config.get("id", ""), name=config.get("name", ""))

    features = config.get("features", DEFAULT_FEATURES)
    if features:
        account.set_features(features)

    limits = _first_block(config, "limits")
    if limits is not None:
        account.limits = Limits(
            collaborators=_required(limits, "collaborators", "limits"),
            data_retention_weeks=limits.get("data_retention_weeks", DEFAULT_DATA_RETENTION_WEEKS),
        )

    build = _first_block(config, "build")
    if build is not None:
        account.build = Build(
            parallel=_required(build, "parallel", "build"),
            nodes=build.get("nodes", DEFAULT_BUILD_NODES),
        )
    return account


def account_to_state(account: Account) -> dict[str, Any]:
    """Render an account in the resource's state form."""
    return {
        "name": account.name,
        "features": dict(account.features),
        "limits": [flatten_limits(account.limits)] if account.limits is not None else [],
        "build": [flatten_build(account.build)] if account.build is not None else [],
    }


def sync_account_admins(
    client: Any, account_id: str, desired: Iterable[str]
) -> tuple[list[str], list[str]]:
    """Make the account's admins equal ``desired``; return the ids added and removed."""
    account = client.get_account_by_id(account_id)
    to_add, to_delete = account_admins_diff(desired, account.admins)
    for user_id in to_delete:
        client.delete_user_as_account_admin(account_id, user_id)
    for user_id in to_add:
        client.set_user_as_account_admin(account_id, user_id)
    return to_add, to_delete


def validate_permission_resource(value: str) -> str:
    if value not in PERMISSION_RESOURCES:
        raise ValueError(f'"resource" must be between "pipeline" or "cluster", got: {value}')
    return value


def validate_permission_action(value: str) -> str:
    if value not in PERMISSION_ACTIONS:
        raise ValueError(
            f'"action" must be between one of create,read,update,delete,approve,debug got: {value}'
        )
    return value


def permission_from_config(config: Mapping[str, Any]) -> Permission:
    """Build a permission from configuration; untagged rules cover every tag."""
    tags = list(config.get("tags") or []) or list(DEFAULT_PERMISSION_TAGS)
    return Permission(
        id=config.get("id", ""),
        team=config.get("team", ""),
        action=validate_permission_action(config.get("action", "")),
        resource=validate_permission_resource(config.get("resource", "")),
        tags=tags,
    )


def permission_to_state(permission: Permission) -> dict[str, Any]:
    return {
        "_id": permission.id,
        "team": permission.team,
        "action": permission.action,
        "resource": permission.resource,
        "tags": list(permission.tags),
    }