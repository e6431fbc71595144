"""Accounts, their limits, build settings and feature flags."""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any, Iterable, Mapping

from .transport import encode_json


@dataclass
class Limits:
    """Collaborator and data retention limits of an account."""

    collaborators: int = 0
    collaborators_used: int = 0
    data_retention_weeks: int = 0

    def to_dict(self) -> dict[str, Any]:
        collaborators: dict[str, Any] = {"limit": self.collaborators}
        if self.collaborators_used:
            collaborators["used"] = self.collaborators_used
        return {
            "collaborators": collaborators,
            "dataRetention": {"weeks": self.data_retention_weeks},
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Limits":
        collaborators = data.get("collaborators") or {}
        retention = data.get("dataRetention") or {}
        return cls(
            collaborators=collaborators.get("limit", 0),
            collaborators_used=collaborators.get("used", 0),
            data_retention_weeks=retention.get("weeks", 0),
        )


@dataclass
class Build:
    """Build capacity settings of an account."""

    strategy: str = ""
    nodes: int = 0
    parallel: int = 0
    packs: list[Any] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.strategy:
            result["strategy"] = self.strategy
        if self.nodes:
            result["nodes"] = self.nodes
        if self.parallel:
            result["parallel"] = self.parallel
        if self.packs:
            result["packs"] = copy.deepcopy(self.packs)
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Build":
        return cls(
            strategy=data.get("strategy", ""),
            nodes=data.get("nodes", 0),
            parallel=data.get("parallel", 0),
            packs=list(data.get("packs") or []),
        )


_FIELDS = (
    ("suspension", "suspension"),
    ("integrations", "integrations"),
    ("payment_plan", "paymentPlan"),
    ("image_view_config", "imageViewConfig"),
    ("build_step_config", "buildStepConfig"),
    ("cfcr_state", "CFCRState"),
    ("allowed_domains", "allowedDomains"),
    ("admins", "admins"),
    ("environment", "environment"),
    ("dedicated_infrastructure", "dedicatedInfrastructure"),
    ("can_use_private_repos", "canUsePrivateRepos"),
    ("support_plan", "supportPlan"),
    ("increased_attention", "increasedAttention"),
    ("local_user_password_idp_enabled", "localUserPasswordIDPEnabled"),
    ("codefresh_env", "codefreshEnv"),
    ("id", "_id"),
    ("badge_token", "badgeToken"),
    ("created_at", "createdAt"),
    ("updated_at", "updatedAt"),
    ("name", "name"),
    ("runtime_environment", "runtimeEnvironment"),
    ("cfcr_repository_path", "cfcrRepositoryPath"),
    ("notifications", "notifications"),
    ("repo_permission", "repoPermission"),
)


@dataclass
class Account:
    """An account; nested settings objects are kept as plain mappings."""

    id: str = ""
    name: str = ""
    admins: list[str] = field(default_factory=list)
    features: dict[str, bool] = field(default_factory=dict)
    limits: Limits | None = None
    build: Build | None = None
    suspension: dict[str, Any] | None = None
    integrations: dict[str, Any] | None = None
    payment_plan: dict[str, Any] | None = None
    image_view_config: dict[str, Any] | None = None
    build_step_config: dict[str, Any] | None = None
    cfcr_state: dict[str, Any] | None = None
    allowed_domains: list[Any] = field(default_factory=list)
    environment: int = 0
    dedicated_infrastructure: bool = False
    can_use_private_repos: bool = False
    support_plan: str = ""
    increased_attention: bool = False
    local_user_password_idp_enabled: bool = False
    codefresh_env: str = ""
    badge_token: str = ""
    created_at: str = ""
    updated_at: str = ""
    runtime_environment: str = ""
    cfcr_repository_path: str = ""
    notifications: list[dict[str, Any]] = field(default_factory=list)
    repo_permission: str = ""

    def set_features(self, features: Mapping[str, Any]) -> None:
        """Replace the feature flags; every value must be a boolean."""
        result = {}
        for key, value in features.items():
            if not isinstance(value, bool):
                raise TypeError(f"feature {key!r} must be a bool, got {type(value).__name__}")
            result[key] = value
        self.features = result

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            key: copy.deepcopy(getattr(self, attr)) for attr, key in _FIELDS if getattr(self, attr)
        }
        if self.build is not None:
            result["build"] = self.build.to_dict()
        if self.limits is not None:
            result["limits"] = self.limits.to_dict()
        if self.features:
            result["features"] = dict(self.features)
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Account":
        kwargs: dict[str, Any] = {
            attr: copy.deepcopy(data[key]) for attr, key in _FIELDS if data.get(key) is not None
        }
        if data.get("limits") is not None:
            kwargs["limits"] = Limits.from_dict(data["limits"])
        if data.get("build") is not None:
            kwargs["build"] = Build.from_dict(data["build"])
        kwargs["features"] = dict(data.get("features") or {})
        return cls(**kwargs)


def merge_with_overwrite(target: Any, source: Any) -> Any:
    """Copy every non-empty field of ``source`` onto ``target`` and return it.

    Nested dataclasses are merged field by field and mappings key by key.
    """
    for item in fields(target):
        incoming = getattr(source, item.name)
        if not incoming:
            continue
        current = getattr(target, item.name)
        if is_dataclass(incoming) and current is not None:
            merge_with_overwrite(current, incoming)
        elif isinstance(incoming, dict) and isinstance(current, dict):
            current.update(copy.deepcopy(incoming))
        else:
            setattr(target, item.name, copy.deepcopy(incoming))
    return target


def account_admins_diff(
    desired: Iterable[str], existing: Iterable[str]
) -> tuple[list[str], list[str]]:
    """Return the admins to add and the admins to remove."""
    desired = list(desired)
    existing = list(existing)
    to_delete = [admin for admin in existing if admin not in desired]
    to_add = [admin for admin in desired if admin not in existing]
    return to_add, to_delete


class AccountsMixin:
    """Account operations; mixed into a class providing ``request``."""

    def get_account_by_id(self, account_id: str) -> Account:
        return Account.from_dict(json.loads(self.request("GET", f"/admin/accounts/{account_id}")))

    def get_account_by_name(self, name: str) -> Account:
        if not name:
            raise ValueError("GetAccountByName - must specify name param")
        resp = self.request("GET", "/admin/accounts", query={"filter[name]": name})
        found = None
        for item in json.loads(resp) or []:
            account = Account.from_dict(item)
            if account.name == name:
                found = account
        if found is None:
            raise LookupError(f"GetAccountByName - cannot find account by name {name}")
        return found

    def get_all_accounts(self) -> list[Account]:
        resp = self.request("GET", "/admin/accounts")
        return [Account.from_dict(item) for item in json.loads(resp) or []]

    def get_accounts_list(self, account_ids: Iterable[str]) -> list[Account]:
        return [self.get_account_by_id(account_id) for account_id in account_ids]

    def create_account(self, account: Account) -> Account:
        resp = self.request("POST", "/admin/accounts", encode_json(account.to_dict()))
        created = Account.from_dict(json.loads(resp))
        self._set_account_features(account.features, created)
        return created

    def update_account(self, account: Account) -> Account:
        if not account.id:
            raise ValueError("[ERROR] Account ID is empty")
        merged = merge_with_overwrite(self.get_account_by_id(account.id), account)
        body = encode_json({"accountDetails": merged.to_dict()})
        resp = self.request("POST", f"/admin/accounts/{account.id}/update", body)
        updated = Account.from_dict(json.loads(resp))
        self._set_account_features(account.features, updated)
        return updated

    def delete_account(self, account_id: str) -> None:
        self.request("DELETE", f"/admin/accounts/{account_id}")

    def _set_account_features(self, features: Mapping[str, bool], account: Account) -> None:
        for name, enabled in features.items():
            body = json.dumps({"feature": name}).encode("utf-8")
            if enabled:
                self.request("POST", f"/features/{account.id}", body)
            else:
                self.request("PUT", f"/features/switchOff/{account.id}", body)
            account.features[name] = enabled