"""Pipelines, their triggers and specifications."""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from typing import Any, Mapping

from .transport import Variable, encode_json, variables_from_mapping

_TRIGGER_FIELDS = (
    ("name", "name"),
    ("description", "description"),
    ("type", "type"),
    ("repo", "repo"),
    ("events", "events"),
    ("branch_regex", "branchRegex"),
    ("branch_regex_input", "branchRegexInput"),
    ("pull_request_target_branch_regex", "pullRequestTargetBranchRegex"),
    ("comment_regex", "commentRegex"),
    ("modified_files_glob", "modifiedFilesGlob"),
    ("provider", "provider"),
    ("disabled", "disabled"),
    ("pull_request_allow_fork_events", "pullRequestAllowForkEvents"),
    ("commit_status_title", "commitStatusTitle"),
    ("context", "context"),
    ("contexts", "contexts"),
)

_METADATA_FIELDS = (
    ("name", "name"),
    ("id", "id"),
    ("is_public", "isPublic"),
    ("original_yaml_string", "originalYamlString"),
    ("project", "project"),
    ("project_id", "projectId"),
    ("revision", "revision"),
)

_SPEC_FIELDS = (
    ("priority", "priority"),
    ("concurrency", "concurrency"),
    ("branch_concurrency", "branchConcurrency"),
    ("trigger_concurrency", "triggerConcurrency"),
    ("contexts", "contexts"),
    ("mode", "mode"),
    ("termination_policy", "terminationPolicy"),
    ("pack_id", "packId"),
    ("required_available_storage", "requiredAvailableStorage"),
    ("options", "options"),
)

# Fields carried as raw JSON text and sent back verbatim.
_RAW_FIELDS = (("steps", "steps"), ("stages", "stages"), ("hooks", "hooks"))


def _compact(mapping: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in mapping.items() if value}


def _escape_name(name: str) -> str:
    return name.replace("/", "%2F", 1)


@dataclass
class Trigger:
    """A git or event trigger of a pipeline."""

    name: str = ""
    description: str = ""
    type: str = ""
    repo: str = ""
    events: list[str] = field(default_factory=list)
    branch_regex: str = ""
    branch_regex_input: str = ""
    pull_request_target_branch_regex: str = ""
    comment_regex: str = ""
    modified_files_glob: str = ""
    provider: str = ""
    disabled: bool = False
    options: dict[str, bool] | None = None
    pull_request_allow_fork_events: bool = False
    commit_status_title: str = ""
    context: str = ""
    contexts: list[str] = field(default_factory=list)
    runtime_environment: dict[str, str] | None = None
    variables: list[Variable] = field(default_factory=list)

    def set_variables(self, variables: Mapping[str, Any]) -> None:
        """Append variables from a mapping of string values."""
        self.variables.extend(variables_from_mapping(variables))

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            key: copy.deepcopy(getattr(self, attr))
            for attr, key in _TRIGGER_FIELDS
            if getattr(self, attr)
        }
        if self.options is not None:
            result["options"] = _compact(self.options)
        if self.runtime_environment is not None:
            result["runtimeEnvironment"] = _compact(self.runtime_environment)
        if self.variables:
            result["variables"] = [v.to_dict() for v in self.variables]
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Trigger":
        kwargs: dict[str, Any] = {
            attr: copy.deepcopy(data[key])
            for attr, key in _TRIGGER_FIELDS
            if data.get(key) is not None
        }
        if data.get("options") is not None:
            kwargs["options"] = dict(data["options"])
        if data.get("runtimeEnvironment") is not None:
            kwargs["runtime_environment"] = dict(data["runtimeEnvironment"])
        kwargs["variables"] = [Variable.from_dict(v) for v in data.get("variables") or []]
        return cls(**kwargs)


@dataclass
class Pipeline:
    """A pipeline: metadata, specification and version.

    ``steps``, ``stages`` and ``hooks`` hold raw JSON text.
    """

    name: str = ""
    id: str = ""
    is_public: bool = False
    tags: list[str] = field(default_factory=list)
    original_yaml_string: str = ""
    project: str = ""
    project_id: str = ""
    revision: int = 0
    variables: list[Variable] = field(default_factory=list)
    spec_template: dict[str, str] | None = None
    triggers: list[Trigger] = field(default_factory=list)
    priority: int = 0
    concurrency: int = 0
    branch_concurrency: int = 0
    trigger_concurrency: int = 0
    contexts: list[Any] = field(default_factory=list)
    steps: str | None = None
    stages: str | None = None
    hooks: str | None = None
    mode: str = ""
    fail_fast: bool | None = None
    runtime_environment: dict[str, str] = field(default_factory=dict)
    termination_policy: list[dict[str, Any]] = field(default_factory=list)
    pack_id: str = ""
    required_available_storage: str = ""
    options: dict[str, bool] = field(default_factory=dict)
    version: str = ""

    def set_variables(self, variables: Mapping[str, Any]) -> None:
        """Append spec variables from a mapping of string values."""
        self.variables.extend(variables_from_mapping(variables))

    def to_dict(self) -> dict[str, Any]:
        metadata: dict[str, Any] = {
            key: getattr(self, attr) for attr, key in _METADATA_FIELDS if getattr(self, attr)
        }
        metadata["labels"] = {"tags": list(self.tags)} if self.tags else {}

        spec: dict[str, Any] = {}
        if self.variables:
            spec["variables"] = [v.to_dict() for v in self.variables]
        if self.spec_template is not None:
            spec["specTemplate"] = _compact(self.spec_template)
        if self.triggers:
            spec["triggers"] = [t.to_dict() for t in self.triggers]
        for attr, key in _SPEC_FIELDS:
            value = getattr(self, attr)
            if value:
                spec[key] = copy.deepcopy(value)
        for attr, key in _RAW_FIELDS:
            raw = getattr(self, attr)
            if raw is not None:
                spec[key] = json.loads(raw)
        if self.fail_fast is not None:
            spec["fail_fast"] = self.fail_fast
        spec["runtimeEnvironment"] = _compact(self.runtime_environment)

        result: dict[str, Any] = {"metadata": metadata, "spec": spec}
        if self.version:
            result["version"] = self.version
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Pipeline":
        metadata = data.get("metadata") or {}
        spec = data.get("spec") or {}
        kwargs: dict[str, Any] = {
            attr: metadata[key] for attr, key in _METADATA_FIELDS if metadata.get(key) is not None
        }
        labels = metadata.get("labels") or {}
        kwargs["tags"] = list(labels.get("tags") or [])
        kwargs.update(
            {attr: copy.deepcopy(spec[key]) for attr, key in _SPEC_FIELDS if spec.get(key) is not None}
        )
        for attr, key in _RAW_FIELDS:
            if spec.get(key) is not None:
                kwargs[attr] = json.dumps(spec[key])
        kwargs["variables"] = [Variable.from_dict(v) for v in spec.get("variables") or []]
        kwargs["triggers"] = [Trigger.from_dict(t) for t in spec.get("triggers") or []]
        if spec.get("specTemplate") is not None:
            kwargs["spec_template"] = dict(spec["specTemplate"])
        if spec.get("fail_fast") is not None:
            kwargs["fail_fast"] = spec["fail_fast"]
        kwargs["runtime_environment"] = dict(spec.get("runtimeEnvironment") or {})
        kwargs["version"] = data.get("version", "")
        return cls(**kwargs)


def _identifier(pipeline: Pipeline) -> str:
    return pipeline.id or pipeline.name


class PipelinesMixin:
    """Pipeline operations; mixed into a class providing ``request``."""

    def get_pipeline(self, name: str) -> Pipeline:
        resp = self.request("GET", f"/pipelines/{_escape_name(name)}")
        return Pipeline.from_dict(json.loads(resp))

    def create_pipeline(self, pipeline: Pipeline) -> Pipeline:
        resp = self.request("POST", "/pipelines", encode_json(pipeline.to_dict()))
        return Pipeline.from_dict(json.loads(resp))

    def update_pipeline(self, pipeline: Pipeline) -> Pipeline:
        body = encode_json(pipeline.to_dict())
        identifier = _identifier(pipeline)
        if not identifier:
            raise ValueError("[ERROR] Both Pipeline ID and Name are empty")
        resp = self.request("PUT", f"/pipelines/{_escape_name(identifier)}", body)
        return Pipeline.from_dict(json.loads(resp))

    def delete_pipeline(self, name: str) -> None:
        self.request("DELETE", f"/pipelines/{_escape_name(name)}")