"""Custom step types and their versions."""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping
from urllib.parse import quote

from .transport import encode_json

_log = logging.getLogger(__name__)


def _path_escape(segment: str) -> str:
    return quote(segment, safe="$&+:=@")


@dataclass
class StepTypes:
    """A step type definition; ``steps`` keeps its key order."""

    version: str = ""
    kind: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)
    arguments: str = ""
    delimiters: dict[str, Any] = field(default_factory=dict)
    returns: str = ""
    steps: dict[str, Any] | None = None
    steps_template: str = ""

    def to_dict(self) -> dict[str, Any]:
        spec: dict[str, Any] = {}
        if self.arguments:
            spec["arguments"] = self.arguments
        if self.delimiters:
            spec["delimiters"] = copy.deepcopy(self.delimiters)
        if self.returns:
            spec["returns"] = self.returns
        if self.steps is not None:
            spec["steps"] = copy.deepcopy(self.steps)
        if self.steps_template:
            spec["stepsTemplate"] = self.steps_template
        result: dict[str, Any] = {}
        if self.version:
            result["version"] = self.version
        if self.kind:
            result["kind"] = self.kind
        if self.metadata:
            result["metadata"] = copy.deepcopy(self.metadata)
        result["spec"] = spec
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StepTypes":
        spec = data.get("spec") or {}
        steps = spec.get("steps")
        return cls(
            version=data.get("version") or "",
            kind=data.get("kind") or "",
            metadata=copy.deepcopy(dict(data.get("metadata") or {})),
            arguments=spec.get("arguments") or "",
            delimiters=copy.deepcopy(dict(spec.get("delimiters") or {})),
            returns=spec.get("returns") or "",
            steps=copy.deepcopy(dict(steps)) if steps is not None else None,
            steps_template=spec.get("stepsTemplate") or "",
        )


@dataclass
class StepTypesVersion:
    """One published version of a step type."""

    version_number: str = ""
    step_types: StepTypes = field(default_factory=StepTypes)


@dataclass
class StepTypesVersions:
    """A step type name with its versions."""

    name: str = ""
    versions: list[StepTypesVersion] = field(default_factory=list)


def _metadata_string(step_types: StepTypes, key: str) -> str:
    value = step_types.metadata.get(key)
    if not isinstance(value, str):
        raise ValueError(f"step types metadata {key!r} must be a string")
    return value


class StepTypesMixin:
    """Step type operations; mixed into a class providing ``request``."""

    def get_step_types_versions(self, name: str) -> list[str]:
        resp = self.request("GET", f"/step-types/{_path_escape(name)}/versions")
        return list(json.loads(resp) or [])

    def get_step_types(self, identifier: str) -> StepTypes:
        """Fetch a step type by ``name`` or ``name:version``."""
        resp = self.request("GET", f"/step-types/{_path_escape(identifier)}")
        return StepTypes.from_dict(json.loads(resp))

    def create_step_types(self, step_types: StepTypes) -> StepTypes:
        resp = self.request("POST", "/step-types", encode_json(step_types.to_dict()))
        try:
            data = json.loads(resp)
        except ValueError as exc:
            _log.debug("error while decoding step types: %s, response: %r", exc, resp)
            raise
        return StepTypes.from_dict(data)

    def update_step_types(self, step_types: StepTypes) -> StepTypes:
        body = encode_json(step_types.to_dict())
        name = _metadata_string(step_types, "name")
        version = _metadata_string(step_types, "version")
        resp = self.request("PUT", f"/step-types/{_path_escape(name + ':' + version)}", body)
        return StepTypes.from_dict(json.loads(resp))

    def delete_step_types(self, name: str) -> None:
        self.request("DELETE", f"/step-types/{_path_escape(name)}")