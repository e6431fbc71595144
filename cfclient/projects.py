"""Projects grouping pipelines."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping

from .transport import Variable, encode_json, variables_from_mapping


@dataclass
class Project:
    """A project with tags and variables."""

    id: str = ""
    project_name: str = ""
    tags: list[str] = field(default_factory=list)
    variables: list[Variable] = field(default_factory=list)

    def set_variables(self, variables: Mapping[str, Any]) -> None:
        """Append variables from a mapping of string values."""
        self.variables.extend(variables_from_mapping(variables))

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.id:
            result["id"] = self.id
        if self.project_name:
            result["projectName"] = self.project_name
        if self.tags:
            result["tags"] = list(self.tags)
        if self.variables:
            result["variables"] = [v.to_dict() for v in self.variables]
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Project":
        return cls(
            id=data.get("id", ""),
            project_name=data.get("projectName", ""),
            tags=list(data.get("tags") or []),
            variables=[Variable.from_dict(v) for v in data.get("variables") or []],
        )


class ProjectsMixin:
    """Project operations; mixed into a class providing ``request``."""

    def get_project_by_name(self, name: str) -> Project:
        return Project.from_dict(json.loads(self.request("GET", f"/projects/name/{name}")))

    def get_project_by_id(self, project_id: str) -> Project:
        return Project.from_dict(json.loads(self.request("GET", f"/projects/{project_id}")))

    def create_project(self, project: Project) -> Project:
        resp = self.request("POST", "/projects", encode_json(project.to_dict()))
        return Project.from_dict(json.loads(resp))

    def update_project(self, project: Project) -> None:
        body = encode_json(project.to_dict())
        if not project.id:
            raise ValueError("[ERROR] Project ID is empty")
        self.request("PATCH", f"/projects/{project.id}", body)

    def delete_project(self, project_id: str) -> None:
        self.request("DELETE", f"/projects/{project_id}")