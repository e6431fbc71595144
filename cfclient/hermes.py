"""Hermes triggers and trigger events."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping

from .transport import ApiError, encode_json, uri_encode_event


@dataclass
class EventData:
    """Details of the event a trigger listens to."""

    uri: str = ""
    type: str = ""
    kind: str = ""
    account: str = ""
    secret: str = ""


@dataclass
class HermesTrigger:
    """A link between a trigger event and a pipeline."""

    event: str = ""
    pipeline_id: str = ""
    event_data: EventData = field(default_factory=EventData)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HermesTrigger":
        raw = data.get("event-data") or {}
        return cls(
            event=data.get("event", ""),
            pipeline_id=data.get("pipeline", ""),
            event_data=EventData(
                uri=raw.get("uri", ""),
                type=raw.get("type", ""),
                kind=raw.get("kind", ""),
                account=raw.get("account", ""),
                secret=raw.get("secret", ""),
            ),
        )


@dataclass
class HermesTriggerEvent:
    """A trigger event definition."""

    type: str = ""
    kind: str = ""
    filter: str = ""
    secret: str = ""
    values: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            key: value
            for key, value in (
                ("type", self.type),
                ("kind", self.kind),
                ("filter", self.filter),
                ("secret", self.secret),
            )
            if value
        }
        if self.values:
            result["values"] = dict(self.values)
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HermesTriggerEvent":
        return cls(
            type=data.get("type", ""),
            kind=data.get("kind", ""),
            filter=data.get("filter", ""),
            secret=data.get("secret", ""),
            values=dict(data.get("values") or {}),
        )


class HermesMixin:
    """Hermes operations; mixed into a class providing ``request``."""

    def get_hermes_trigger(self, event: str, pipeline: str) -> HermesTrigger:
        """Return the last trigger of ``event`` bound to ``pipeline``."""
        resp = self.request("GET", f"/hermes/triggers/event/{uri_encode_event(event)}")
        found = None
        for item in json.loads(resp) or []:
            trigger = HermesTrigger.from_dict(item)
            if trigger.pipeline_id == pipeline:
                found = trigger
        if found is None or not found.event:
            raise LookupError(f"no Trigger found for event: {event}, pipeline: {pipeline}")
        return found

    def create_hermes_trigger(self, event: str, pipeline: str) -> None:
        self.request("POST", f"/hermes/triggers/{uri_encode_event(event)}/{pipeline}")

    def delete_hermes_trigger(self, event: str, pipeline: str) -> None:
        try:
            self.request("DELETE", f"/hermes/triggers/{uri_encode_event(event)}/{pipeline}")
        except ApiError as exc:
            raise ApiError(f"failed to delete Trigger: \n{exc}", exc.status, exc.body) from exc

    def get_hermes_trigger_event(self, event: str) -> HermesTriggerEvent:
        try:
            resp = self.request("GET", f"/hermes/triggers/{uri_encode_event(event)}")
        except ApiError as exc:
            raise ApiError(
                f"failed to retrieve Trigger Event: \n{exc}", exc.status, exc.body
            ) from exc
        return HermesTriggerEvent.from_dict(json.loads(resp))

    def create_hermes_trigger_event(self, event: HermesTriggerEvent) -> str:
        """Create a trigger event and return its event string."""
        body = encode_json(event.to_dict())
        try:
            resp = self.request("POST", "/hermes/events/", body)
        except ApiError as exc:
            raise ApiError(f"failed to create Trigger Event: \n{exc}", exc.status, exc.body) from exc
        result = json.loads(resp)
        if not isinstance(result, str):
            raise ValueError(f"unexpected trigger event response: {result!r}")
        return result