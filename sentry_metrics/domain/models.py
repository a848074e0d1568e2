from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

from sentry_metrics.common.errors import MalformedResponseError
from sentry_metrics.common.time_utils import parse_iso8601


UNRESOLVED = "unresolved"
FIRST_SEEN = "first_seen"
SET_RESOLVED = "set_resolved"


def _require(payload: Any, key: str, kind: str) -> Any:
    if not isinstance(payload, Mapping):
        raise MalformedResponseError(f"Expected a {kind} object, got {type(payload).__name__}")
    if key not in payload or payload[key] is None:
        raise MalformedResponseError(f"{kind} payload is missing {key!r}")
    return payload[key]


def _timestamp(payload: Any, key: str, kind: str) -> datetime:
    raw = _require(payload, key, kind)
    if not isinstance(raw, str):
        raise MalformedResponseError(f"{kind} {key!r} is not a string: {raw!r}")
    try:
        return parse_iso8601(raw)
    except ValueError as exc:
        raise MalformedResponseError(f"{kind} {key!r} is not a timestamp: {raw!r}") from exc


@dataclass(frozen=True)
class Organization:
    id: str
    name: str
    slug: str

    @classmethod
    def from_api(cls, payload: Any) -> "Organization":
        slug = _require(payload, "slug", "organization")
        return cls(
            id=str(payload.get("id") or ""),
            name=str(payload.get("name") or ""),
            slug=str(slug),
        )


@dataclass(frozen=True)
class Project:
    name: str
    slug: str
    organization: Organization | None = None

    @property
    def organization_slug(self) -> str:
        if self.organization is None:
            raise MalformedResponseError(f"Project {self.slug!r} has no organization")
        return self.organization.slug

    @classmethod
    def from_api(cls, payload: Any) -> "Project":
        org = payload.get("organization") if isinstance(payload, Mapping) else None
        return cls(
            name=str(_require(payload, "name", "project")),
            slug=str(_require(payload, "slug", "project")),
            organization=Organization.from_api(org) if org else None,
        )


@dataclass(frozen=True)
class Activity:
    id: str
    timestamp: datetime
    type: str

    @classmethod
    def from_api(cls, payload: Any) -> "Activity":
        return cls(
            id=str(_require(payload, "id", "activity")),
            timestamp=_timestamp(payload, "dateCreated", "activity"),
            type=str(_require(payload, "type", "activity")),
        )


@dataclass(frozen=True)
class Issue:
    id: str
    status: str
    project: Project
    # Newest first, as delivered by the API.
    activities: tuple[Activity, ...] = field(default_factory=tuple)

    @property
    def is_unresolved(self) -> bool:
        return self.status == UNRESOLVED

    @classmethod
    def from_api(cls, payload: Any) -> "Issue":
        raw_activities = payload.get("activity") if isinstance(payload, Mapping) else None
        if raw_activities is None:
            raw_activities = []
        if not isinstance(raw_activities, list):
            raise MalformedResponseError("issue 'activity' is not a list")
        return cls(
            id=str(_require(payload, "id", "issue")),
            status=str(_require(payload, "status", "issue")),
            project=Project.from_api(_require(payload, "project", "issue")),
            activities=tuple(Activity.from_api(a) for a in raw_activities),
        )


@dataclass(frozen=True)
class Event:
    id: str
    timestamp: datetime

    @classmethod
    def from_api(cls, payload: Any) -> "Event":
        return cls(
            id=str(_require(payload, "eventID", "event")),
            timestamp=_timestamp(payload, "dateCreated", "event"),
        )


@dataclass(frozen=True)
class ComputedActivity:
    issue: Issue
    duration: float


@dataclass(frozen=True)
class ComputedEvent:
    event: Event
    duration: float
