from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .errors import ListingFailed
from .utils import parse_timestamp


@dataclass(frozen=True)
class App:
    name: str
    app_id: str
    platform: str = ""
    display_name: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "App":
        app_id = data.get("appId")
        if not isinstance(app_id, str) or not app_id:
            raise ValueError(f"App entry without 'appId': {data!r}")
        return cls(
            name=data.get("name", ""),
            app_id=app_id,
            platform=data.get("platform", ""),
            display_name=data.get("displayName", ""),
        )


@dataclass(frozen=True)
class Release:
    """One uploaded build. ``name`` is the full resource path used for deletion."""

    name: str
    create_time: datetime
    display_version: str = ""
    build_version: str = ""
    release_notes: str = ""

    @property
    def label(self) -> str:
        if self.build_version:
            return f"{self.display_version} ({self.build_version})"
        return self.display_version or self.name

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Release":
        name = data.get("name")
        create_time = data.get("createTime")
        if not isinstance(name, str) or not name or not isinstance(create_time, str):
            raise ValueError(f"Release entry without 'name' or 'createTime': {data!r}")
        notes = data.get("releaseNotes") or {}
        return cls(
            name=name,
            create_time=parse_timestamp(create_time),
            display_version=data.get("displayVersion", ""),
            build_version=data.get("buildVersion", ""),
            release_notes=notes.get("text", "") if isinstance(notes, dict) else "",
        )


@dataclass(frozen=True)
class RetentionPolicy:
    min_keep: int = 5
    max_age_days: int = 30


@dataclass
class FailedChunk:
    names: List[str]
    status: Optional[int]
    detail: str = ""


@dataclass
class Outcome:
    deleted_count: int = 0
    failed_chunks: List[FailedChunk] = field(default_factory=list)

    @property
    def failed_count(self) -> int:
        return sum(len(chunk.names) for chunk in self.failed_chunks)

    @property
    def ok(self) -> bool:
        return not self.failed_chunks


@dataclass
class AppResult:
    app_id: str
    outcome: Optional[Outcome] = None
    error: Optional[ListingFailed] = None
    selected: List[Release] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None and (self.outcome is None or self.outcome.ok)


@dataclass
class PruneReport:
    project_id: str
    results: List[AppResult] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        return any(not r.ok for r in self.results)

    @property
    def total_deleted(self) -> int:
        return sum(r.outcome.deleted_count for r in self.results if r.outcome)
