"""
Governance domain models.

Status          — the single lifecycle status assigned to every scenario.
StatusCounts    — immutable counters; folding a status returns a new instance.
ScenarioRecord  — one resolved Scenario / Scenario Outline.
FeatureRecord   — one parsed ``.feature`` file and its scenarios.
MissingStatus / ConflictingStatus — governance issues (data, not errors).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any


class Status(StrEnum):
    READY = "ready"
    WIP = "wip"
    MANUAL = "manual"
    SKIP = "skip"
    OTHER = "other"


@dataclass(frozen=True)
class StatusCounts:
    """Per-status scenario counters.  ``total`` always equals the bucket sum."""

    total: int = 0
    ready: int = 0
    wip: int = 0
    manual: int = 0
    skip: int = 0
    other: int = 0

    def add(self, status: Status) -> StatusCounts:
        """Return new counts with *status* counted once more."""
        bucket = Status(status).value
        return replace(
            self,
            total=self.total + 1,
            **{bucket: getattr(self, bucket) + 1},
        )

    def __add__(self, rhs: StatusCounts) -> StatusCounts:
        if not isinstance(rhs, StatusCounts):
            return NotImplemented
        return StatusCounts(
            total=self.total + rhs.total,
            ready=self.ready + rhs.ready,
            wip=self.wip + rhs.wip,
            manual=self.manual + rhs.manual,
            skip=self.skip + rhs.skip,
            other=self.other + rhs.other,
        )

    @classmethod
    def of(cls, statuses: Iterable[Status]) -> StatusCounts:
        counts = cls()
        for status in statuses:
            counts = counts.add(status)
        return counts

    def get(self, status: Status) -> int:
        return getattr(self, Status(status).value)

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "ready": self.ready,
            "wip": self.wip,
            "manual": self.manual,
            "skip": self.skip,
            "other": self.other,
        }


@dataclass(frozen=True)
class ScenarioRecord:
    """A resolved scenario.  Created at its Scenario line, never mutated."""

    file_path: str
    feature_name: str
    scenario_name: str
    effective_tags: tuple[str, ...]
    status: Status
    impl_tags: tuple[str, ...] = ()
    # Resolution intermediates, kept for issue detection
    feature_primary: tuple[str, ...] = ()
    scenario_primary: tuple[str, ...] = ()
    effective_primary: tuple[str, ...] = ()


@dataclass(frozen=True)
class FeatureRecord:
    """One parsed feature file."""

    file_path: str
    feature_name: str
    tags: tuple[str, ...]
    scenarios: tuple[ScenarioRecord, ...]
    app_name: str = ""

    @property
    def counts(self) -> StatusCounts:
        return StatusCounts.of(s.status for s in self.scenarios)


@dataclass(frozen=True)
class MissingStatus:
    """A scenario with no primary status tag at any scope and no ``@skip``."""

    file_path: str
    scenario_name: str
    tags: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "filePath": self.file_path,
            "scenarioName": self.scenario_name,
            "tags": list(self.tags),
        }


@dataclass(frozen=True)
class ConflictingStatus:
    """A scenario whose governing scope carries more than one primary status tag."""

    file_path: str
    scenario_name: str
    tags: tuple[str, ...]
    primary_status_tags: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "filePath": self.file_path,
            "scenarioName": self.scenario_name,
            "tags": list(self.tags),
            "primaryStatusTags": list(self.primary_status_tags),
        }


GovernanceIssue = MissingStatus | ConflictingStatus


@dataclass(frozen=True)
class ImplScenarioRef:
    file_path: str
    scenario_name: str
    status: Status

    def to_dict(self) -> dict[str, Any]:
        return {
            "filePath": self.file_path,
            "scenarioName": self.scenario_name,
            "status": self.status.value,
        }


@dataclass
class ImplAuditEntry:
    """Audit bucket for one ``@impl_*`` tag.  Owned by a single audit run."""

    counts: StatusCounts = field(default_factory=StatusCounts)
    scenarios: list[ImplScenarioRef] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.counts.to_dict(),
            "scenarios": [ref.to_dict() for ref in self.scenarios],
        }
