"""
Aggregation of resolved scenarios into per-file, per-app, and global counts.

``aggregate()`` is a fold: every accumulator is local to the call and every
count is an immutable :class:`StatusCounts`, so two runs over the same
features always produce equal tallies regardless of call history.

Ordering contract:
  - apps are listed by name
  - features, scenarios, and issues keep encounter order (callers feed
    features app by app, files in sorted path order)
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from functools import reduce
from operator import add

from bddgov.core.models import (
    ConflictingStatus,
    FeatureRecord,
    MissingStatus,
    ScenarioRecord,
    StatusCounts,
)
from bddgov.core.tags.classifier import detect_issue


@dataclass(frozen=True)
class AppSummary:
    app_name: str
    counts: StatusCounts

    def to_dict(self) -> dict:
        return {"appName": self.app_name, "counts": self.counts.to_dict()}


@dataclass(frozen=True)
class GovernanceTally:
    """Everything the status side of a snapshot needs."""

    overall: StatusCounts
    apps: tuple[AppSummary, ...]
    features: tuple[FeatureRecord, ...]
    missing_status: tuple[MissingStatus, ...]
    conflicting_status: tuple[ConflictingStatus, ...]

    @property
    def scenarios(self) -> list[ScenarioRecord]:
        return [s for f in self.features for s in f.scenarios]

    @property
    def has_issues(self) -> bool:
        return bool(self.missing_status or self.conflicting_status)


def aggregate(features: Iterable[FeatureRecord]) -> GovernanceTally:
    """Fold feature records into app and global counts plus the issue lists."""
    feature_list = tuple(features)
    by_app: dict[str, StatusCounts] = {}
    missing: list[MissingStatus] = []
    conflicting: list[ConflictingStatus] = []

    for feature in feature_list:
        by_app[feature.app_name] = by_app.get(feature.app_name, StatusCounts()) + feature.counts

        for scenario in feature.scenarios:
            issue = detect_issue(scenario)
            if isinstance(issue, ConflictingStatus):
                conflicting.append(issue)
            elif isinstance(issue, MissingStatus):
                missing.append(issue)

    apps = tuple(AppSummary(app_name=name, counts=by_app[name]) for name in sorted(by_app))
    overall = reduce(add, (a.counts for a in apps), StatusCounts())

    return GovernanceTally(
        overall=overall,
        apps=apps,
        features=feature_list,
        missing_status=tuple(missing),
        conflicting_status=tuple(conflicting),
    )
