"""
Governance snapshot — the full report for one point in time.

Usage::

    snapshot = compute_snapshot([Path("apps")])
    json.dumps(snapshot.to_dict())

    audit = compute_impl_audit([Path("apps")])

Each root is an apps directory: every immediate subdirectory is an app, and
an app's feature files are searched under ``<app>/<features_subdir>``.  File
paths in the output are POSIX paths relative to *base_dir* (by default the
root's parent, i.e. the repository root).

Nothing is cached: every call re-reads the tree and builds new values, so two
calls over an unchanged tree differ only in ``generatedAt``.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import structlog

from bddgov.core.aggregate import AppSummary, GovernanceTally, aggregate
from bddgov.core.config import ScanConfig
from bddgov.core.discovery import (
    FileSystem,
    LocalFileSystem,
    find_feature_files,
    list_apps,
    read_feature_file,
    relative_posix,
)
from bddgov.core.impl_audit import ImplAudit, audit_impl_tags
from bddgov.core.models import (
    ConflictingStatus,
    FeatureRecord,
    MissingStatus,
    ScenarioRecord,
    StatusCounts,
)
from bddgov.core.tags.scope import parse_feature

logger = structlog.get_logger()


def _utc_timestamp() -> str:
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _scenario_to_dict(app_name: str, scenario: ScenarioRecord) -> dict[str, Any]:
    return {
        "appName": app_name,
        "filePath": scenario.file_path,
        "featureName": scenario.feature_name,
        "scenarioName": scenario.scenario_name,
        "status": scenario.status.value,
        "tags": list(scenario.effective_tags),
        "implTags": list(scenario.impl_tags),
    }


def _feature_to_dict(feature: FeatureRecord) -> dict[str, Any]:
    return {
        "appName": feature.app_name,
        "filePath": feature.file_path,
        "featureName": feature.feature_name,
        "tags": list(feature.tags),
        "counts": feature.counts.to_dict(),
        "scenarios": [_scenario_to_dict(feature.app_name, s) for s in feature.scenarios],
    }


@dataclass(frozen=True)
class Snapshot:
    generated_at: str
    tally: GovernanceTally
    impl_audit: ImplAudit

    @property
    def overall(self) -> StatusCounts:
        return self.tally.overall

    @property
    def apps(self) -> tuple[AppSummary, ...]:
        return self.tally.apps

    @property
    def features(self) -> tuple[FeatureRecord, ...]:
        return self.tally.features

    @property
    def missing_status(self) -> tuple[MissingStatus, ...]:
        return self.tally.missing_status

    @property
    def conflicting_status(self) -> tuple[ConflictingStatus, ...]:
        return self.tally.conflicting_status

    @property
    def has_features(self) -> bool:
        """False when no feature file was found under any root."""
        return bool(self.tally.features)

    @property
    def has_issues(self) -> bool:
        return self.tally.has_issues

    def to_dict(self) -> dict[str, Any]:
        return {
            "generatedAt": self.generated_at,
            "overall": self.overall.to_dict(),
            "apps": [a.to_dict() for a in self.apps],
            "features": [_feature_to_dict(f) for f in self.features],
            "issues": {
                "missingStatus": [i.to_dict() for i in self.missing_status],
                "conflictingStatus": [i.to_dict() for i in self.conflicting_status],
            },
            "implAudit": self.impl_audit.to_dict(),
        }


# ---------------------------------------------------------------------------
# Collection
# ---------------------------------------------------------------------------


def collect_features(
    roots: Iterable[Path | str],
    *,
    base_dir: Path | str | None = None,
    fs: FileSystem | None = None,
    scan: ScanConfig | None = None,
) -> list[FeatureRecord]:
    """Discover and parse every feature file under *roots*, app by app."""
    fs = fs or LocalFileSystem()
    scan = scan or ScanConfig()
    features: list[FeatureRecord] = []

    for raw_root in roots:
        root = Path(raw_root)
        label_base = Path(base_dir) if base_dir is not None else root.parent

        for app in list_apps(root, features_subdir=scan.features_subdir, fs=fs):
            files = find_feature_files(
                app.features_dir,
                skip_dirs=scan.skip_dirs,
                suffix=scan.feature_suffix,
                fs=fs,
            )
            for path in files:
                content = read_feature_file(
                    app.features_dir, path, suffix=scan.feature_suffix, fs=fs
                )
                features.append(
                    parse_feature(
                        relative_posix(label_base, path),
                        content,
                        app_name=app.app_name,
                    )
                )

    return features


def compute_snapshot(
    roots: Iterable[Path | str],
    *,
    base_dir: Path | str | None = None,
    fs: FileSystem | None = None,
    scan: ScanConfig | None = None,
) -> Snapshot:
    """Build a fresh governance snapshot over *roots*."""
    features = collect_features(roots, base_dir=base_dir, fs=fs, scan=scan)
    tally = aggregate(features)
    audit = audit_impl_tags(tally.scenarios)

    logger.info(
        "snapshot_computed",
        apps=len(tally.apps),
        features=len(tally.features),
        scenarios=tally.overall.total,
        missing_status=len(tally.missing_status),
        conflicting_status=len(tally.conflicting_status),
        impl_tags=audit.impl_tags_total,
    )
    return Snapshot(generated_at=_utc_timestamp(), tally=tally, impl_audit=audit)


def compute_impl_audit(
    roots: Iterable[Path | str],
    *,
    base_dir: Path | str | None = None,
    fs: FileSystem | None = None,
    scan: ScanConfig | None = None,
) -> ImplAudit:
    """Run only the implementation-tag audit over *roots*."""
    features = collect_features(roots, base_dir=base_dir, fs=fs, scan=scan)
    return audit_impl_tags(s for f in features for s in f.scenarios)
