"""Tests for snapshot computation over real directory trees."""

from __future__ import annotations

from pathlib import Path

import pytest

from bddgov.core.config import ScanConfig
from bddgov.core.exceptions import FeatureReadError
from bddgov.core.models import Status
from bddgov.core.snapshot import collect_features, compute_impl_audit, compute_snapshot


class TestCheckoutExample:
    def test_counts(self, checkout_repo: Path) -> None:
        snap = compute_snapshot([checkout_repo / "apps"])
        assert snap.overall.to_dict() == {
            "total": 2,
            "ready": 1,
            "wip": 1,
            "manual": 0,
            "skip": 0,
            "other": 0,
        }

    def test_no_issues(self, checkout_repo: Path) -> None:
        snap = compute_snapshot([checkout_repo / "apps"])
        assert snap.missing_status == ()
        assert snap.conflicting_status == ()
        assert not snap.has_issues

    def test_impl_audit(self, checkout_repo: Path) -> None:
        audit = compute_snapshot([checkout_repo / "apps"]).impl_audit
        wallet = audit.by_impl["@impl_wallet"].counts
        assert (wallet.total, wallet.wip) == (1, 1)
        assert audit.missing_ready_impl_count == 1
        assert audit.missing_ready_impl[0].scenario_name == "Pay with card"

    def test_paths_relative_to_repo(self, checkout_repo: Path) -> None:
        snap = compute_snapshot([checkout_repo / "apps"])
        (feature,) = snap.features
        assert feature.file_path == "apps/shop/features/checkout.feature"
        assert feature.app_name == "shop"

    def test_json_shape(self, checkout_repo: Path) -> None:
        data = compute_snapshot([checkout_repo / "apps"]).to_dict()
        assert data["generatedAt"].endswith("Z")
        assert data["apps"] == [{"appName": "shop", "counts": data["overall"]}]
        feature = data["features"][0]
        assert feature["featureName"] == "Checkout"
        assert feature["tags"] == ["@ready"]
        wallet = feature["scenarios"][1]
        assert wallet == {
            "appName": "shop",
            "filePath": "apps/shop/features/checkout.feature",
            "featureName": "Checkout",
            "scenarioName": "Pay with wallet",
            "status": "wip",
            "tags": ["@impl_wallet", "@wip"],
            "implTags": ["@impl_wallet"],
        }
        assert data["issues"] == {"missingStatus": [], "conflictingStatus": []}
        assert data["implAudit"]["implTagsTotal"] == 1
        assert data["implAudit"]["missingReadyImplCount"] == 1


class TestSnapshotProperties:
    @pytest.fixture
    def repo(self, write_features) -> Path:
        return write_features(
            {
                "apps/web/features/login.feature": (
                    "@ready\nFeature: Login\nScenario: ok\n@ready @wip\nScenario: clash\n"
                ),
                "apps/web/features/nested/deep/logout.feature": (
                    "Feature: Logout\nScenario: nothing\n@skip\nScenario: later\n"
                ),
                "apps/api/features/health.feature": "@manual\nFeature: Health\nScenario: ping\n",
                "apps/api/features/node_modules/vendored.feature": "Feature: V\nScenario: x\n",
                "apps/api/features/notes.txt": "Scenario: not a feature file\n",
                "apps/docs/README.md": "no features dir",
            }
        )

    def test_idempotent_except_timestamp(self, repo: Path) -> None:
        first = compute_snapshot([repo / "apps"]).to_dict()
        second = compute_snapshot([repo / "apps"]).to_dict()
        first.pop("generatedAt")
        second.pop("generatedAt")
        assert first == second

    def test_conservation(self, repo: Path) -> None:
        snap = compute_snapshot([repo / "apps"])
        app_sum = sum((a.counts.total for a in snap.apps), 0)
        assert snap.overall.total == app_sum == 5
        assert snap.overall.total == sum(len(f.scenarios) for f in snap.features)

    def test_apps_without_features_dir_skipped(self, repo: Path) -> None:
        snap = compute_snapshot([repo / "apps"])
        assert [a.app_name for a in snap.apps] == ["api", "web"]

    def test_skip_dirs_and_suffix(self, repo: Path) -> None:
        paths = [f.file_path for f in compute_snapshot([repo / "apps"]).features]
        assert paths == [
            "apps/api/features/health.feature",
            "apps/web/features/login.feature",
            "apps/web/features/nested/deep/logout.feature",
        ]

    def test_issue_lists(self, repo: Path) -> None:
        snap = compute_snapshot([repo / "apps"])
        assert [i.scenario_name for i in snap.missing_status] == ["nothing"]
        (clash,) = snap.conflicting_status
        assert clash.primary_status_tags == ("@ready", "@wip")

    def test_conflicting_scenario_still_counted_ready(self, repo: Path) -> None:
        web = {a.app_name: a.counts for a in compute_snapshot([repo / "apps"]).apps}["web"]
        assert web.ready == 2

    def test_multiple_roots(self, write_features) -> None:
        repo = write_features(
            {
                "apps/a/features/a.feature": "@ready\nFeature: A\nScenario: a\n",
                "packages/b/features/b.feature": "@wip\nFeature: B\nScenario: b\n",
            }
        )
        snap = compute_snapshot([repo / "apps", repo / "packages"], base_dir=repo)
        assert [f.file_path for f in snap.features] == [
            "apps/a/features/a.feature",
            "packages/b/features/b.feature",
        ]
        assert snap.overall.total == 2

    def test_missing_root_is_empty(self, tmp_path: Path) -> None:
        snap = compute_snapshot([tmp_path / "does-not-exist"])
        assert not snap.has_features
        assert snap.overall.total == 0

    def test_scan_config_features_subdir(self, write_features) -> None:
        repo = write_features({"apps/a/specs/a.feature": "@ready\nFeature: A\nScenario: a\n"})
        scan = ScanConfig(features_subdir="specs")
        assert len(collect_features([repo / "apps"], scan=scan)) == 1
        assert collect_features([repo / "apps"]) == []

    def test_compute_impl_audit_standalone(self, checkout_repo: Path) -> None:
        audit = compute_impl_audit([checkout_repo / "apps"])
        assert audit.impl_tags_total == 1
        assert audit.missing_ready_impl_count == 1

    def test_undecodable_file_raises(self, write_features) -> None:
        repo = write_features({"apps/a/features/ok.feature": "Feature: ok\n"})
        (repo / "apps/a/features/bad.feature").write_bytes(b"\xff\xfe\xfa")
        with pytest.raises(FeatureReadError):
            compute_snapshot([repo / "apps"])


class TestEncoding:
    def test_byte_order_mark_keeps_first_line_tags(self, write_features) -> None:
        repo = write_features({})
        bom_file = repo / "apps" / "shop" / "features" / "bom.feature"
        bom_file.parent.mkdir(parents=True)
        bom_file.write_bytes(b"\xef\xbb\xbf@ready\nFeature: Checkout\nScenario: Pay\n")

        snap = compute_snapshot([repo / "apps"])

        (feature,) = snap.features
        assert feature.tags == ("@ready",)
        assert feature.scenarios[0].status is Status.READY
        assert snap.missing_status == ()
