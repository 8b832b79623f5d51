"""Safety guard: snapshot JSON field names are consumed by the dashboard and CI."""

from __future__ import annotations

from pathlib import Path

from bddgov.core.constants import ALL_STATUS_TAGS, PRIMARY_STATUS_TAGS
from bddgov.core.models import Status
from bddgov.core.snapshot import compute_snapshot

FROZEN_TOP_LEVEL = {"generatedAt", "overall", "apps", "features", "issues", "implAudit"}
FROZEN_COUNTS = {"total", "ready", "wip", "manual", "skip", "other"}
FROZEN_FEATURE = {"appName", "filePath", "featureName", "tags", "counts", "scenarios"}
FROZEN_SCENARIO = {
    "appName",
    "filePath",
    "featureName",
    "scenarioName",
    "status",
    "tags",
    "implTags",
}
FROZEN_IMPL_AUDIT = {"implTagsTotal", "missingReadyImplCount", "missingReadyImpl", "byImpl"}

CONTRACT_TREE = """\
@ready
Feature: Contract

  @impl_a
  Scenario: covered

  Scenario: uncovered

  @ready @manual
  Scenario: clash
"""


def _snapshot(write_features) -> dict:
    repo = write_features(
        {
            "apps/a/features/contract.feature": CONTRACT_TREE,
            "apps/b/features/bare.feature": "Feature: Bare\nScenario: nothing\n",
        }
    )
    return compute_snapshot([repo / "apps"]).to_dict()


def test_top_level_keys(write_features):
    assert set(_snapshot(write_features)) == FROZEN_TOP_LEVEL


def test_counts_keys(write_features):
    data = _snapshot(write_features)
    assert set(data["overall"]) == FROZEN_COUNTS
    for app in data["apps"]:
        assert set(app) == {"appName", "counts"}
        assert set(app["counts"]) == FROZEN_COUNTS


def test_feature_and_scenario_keys(write_features):
    for feature in _snapshot(write_features)["features"]:
        assert set(feature) == FROZEN_FEATURE
        for scenario in feature["scenarios"]:
            assert set(scenario) == FROZEN_SCENARIO


def test_issue_keys(write_features):
    issues = _snapshot(write_features)["issues"]
    assert set(issues) == {"missingStatus", "conflictingStatus"}
    assert set(issues["missingStatus"][0]) == {"filePath", "scenarioName", "tags"}
    assert set(issues["conflictingStatus"][0]) == {
        "filePath",
        "scenarioName",
        "tags",
        "primaryStatusTags",
    }


def test_impl_audit_keys(write_features):
    audit = _snapshot(write_features)["implAudit"]
    assert set(audit) == FROZEN_IMPL_AUDIT
    entry = audit["byImpl"]["@impl_a"]
    assert set(entry) == FROZEN_COUNTS | {"scenarios"}
    assert set(entry["scenarios"][0]) == {"filePath", "scenarioName", "status"}


def test_file_paths_are_posix_relative(write_features):
    for feature in _snapshot(write_features)["features"]:
        path = feature["filePath"]
        assert not Path(path).is_absolute()
        assert "\\" not in path
        assert path.startswith("apps/")


def test_status_vocabulary_frozen():
    assert [s.value for s in Status] == ["ready", "wip", "manual", "skip", "other"]
    assert PRIMARY_STATUS_TAGS == ("@ready", "@wip", "@manual")
    assert ALL_STATUS_TAGS == ("@ready", "@wip", "@manual", "@skip")
