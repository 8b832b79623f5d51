"""
Status classification and governance issue detection.

Both functions look at the same resolved tag set and run independently: a
scenario tagged ``@ready @wip`` is reported as conflicting *and* still
counted as ``ready``.

Precedence (first match wins)::

    @skip > @manual > @ready > @wip > other
"""

from __future__ import annotations

from collections.abc import Iterable

from bddgov.core.constants import TAG_MANUAL, TAG_READY, TAG_SKIP, TAG_WIP
from bddgov.core.models import (
    ConflictingStatus,
    GovernanceIssue,
    MissingStatus,
    ScenarioRecord,
    Status,
)

_PRECEDENCE: tuple[tuple[str, Status], ...] = (
    (TAG_SKIP, Status.SKIP),
    (TAG_MANUAL, Status.MANUAL),
    (TAG_READY, Status.READY),
    (TAG_WIP, Status.WIP),
)


def classify(tags: Iterable[str]) -> Status:
    """Map a tag set to exactly one lifecycle status.  Never raises."""
    present = set(tags)
    for tag, status in _PRECEDENCE:
        if tag in present:
            return status
    return Status.OTHER


def detect_issue(record: ScenarioRecord) -> GovernanceIssue | None:
    """
    Return the governance issue for *record*, if any.

    Conflicts are judged within the scope that decides the status: a
    scenario's own primary tags first, the feature's only when the scenario
    has none.  ``@skip`` on its own is a complete status declaration.
    """
    if len(record.scenario_primary) > 1:
        return ConflictingStatus(
            file_path=record.file_path,
            scenario_name=record.scenario_name,
            tags=record.effective_tags,
            primary_status_tags=record.scenario_primary,
        )

    if not record.scenario_primary and len(record.feature_primary) > 1:
        return ConflictingStatus(
            file_path=record.file_path,
            scenario_name=record.scenario_name,
            tags=record.effective_tags,
            primary_status_tags=record.feature_primary,
        )

    if not record.effective_primary and TAG_SKIP not in record.effective_tags:
        return MissingStatus(
            file_path=record.file_path,
            scenario_name=record.scenario_name,
            tags=record.effective_tags,
        )

    return None
