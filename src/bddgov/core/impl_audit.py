"""
Implementation-tag audit.

Cross-indexes scenarios by their ``@impl_*`` tags and finds ``ready``
scenarios that declare no implementation tag at all.

Usage::

    audit = audit_impl_tags(scenarios)
    audit.impl_tags_total          # distinct @impl_* tags
    audit.missing_ready_impl_count # ready scenarios with no @impl_* tag
    print(format_impl_audit(audit))  # bddgov.core.report
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from bddgov.core.models import ImplAuditEntry, ImplScenarioRef, ScenarioRecord, Status


@dataclass(frozen=True)
class MissingReadyImpl:
    file_path: str
    scenario_name: str

    def to_dict(self) -> dict[str, str]:
        return {"filePath": self.file_path, "scenarioName": self.scenario_name}


@dataclass(frozen=True)
class ImplAudit:
    """Result of one audit run.  ``by_impl`` keys are sorted."""

    by_impl: dict[str, ImplAuditEntry] = field(default_factory=dict)
    missing_ready_impl: tuple[MissingReadyImpl, ...] = ()

    @property
    def impl_tags_total(self) -> int:
        return len(self.by_impl)

    @property
    def missing_ready_impl_count(self) -> int:
        return len(self.missing_ready_impl)

    def to_dict(self) -> dict[str, Any]:
        return {
            "implTagsTotal": self.impl_tags_total,
            "missingReadyImplCount": self.missing_ready_impl_count,
            "missingReadyImpl": [m.to_dict() for m in self.missing_ready_impl],
            "byImpl": {tag: entry.to_dict() for tag, entry in self.by_impl.items()},
        }


def audit_impl_tags(scenarios: Iterable[ScenarioRecord]) -> ImplAudit:
    by_impl: dict[str, ImplAuditEntry] = {}
    missing: list[MissingReadyImpl] = []

    for scenario in scenarios:
        if scenario.status is Status.READY and not scenario.impl_tags:
            missing.append(
                MissingReadyImpl(file_path=scenario.file_path, scenario_name=scenario.scenario_name)
            )

        for impl_tag in scenario.impl_tags:
            entry = by_impl.setdefault(impl_tag, ImplAuditEntry())
            entry.counts = entry.counts.add(scenario.status)
            entry.scenarios.append(
                ImplScenarioRef(
                    file_path=scenario.file_path,
                    scenario_name=scenario.scenario_name,
                    status=scenario.status,
                )
            )

    return ImplAudit(
        by_impl={tag: by_impl[tag] for tag in sorted(by_impl)},
        missing_ready_impl=tuple(missing),
    )
