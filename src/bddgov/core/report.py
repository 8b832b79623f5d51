"""
Human-readable text reports for CI logs.

The status lines use a fixed ``key=value`` layout so that CI scripts can
grep them::

    backend    total=42 ready=30 wip=8 manual=2 skip=1 other=1
    ---
    overall    total=42 ready=30 wip=8 manual=2 skip=1 other=1
"""

from __future__ import annotations

from collections.abc import Sequence

from bddgov.core.constants import ALL_STATUS_TAGS, MAX_ISSUES_SHOWN, PRIMARY_STATUS_TAGS
from bddgov.core.impl_audit import ImplAudit
from bddgov.core.models import ConflictingStatus, MissingStatus, StatusCounts
from bddgov.core.snapshot import Snapshot


def format_counts_line(label: str, counts: StatusCounts) -> str:
    return (
        f"{label:<10} total={counts.total} ready={counts.ready} wip={counts.wip} "
        f"manual={counts.manual} skip={counts.skip} other={counts.other}"
    )


def format_status_report(snapshot: Snapshot) -> str:
    """Per-app count lines followed by the overall line."""
    if not snapshot.has_features:
        return "No .feature files found."

    lines = [format_counts_line(app.app_name, app.counts) for app in snapshot.apps]
    lines.append("---")
    lines.append(format_counts_line("overall", snapshot.overall))
    return "\n".join(lines)


def _tags_text(tags: Sequence[str]) -> str:
    return " ".join(tags) or "(none)"


def _truncation(total: int) -> list[str]:
    if total > MAX_ISSUES_SHOWN:
        return [f"...and {total - MAX_ISSUES_SHOWN} more"]
    return []


def format_conflicting_status(issues: Sequence[ConflictingStatus]) -> str:
    lines = [
        f"ERROR: {len(issues)} scenario(s) have conflicting status tags. "
        f"Choose exactly one of: {', '.join(PRIMARY_STATUS_TAGS)} "
        f"(you may optionally add @skip)."
    ]
    for issue in issues[:MAX_ISSUES_SHOWN]:
        lines.append(
            f"- {issue.file_path} :: {issue.scenario_name} "
            f"(primary: {', '.join(issue.primary_status_tags)}; tags: {_tags_text(issue.tags)})"
        )
    lines.extend(_truncation(len(issues)))
    return "\n".join(lines)


def format_missing_status(issues: Sequence[MissingStatus]) -> str:
    lines = [
        f"ERROR: {len(issues)} scenario(s) missing a status tag. "
        f"Add one of: {', '.join(ALL_STATUS_TAGS)}"
    ]
    for issue in issues[:MAX_ISSUES_SHOWN]:
        lines.append(
            f"- {issue.file_path} :: {issue.scenario_name} (tags: {_tags_text(issue.tags)})"
        )
    lines.extend(_truncation(len(issues)))
    return "\n".join(lines)


def format_impl_audit(audit: ImplAudit, *, include_ready_summary: bool = False) -> str:
    """``impl-tags total=N`` header, one line per impl tag, optional ready summary."""
    lines = [f"impl-tags total={audit.impl_tags_total}"]

    for impl_tag, entry in audit.by_impl.items():
        c = entry.counts
        lines.append(
            f"{impl_tag} ready={c.ready} wip={c.wip} manual={c.manual} "
            f"skip={c.skip} other={c.other}"
        )

    if include_ready_summary:
        lines.append(f"ready-without-impl total={audit.missing_ready_impl_count}")
        for row in audit.missing_ready_impl:
            lines.append(f"- {row.file_path}: {row.scenario_name}")

    return "\n".join(lines)
