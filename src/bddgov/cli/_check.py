"""``bddgov check`` — status counts and governance gate."""

from __future__ import annotations

import json
from pathlib import Path

import click
from rich.console import Console

from bddgov.cli._output import emit_report
from bddgov.core.config import GovernanceConfig
from bddgov.core.constants import ExitCode
from bddgov.core.exceptions import FeatureReadError
from bddgov.core.report import (
    format_conflicting_status,
    format_impl_audit,
    format_missing_status,
    format_status_report,
)
from bddgov.core.snapshot import compute_snapshot


def cmd_check(
    *,
    config: GovernanceConfig,
    roots: list[Path],
    base_dir: Path | None,
    fmt: str,
    check_ready_impl: bool,
    fail_on_missing_ready_impl: bool,
    out_path: str | None,
    err_console: Console,
) -> int:
    """Run the governance check and return the process exit code."""
    try:
        snapshot = compute_snapshot(roots, base_dir=base_dir, scan=config.scan)
    except FeatureReadError as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        return ExitCode.READ_ERROR

    if not snapshot.has_features:
        where = ", ".join(str(r) for r in roots)
        click.echo(f"No .feature files found under {where}.", err=True)
        return ExitCode.NOTHING_TO_CHECK

    if fmt == "json":
        content = json.dumps(snapshot.to_dict(), indent=2)
    else:
        content = format_status_report(snapshot)
        if check_ready_impl or fail_on_missing_ready_impl:
            content += "\n\n" + format_impl_audit(snapshot.impl_audit, include_ready_summary=True)

    emit_report(content, out_path)

    # Issue listings go to stderr so --format json stays parseable
    if snapshot.conflicting_status:
        click.echo("", err=True)
        click.echo(format_conflicting_status(snapshot.conflicting_status), err=True)
    if snapshot.missing_status:
        click.echo("", err=True)
        click.echo(format_missing_status(snapshot.missing_status), err=True)

    if snapshot.has_issues:
        return ExitCode.GOVERNANCE_FAILED
    if fail_on_missing_ready_impl and snapshot.impl_audit.missing_ready_impl_count > 0:
        return ExitCode.GOVERNANCE_FAILED
    return ExitCode.SUCCESS
