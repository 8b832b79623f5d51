"""``bddgov impl-audit`` — implementation-tag coverage."""

from __future__ import annotations

import json
from pathlib import Path

import click
from rich.console import Console

from bddgov.cli._output import emit_report
from bddgov.core.config import GovernanceConfig
from bddgov.core.constants import ExitCode
from bddgov.core.exceptions import FeatureReadError
from bddgov.core.impl_audit import audit_impl_tags
from bddgov.core.report import format_impl_audit
from bddgov.core.snapshot import collect_features


def cmd_impl_audit(
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
    """Run the impl-tag audit and return the process exit code.

    Missing or conflicting status tags are not this command's concern; it
    only fails on ``--fail-on-missing-ready-impl``.
    """
    try:
        features = collect_features(roots, base_dir=base_dir, scan=config.scan)
    except FeatureReadError as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        return ExitCode.READ_ERROR

    if not features:
        where = ", ".join(str(r) for r in roots)
        click.echo(f"No .feature files found under {where}.", err=True)
        return ExitCode.NOTHING_TO_CHECK

    audit = audit_impl_tags(s for f in features for s in f.scenarios)

    if fmt == "json":
        content = json.dumps(audit.to_dict(), indent=2)
    else:
        content = format_impl_audit(
            audit, include_ready_summary=check_ready_impl or fail_on_missing_ready_impl
        )
    emit_report(content, out_path)

    if fail_on_missing_ready_impl and audit.missing_ready_impl_count > 0:
        return ExitCode.GOVERNANCE_FAILED
    return ExitCode.SUCCESS
