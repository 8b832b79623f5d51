"""
bddgov CLI entry point.

Commands:
  bddgov check [ROOT...]        — status counts + governance issues (CI gate)
  bddgov impl-audit [ROOT...]   — implementation-tag coverage
  bddgov serve                  — serve snapshots over HTTP (admin token required)
  bddgov init                   — write a starter bddgov.toml

Exit codes:
  0  success
  1  governance check failed
  2  nothing to check (no .feature files)
  3  configuration error
  4  a feature file could not be read
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.console import Console

from bddgov import __version__
from bddgov.core.constants import ExitCode

if TYPE_CHECKING:
    from bddgov.core.config import GovernanceConfig

console = Console()
err_console = Console(stderr=True)

_FORMAT_CHOICE = click.Choice(["text", "json"])


def _load_config(ctx: click.Context) -> GovernanceConfig:
    """Load (once) the config named by the root ``--config`` option."""
    from bddgov.core.config import load_config
    from bddgov.core.exceptions import ConfigError
    from bddgov.core.logging import configure_logging

    obj = ctx.ensure_object(dict)
    if "config" not in obj:
        try:
            config = load_config(obj.get("config_path"))
        except ConfigError as exc:
            err_console.print(f"[red]Config error:[/red] {exc}")
            sys.exit(ExitCode.CONFIG_ERROR)
        # Command-line flags win over [logging]
        configure_logging(
            level=obj.get("log_level") or config.logging.level,
            json_output=obj.get("log_json") or config.logging.format == "json",
        )
        obj["config"] = config
    return obj["config"]


def _resolve_roots(
    config: GovernanceConfig, roots: tuple[Path, ...]
) -> tuple[list[Path], Path | None]:
    """Explicit roots label paths from their parent; the default root from repo_root."""
    if roots:
        return list(roots), None
    return [config.scan.default_root], config.scan.repo_root_path


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "--version", "-V", message="bddgov %(version)s")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to bddgov.toml (default: $BDDGOV_CONFIG or ./bddgov.toml).",
)
@click.option("--log-level", default=None, help="Log level for structured logging.")
@click.option("--log-json", is_flag=True, default=False, help="Emit JSON log lines.")
@click.pass_context
def cli(
    ctx: click.Context, config_path: Path | None, log_level: str | None, log_json: bool
) -> None:
    """bddgov — governance audits for Gherkin feature files."""
    from bddgov.core.logging import configure_logging

    obj = ctx.ensure_object(dict)
    obj.update(config_path=config_path, log_level=log_level, log_json=log_json)
    configure_logging(level=log_level or "WARNING", json_output=log_json)


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("roots", nargs=-1, type=click.Path(file_okay=False, path_type=Path))
@click.option("--format", "fmt", type=_FORMAT_CHOICE, default="text", show_default=True)
@click.option(
    "--check-ready-impl",
    is_flag=True,
    default=False,
    help="Include the ready-without-impl summary in text output.",
)
@click.option(
    "--fail-on-missing-ready-impl",
    is_flag=True,
    default=False,
    help="Exit non-zero when a @ready scenario has no @impl_* tag.",
)
@click.option("--out", "out_path", default=None, help="Write the report to a file (within CWD).")
@click.pass_context
def check(
    ctx: click.Context,
    roots: tuple[Path, ...],
    fmt: str,
    check_ready_impl: bool,
    fail_on_missing_ready_impl: bool,
    out_path: str | None,
) -> None:
    """Count scenarios by status and fail on missing or conflicting status tags.

    ROOT defaults to <repo_root>/apps.  Each subdirectory of a root is an
    app; feature files are read from <app>/features.
    """
    from bddgov.cli._check import cmd_check

    config = _load_config(ctx)
    root_paths, base_dir = _resolve_roots(config, roots)
    code = cmd_check(
        config=config,
        roots=root_paths,
        base_dir=base_dir,
        fmt=fmt,
        check_ready_impl=check_ready_impl,
        fail_on_missing_ready_impl=fail_on_missing_ready_impl,
        out_path=out_path,
        err_console=err_console,
    )
    sys.exit(code)


# ---------------------------------------------------------------------------
# impl-audit
# ---------------------------------------------------------------------------


@cli.command("impl-audit")
@click.argument("roots", nargs=-1, type=click.Path(file_okay=False, path_type=Path))
@click.option("--format", "fmt", type=_FORMAT_CHOICE, default="text", show_default=True)
@click.option(
    "--check-ready-impl",
    is_flag=True,
    default=False,
    help="List @ready scenarios without any @impl_* tag.",
)
@click.option(
    "--fail-on-missing-ready-impl",
    is_flag=True,
    default=False,
    help="Exit non-zero when a @ready scenario has no @impl_* tag.",
)
@click.option("--out", "out_path", default=None, help="Write the report to a file (within CWD).")
@click.pass_context
def impl_audit(
    ctx: click.Context,
    roots: tuple[Path, ...],
    fmt: str,
    check_ready_impl: bool,
    fail_on_missing_ready_impl: bool,
    out_path: str | None,
) -> None:
    """Summarise scenarios per @impl_* tag."""
    from bddgov.cli._impl_audit import cmd_impl_audit

    config = _load_config(ctx)
    root_paths, base_dir = _resolve_roots(config, roots)
    code = cmd_impl_audit(
        config=config,
        roots=root_paths,
        base_dir=base_dir,
        fmt=fmt,
        check_ready_impl=check_ready_impl,
        fail_on_missing_ready_impl=fail_on_missing_ready_impl,
        out_path=out_path,
        err_console=err_console,
    )
    sys.exit(code)


# ---------------------------------------------------------------------------
# serve
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--host", default=None, help="Bind address (default from config: 127.0.0.1).")
@click.option("--port", type=int, default=None, help="Port (default from config: 8787).")
@click.option("--i-understand-risk", is_flag=True, default=False, hidden=True)
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None, i_understand_risk: bool) -> None:
    """Serve governance snapshots at /api/admin/bdd/status."""
    from bddgov.cli._serve import cmd_serve

    config = _load_config(ctx)
    cmd_serve(
        config=config,
        host=host or config.dashboard.host,
        port=port or config.dashboard.port,
        allow_non_loopback=i_understand_risk,
        console=console,
    )


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------


@cli.command()
@click.option(
    "--path",
    "target",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("bddgov.toml"),
    show_default=True,
)
@click.option("--force", is_flag=True, default=False, help="Overwrite an existing file.")
def init(target: Path, force: bool) -> None:
    """Write a starter configuration file."""
    from bddgov.core.config import default_config_data, save_config
    from bddgov.core.exceptions import ConfigError

    if target.exists() and not force:
        err_console.print(f"[red]Error:[/red] {target} already exists (use --force).")
        sys.exit(ExitCode.CONFIG_ERROR)
    try:
        save_config(default_config_data(), target)
    except ConfigError as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        sys.exit(ExitCode.CONFIG_ERROR)
    click.echo(f"Wrote {target}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
