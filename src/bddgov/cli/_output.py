"""Report output: stdout, or a file confined to the working directory."""

from __future__ import annotations

import os
from pathlib import Path

import click


def resolve_out_path(out_path: str) -> Path:
    """Resolve *out_path* against CWD; refuse anything that escapes it."""
    cwd = Path.cwd().resolve()
    resolved = (cwd / out_path).resolve()
    if not resolved.is_relative_to(cwd) or resolved == cwd:
        raise click.BadParameter(
            f"must be a file path within {cwd}: {out_path}", param_hint="'--out'"
        )
    return resolved


def emit_report(content: str, out_path: str | None) -> None:
    """Print *content*, or write it to *out_path* and say where it went."""
    if not out_path:
        click.echo(content)
        return

    target = resolve_out_path(out_path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content + "\n", encoding="utf-8")
    click.echo(f"wrote {Path(os.path.relpath(target, Path.cwd().resolve())).as_posix()}")
