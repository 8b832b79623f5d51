"""``bddgov serve`` — run the snapshot API under uvicorn."""

from __future__ import annotations

import sys

from rich.console import Console

from bddgov.core.config import GovernanceConfig
from bddgov.core.constants import ExitCode
from bddgov.dashboard.sanitize import is_loopback


def cmd_serve(
    *,
    config: GovernanceConfig,
    host: str,
    port: int,
    allow_non_loopback: bool,
    console: Console,
) -> None:
    if not is_loopback(host) and not allow_non_loopback:
        console.print(
            f"[red]Error:[/red] refusing to bind to non-loopback address {host!r}. "
            "Pass --i-understand-risk to expose the API beyond this machine."
        )
        sys.exit(ExitCode.CONFIG_ERROR)

    if not config.dashboard.tokens:
        console.print(
            "[yellow]Warning:[/yellow] no dashboard tokens configured; "
            "every request will be rejected with 401."
        )

    try:
        from bddgov.dashboard.app import start_server
    except ImportError:
        console.print(
            "[red]Error:[/red] the server requires FastAPI and uvicorn. "
            "Install with: pip install 'bddgov[dashboard]'"
        )
        sys.exit(ExitCode.CONFIG_ERROR)

    console.print(f"Serving governance snapshots on http://{host}:{port}/api/admin/bdd/status")
    start_server(host=host, port=port, config=config, allow_non_loopback=allow_non_loopback)
