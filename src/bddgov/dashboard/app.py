"""
FastAPI application serving governance snapshots to the dashboard.

Routes:
    GET /api/admin/bdd/status      — full governance snapshot
    GET /api/admin/bdd/impl-audit  — implementation-tag audit only

Both routes require a bearer token carrying the configured admin role.
Every request recomputes from the feature files on disk.

Usage::

    from bddgov.dashboard.app import create_app, start_server
    app = create_app()
    start_server(host="127.0.0.1", port=8787)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from pathlib import Path

import structlog
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from bddgov.core.config import GovernanceConfig
from bddgov.core.snapshot import compute_impl_audit, compute_snapshot
from bddgov.dashboard.auth import Principal, TokenAuthenticator, get_principal
from bddgov.dashboard.sanitize import is_loopback, redact_query_params

_access_log = logging.getLogger("bddgov.dashboard.access")
logger = structlog.get_logger()

_NO_STORE = {"cache-control": "no-store"}


class _AccessLogMiddleware(BaseHTTPMiddleware):
    """Log every request with method, path, redacted query, status, and elapsed time."""

    async def dispatch(self, request, call_next):
        start = time.monotonic()
        response = await call_next(request)
        elapsed_ms = (time.monotonic() - start) * 1000
        query = redact_query_params(str(request.query_params)) if request.query_params else ""
        _access_log.info(
            "dashboard_request",
            extra={
                "method": request.method,
                "path": request.url.path,
                "query": query,
                "status": response.status_code,
                "elapsed_ms": round(elapsed_ms, 1),
            },
        )
        return response


def _gate(principal: Principal | None, admin_role: str) -> JSONResponse | None:
    """Return the rejection response, or None when *principal* may proceed."""
    if principal is None:
        return JSONResponse({"error": "Unauthorized"}, status_code=401)
    if admin_role not in principal.roles:
        return JSONResponse({"error": "Forbidden"}, status_code=403)
    return None


def create_app(
    config: GovernanceConfig | None = None,
    roots: Sequence[Path] | None = None,
    base_dir: Path | None = None,
) -> FastAPI:
    """Create the FastAPI application."""
    config = config or GovernanceConfig()
    scan = config.scan
    roots = list(roots) if roots is not None else [scan.default_root]
    base_dir = base_dir if base_dir is not None else scan.repo_root_path
    admin_role = config.dashboard.admin_role

    app = FastAPI(
        title="bddgov",
        description="Read-only BDD governance snapshots",
        docs_url=None,
        redoc_url=None,
    )
    app.state.authenticator = TokenAuthenticator(config.dashboard.tokens)
    app.add_middleware(_AccessLogMiddleware)

    @app.get("/api/admin/bdd/status")
    def bdd_status(principal: Principal | None = Depends(get_principal)):
        if (rejected := _gate(principal, admin_role)) is not None:
            return rejected
        try:
            snapshot = compute_snapshot(roots, base_dir=base_dir, scan=scan)
        except Exception:
            # Details (paths) stay in the server log
            logger.exception("snapshot_failed", subject=principal.subject)
            return JSONResponse(
                {"error": "Failed to compute BDD governance snapshot"}, status_code=500
            )
        return JSONResponse(snapshot.to_dict(), headers=_NO_STORE)

    @app.get("/api/admin/bdd/impl-audit")
    def bdd_impl_audit(principal: Principal | None = Depends(get_principal)):
        if (rejected := _gate(principal, admin_role)) is not None:
            return rejected
        try:
            audit = compute_impl_audit(roots, base_dir=base_dir, scan=scan)
        except Exception:
            logger.exception("impl_audit_failed", subject=principal.subject)
            return JSONResponse({"error": "Failed to compute BDD impl audit"}, status_code=500)
        return JSONResponse(audit.to_dict(), headers=_NO_STORE)

    return app


def start_server(
    host: str = "127.0.0.1",
    port: int = 8787,
    config: GovernanceConfig | None = None,
    *,
    allow_non_loopback: bool = False,
) -> None:
    """Start the API server (blocking)."""
    if not is_loopback(host) and not allow_non_loopback:
        raise ValueError(
            f"Server must bind to a loopback address unless explicitly allowed. "
            f"Got: {host!r}. Use 127.0.0.1, ::1, or localhost."
        )

    import uvicorn

    app = create_app(config=config)
    logger.info("server_starting", host=host, port=port)
    uvicorn.run(app, host=host, port=port, log_level="warning")
