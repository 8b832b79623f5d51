"""Shared fixtures for dashboard API tests."""

from __future__ import annotations

from pathlib import Path

import pytest

ADMIN_TOKEN = "admin-token-0123456789"
VIEWER_TOKEN = "viewer-token-0123456789"


@pytest.fixture
def dashboard_config():
    from bddgov.core.config import GovernanceConfig

    return GovernanceConfig.model_validate(
        {
            "dashboard": {
                "tokens": [
                    {"token": ADMIN_TOKEN, "subject": "alice", "roles": ["ADMIN"]},
                    {"token": VIEWER_TOKEN, "subject": "bob", "roles": ["VIEWER"]},
                ]
            }
        }
    )


@pytest.fixture
def app(checkout_repo: Path, dashboard_config):
    from bddgov.dashboard.app import create_app

    return create_app(
        config=dashboard_config, roots=[checkout_repo / "apps"], base_dir=checkout_repo
    )


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient

    return TestClient(app)


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def viewer_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {VIEWER_TOKEN}"}
