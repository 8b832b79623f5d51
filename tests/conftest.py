"""Shared fixtures: on-disk monorepo layouts with feature files."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

CHECKOUT_FEATURE = """\
@ready
Feature: Checkout

  Scenario: Pay with card
    Given a basket
    When I pay by card

  @wip @impl_wallet
  Scenario: Pay with wallet
    Given a basket
    When I pay with a wallet
"""


@pytest.fixture
def write_features(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Write ``{relative_path: content}`` under tmp_path/repo and return the repo root."""

    def _write(files: dict[str, str]) -> Path:
        repo = tmp_path / "repo"
        repo.mkdir(exist_ok=True)
        for rel, content in files.items():
            target = repo / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return repo

    return _write


@pytest.fixture
def checkout_repo(write_features) -> Path:
    return write_features({"apps/shop/features/checkout.feature": CHECKOUT_FEATURE})


@pytest.fixture(autouse=True)
def _clean_bddgov_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's BDDGOV_* variables out of every test."""
    import os

    for name in list(os.environ):
        if name.startswith("BDDGOV_"):
            monkeypatch.delenv(name, raising=False)
