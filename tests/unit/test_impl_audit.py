"""Unit tests for the implementation-tag audit."""

from __future__ import annotations

from bddgov.core.impl_audit import audit_impl_tags
from bddgov.core.models import Status
from bddgov.core.tags.scope import parse_feature

TEXT = """\
Feature: Payments

  @ready @impl_checkout
  Scenario: Card

  @ready
  Scenario: Voucher

  @wip @impl_wallet @impl_checkout
  Scenario: Wallet

  @skip @impl_wallet
  Scenario: Crypto

  @manual
  Scenario: Cash
"""


def _audit():
    return audit_impl_tags(parse_feature("apps/pay/features/p.feature", TEXT).scenarios)


class TestImplAudit:
    def test_distinct_impl_tags(self) -> None:
        audit = _audit()
        assert audit.impl_tags_total == 2
        assert list(audit.by_impl) == ["@impl_checkout", "@impl_wallet"]

    def test_counts_per_impl_tag(self) -> None:
        audit = _audit()
        checkout = audit.by_impl["@impl_checkout"].counts
        wallet = audit.by_impl["@impl_wallet"].counts
        assert (checkout.total, checkout.ready, checkout.wip) == (2, 1, 1)
        assert (wallet.total, wallet.wip, wallet.skip) == (2, 1, 1)

    def test_scenario_refs(self) -> None:
        refs = _audit().by_impl["@impl_wallet"].scenarios
        assert [(r.scenario_name, r.status) for r in refs] == [
            ("Wallet", Status.WIP),
            ("Crypto", Status.SKIP),
        ]
        assert refs[0].file_path == "apps/pay/features/p.feature"

    def test_missing_ready_impl_counts_only_ready(self) -> None:
        audit = _audit()
        assert audit.missing_ready_impl_count == 1
        assert audit.missing_ready_impl[0].scenario_name == "Voucher"

    def test_to_dict_shape(self) -> None:
        data = _audit().to_dict()
        assert data["implTagsTotal"] == 2
        assert data["missingReadyImplCount"] == 1
        assert data["missingReadyImpl"] == [
            {"filePath": "apps/pay/features/p.feature", "scenarioName": "Voucher"}
        ]
        wallet = data["byImpl"]["@impl_wallet"]
        assert wallet["wip"] == 1
        assert wallet["scenarios"][1] == {
            "filePath": "apps/pay/features/p.feature",
            "scenarioName": "Crypto",
            "status": "skip",
        }

    def test_no_scenarios(self) -> None:
        audit = audit_impl_tags([])
        assert audit.impl_tags_total == 0
        assert audit.missing_ready_impl_count == 0
        assert audit.to_dict()["byImpl"] == {}

    def test_runs_do_not_share_state(self) -> None:
        first = _audit()
        second = _audit()
        assert first.by_impl["@impl_checkout"].counts.total == 2
        assert second.by_impl["@impl_checkout"].counts.total == 2
        assert first.by_impl["@impl_checkout"] is not second.by_impl["@impl_checkout"]
