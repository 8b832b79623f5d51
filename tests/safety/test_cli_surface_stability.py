"""Safety guard: CLI commands, flags, and exit codes must not drift."""

from __future__ import annotations

import click

from bddgov.core.constants import ExitCode

FROZEN_COMMANDS = frozenset({"check", "impl-audit", "serve", "init"})

# CI pipelines pass these flags; renaming one breaks them silently
FROZEN_GATE_OPTIONS = frozenset(
    {"--format", "--check-ready-impl", "--fail-on-missing-ready-impl", "--out"}
)


def _option_names(cmd: click.Command) -> set[str]:
    names: set[str] = set()
    for param in cmd.params:
        if isinstance(param, click.Option):
            names.update(param.opts)
    return names


def test_commands_present():
    from bddgov.cli.main import cli

    missing = FROZEN_COMMANDS - set(cli.commands)
    assert not missing, f"CLI commands removed: {sorted(missing)}"


def test_gate_options_present():
    from bddgov.cli.main import cli

    for name in ("check", "impl-audit"):
        missing = FROZEN_GATE_OPTIONS - _option_names(cli.commands[name])
        assert not missing, f"{name}: options removed: {sorted(missing)}"


def test_root_options_present():
    from bddgov.cli.main import cli

    assert {"--config", "--log-level", "--log-json"} <= _option_names(cli)


def test_exit_codes_frozen():
    assert {code.name: int(code) for code in ExitCode} == {
        "SUCCESS": 0,
        "GOVERNANCE_FAILED": 1,
        "NOTHING_TO_CHECK": 2,
        "CONFIG_ERROR": 3,
        "READ_ERROR": 4,
    }


def test_serve_risk_flag_hidden():
    from bddgov.cli.main import cli

    (risk,) = [p for p in cli.commands["serve"].params if p.name == "i_understand_risk"]
    assert risk.hidden
