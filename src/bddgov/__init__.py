"""
bddgov — governance audits for Gherkin behavior specifications.

bddgov reads the ``.feature`` files of a monorepo, resolves the status tags
attached to every Feature and Scenario, and produces a governance snapshot:
per-scenario lifecycle status, implementation-tag coverage, and the
scenarios that are missing a status or carry conflicting ones.

Package layout (src/bddgov/):
  core/tags/  — tokenizer, scope resolver, classifier
  core/       — discovery, aggregation, impl audit, snapshot, config, logging
  cli/        — Click CLI entry point (CI gating)
  dashboard/  — FastAPI JSON endpoint behind an admin gate
"""

__version__ = "0.4.0"
__all__ = ["__version__"]
