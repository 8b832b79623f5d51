"""
Tag tokenizer and line classifier for Gherkin feature files.

Each raw line is reduced to one of a small set of line kinds so that the
scope resolver never has to look at keywords or punctuation itself::

    classify_line("@ready @impl_checkout")  -> TagLine(tokens=("@ready", "@impl_checkout"))
    classify_line("Feature: Checkout")      -> FeatureStart(name="Checkout")
    classify_line("Scenario: Pay by card")  -> ScenarioStart(name="Pay by card", outline=False)
    classify_line("  # a comment")          -> Ignored()
    classify_line("Given a basket")         -> OtherLine()
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from bddgov.core.constants import IMPL_TAG_PREFIX, UNNAMED_FEATURE, UNNAMED_SCENARIO

_FEATURE_RE = re.compile(r"^Feature:", re.IGNORECASE)
_SCENARIO_RE = re.compile(r"^Scenario( Outline)?:", re.IGNORECASE)


def parse_tags_line(line: str) -> list[str]:
    """Return the ``@``-prefixed whitespace-separated tokens of *line*, in order."""
    return [token for token in line.split() if token.startswith("@")]


def extract_impl_tags(tags: tuple[str, ...] | list[str]) -> tuple[str, ...]:
    return tuple(t for t in tags if t.startswith(IMPL_TAG_PREFIX))


def _name_after_colon(line: str, default: str) -> str:
    _, _, rest = line.partition(":")
    return rest.strip() or default


# ---------------------------------------------------------------------------
# Line kinds
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Ignored:
    """Blank line or ``#`` comment.  Leaves pending tags untouched."""


@dataclass(frozen=True)
class TagLine:
    tokens: tuple[str, ...]


@dataclass(frozen=True)
class FeatureStart:
    name: str


@dataclass(frozen=True)
class ScenarioStart:
    name: str
    outline: bool = False


@dataclass(frozen=True)
class OtherLine:
    """Any other content (steps, Background, Examples, tables, docstrings)."""


Line = Ignored | TagLine | FeatureStart | ScenarioStart | OtherLine

_IGNORED = Ignored()
_OTHER = OtherLine()


def classify_line(raw: str) -> Line:
    line = raw.strip()
    if not line or line.startswith("#"):
        return _IGNORED

    if line.startswith("@"):
        return TagLine(tokens=tuple(parse_tags_line(line)))

    if _FEATURE_RE.match(line):
        return FeatureStart(name=_name_after_colon(line, UNNAMED_FEATURE))

    m = _SCENARIO_RE.match(line)
    if m:
        return ScenarioStart(
            name=_name_after_colon(line, UNNAMED_SCENARIO),
            outline=m.group(1) is not None,
        )

    return _OTHER
