"""
Scope resolver — turns a feature file's lines into resolved scenarios.

Tags written above a ``Feature:`` line form the feature scope; tags written
above a ``Scenario:`` / ``Scenario Outline:`` line form that scenario's scope.
Tags only attach to the *immediately following* Feature/Scenario line: any
other content line in between discards them.  Blank lines and comments are
transparent.

Status override rule: if a scenario carries any primary status tag
(``@ready``, ``@wip``, ``@manual``) those replace the feature's primary tags
entirely; otherwise the feature's apply.  All other tags (``@skip``,
``@impl_*``, free-form labels) from both scopes are kept.

Usage::

    feature = parse_feature(path_label, text)
    for scenario in feature.scenarios:
        print(scenario.scenario_name, scenario.status)
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from bddgov.core.constants import PRIMARY_STATUS_TAGS, UNNAMED_FEATURE
from bddgov.core.models import FeatureRecord, ScenarioRecord
from bddgov.core.tags.classifier import classify
from bddgov.core.tags.tokenizer import (
    FeatureStart,
    Ignored,
    OtherLine,
    ScenarioStart,
    TagLine,
    classify_line,
    extract_impl_tags,
)

# Lines end at \n or \r\n only (U+2028 and friends stay inside a line)
_LINE_BREAK_RE = re.compile(r"\r?\n")


@dataclass(frozen=True)
class ResolvedTags:
    """Effective tags of one scenario plus the intermediates used to build them."""

    effective_tags: tuple[str, ...]
    feature_primary: tuple[str, ...]
    scenario_primary: tuple[str, ...]
    effective_primary: tuple[str, ...]


def _primary_in(tags: Iterable[str]) -> tuple[str, ...]:
    present = set(tags)
    return tuple(t for t in PRIMARY_STATUS_TAGS if t in present)


def resolve_tags(feature_tags: Sequence[str], scenario_tags: Sequence[str]) -> ResolvedTags:
    """Apply scenario-over-feature override to primary status tags."""
    feature_primary = _primary_in(feature_tags)
    scenario_primary = _primary_in(scenario_tags)
    effective_primary = scenario_primary or feature_primary

    ordered = [
        *(t for t in feature_tags if t not in PRIMARY_STATUS_TAGS),
        *(t for t in scenario_tags if t not in PRIMARY_STATUS_TAGS),
        *effective_primary,
    ]
    return ResolvedTags(
        effective_tags=tuple(dict.fromkeys(ordered)),
        feature_primary=feature_primary,
        scenario_primary=scenario_primary,
        effective_primary=effective_primary,
    )


def parse_feature(file_path: str, content: str, *, app_name: str = "") -> FeatureRecord:
    """
    Parse one feature file into a FeatureRecord.

    *file_path* is only used as a label on the emitted records; nothing is
    read from disk here.
    """
    scenarios: list[ScenarioRecord] = []
    pending_tags: list[str] = []
    feature_tags: list[str] = []
    feature_name = UNNAMED_FEATURE

    # A UTF-8 byte order mark is not part of the first line
    for raw in _LINE_BREAK_RE.split(content.removeprefix("\ufeff")):
        line = classify_line(raw)

        match line:
            case Ignored():
                continue
            case TagLine(tokens=tokens):
                pending_tags.extend(tokens)
            case FeatureStart(name=name):
                feature_tags = pending_tags
                feature_name = name
                pending_tags = []
            case ScenarioStart(name=name):
                resolved = resolve_tags(feature_tags, pending_tags)
                scenarios.append(
                    ScenarioRecord(
                        file_path=file_path,
                        feature_name=feature_name,
                        scenario_name=name,
                        effective_tags=resolved.effective_tags,
                        status=classify(resolved.effective_tags),
                        impl_tags=extract_impl_tags(resolved.effective_tags),
                        feature_primary=resolved.feature_primary,
                        scenario_primary=resolved.scenario_primary,
                        effective_primary=resolved.effective_primary,
                    )
                )
                pending_tags = []
            case OtherLine():
                pending_tags = []

    return FeatureRecord(
        file_path=file_path,
        feature_name=feature_name,
        tags=tuple(feature_tags),
        scenarios=tuple(scenarios),
        app_name=app_name,
    )
