"""Tag tokenizing, scope resolution, and status classification."""

from bddgov.core.tags.classifier import classify, detect_issue
from bddgov.core.tags.scope import parse_feature, resolve_tags
from bddgov.core.tags.tokenizer import classify_line, parse_tags_line

__all__ = [
    "classify",
    "classify_line",
    "detect_issue",
    "parse_feature",
    "parse_tags_line",
    "resolve_tags",
]
