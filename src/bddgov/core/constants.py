"""bddgov constants: status vocabulary, discovery defaults, and exit codes."""

from __future__ import annotations

from enum import IntEnum

# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------


class ExitCode(IntEnum):
    SUCCESS = 0
    GOVERNANCE_FAILED = 1
    NOTHING_TO_CHECK = 2
    CONFIG_ERROR = 3
    READ_ERROR = 4


# ---------------------------------------------------------------------------
# Tag vocabulary
# ---------------------------------------------------------------------------

TAG_READY = "@ready"
TAG_WIP = "@wip"
TAG_MANUAL = "@manual"
TAG_SKIP = "@skip"

# Mutually exclusive by policy; canonical order is used wherever a list of
# primary tags is reported.
PRIMARY_STATUS_TAGS: tuple[str, ...] = (TAG_READY, TAG_WIP, TAG_MANUAL)

ALL_STATUS_TAGS: tuple[str, ...] = (TAG_READY, TAG_WIP, TAG_MANUAL, TAG_SKIP)

IMPL_TAG_PREFIX = "@impl_"

UNNAMED_SCENARIO = "(unnamed)"
UNNAMED_FEATURE = "(unnamed feature)"

# ---------------------------------------------------------------------------
# Discovery defaults
# ---------------------------------------------------------------------------

CONFIG_FILENAME = "bddgov.toml"
DEFAULT_APPS_DIR = "apps"
DEFAULT_FEATURES_SUBDIR = "features"
FEATURE_SUFFIX = ".feature"

DEFAULT_SKIP_DIRS: tuple[str, ...] = (
    "node_modules",
    "dist",
    "build",
    ".turbo",
    ".next",
    "coverage",
)

# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------

MAX_ISSUES_SHOWN = 50  # per issue list in text output
