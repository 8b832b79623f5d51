"""
Feature file discovery.

The audit only needs two capabilities from the filesystem: list a directory
(files and subdirectories, best effort) and read a file as text.  Both are
expressed by the :class:`FileSystem` protocol so that tests can substitute
an in-memory tree.

Traversal is iterative (explicit stack), so deep trees never hit the
interpreter's recursion limit.  Directories that cannot be listed are
skipped; files that cannot be read are fatal (:class:`FeatureReadError`).
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import structlog

from bddgov.core.constants import DEFAULT_SKIP_DIRS, FEATURE_SUFFIX
from bddgov.core.exceptions import FeatureReadError

logger = structlog.get_logger()


class FileSystem(Protocol):
    """Directory listing and text reading used by the audit."""

    def list_dir(self, path: Path) -> tuple[list[str], list[str]]:
        """Return ``(file_names, dir_names)``; empty lists if *path* cannot be listed."""
        ...

    def read_text(self, path: Path) -> str: ...

    def is_dir(self, path: Path) -> bool: ...


class LocalFileSystem:
    """FileSystem backed by the real disk."""

    def list_dir(self, path: Path) -> tuple[list[str], list[str]]:
        files: list[str] = []
        dirs: list[str] = []
        try:
            with os.scandir(path) as it:
                for entry in it:
                    try:
                        if entry.is_dir(follow_symlinks=False):
                            dirs.append(entry.name)
                        elif entry.is_file():
                            files.append(entry.name)
                    except OSError:
                        continue
        except OSError as exc:
            logger.debug("directory_unreadable", path=str(path), error=str(exc))
            return [], []
        return files, dirs

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8-sig")

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()


@dataclass(frozen=True)
class AppSource:
    """One app under a traversal root and the directory holding its features."""

    app_name: str
    features_dir: Path


def list_apps(
    root: Path,
    *,
    features_subdir: str = "features",
    fs: FileSystem | None = None,
) -> list[AppSource]:
    """Return the apps under *root* that have a features directory, sorted by name."""
    fs = fs or LocalFileSystem()
    _, dir_names = fs.list_dir(root)
    apps: list[AppSource] = []
    for name in sorted(dir_names):
        features_dir = root / name / features_subdir if features_subdir else root / name
        if fs.is_dir(features_dir):
            apps.append(AppSource(app_name=name, features_dir=features_dir))
    return apps


def find_feature_files(
    directory: Path,
    *,
    skip_dirs: Iterable[str] = DEFAULT_SKIP_DIRS,
    suffix: str = FEATURE_SUFFIX,
    fs: FileSystem | None = None,
) -> list[Path]:
    """
    Return every ``*.feature`` file under *directory*, in sorted path order.

    Excluded directory names (``node_modules``, build output, ...) are not
    descended into.
    """
    fs = fs or LocalFileSystem()
    skipped = frozenset(skip_dirs)
    results: list[Path] = []
    stack: list[Path] = [directory]

    while stack:
        current = stack.pop()
        file_names, dir_names = fs.list_dir(current)
        for name in dir_names:
            if name not in skipped:
                stack.append(current / name)
        for name in file_names:
            if name.endswith(suffix):
                results.append(current / name)

    results.sort(key=lambda p: p.as_posix())
    logger.debug("feature_files_discovered", directory=str(directory), count=len(results))
    return results


def read_feature_file(
    base_dir: Path,
    file_path: Path,
    *,
    suffix: str = FEATURE_SUFFIX,
    fs: FileSystem | None = None,
) -> str:
    """
    Read a discovered feature file after checking it stays inside *base_dir*.

    Raises:
        FeatureReadError: path escapes *base_dir*, has the wrong extension,
                          or cannot be read.
    """
    fs = fs or LocalFileSystem()
    base = Path(os.path.abspath(base_dir))
    resolved = Path(os.path.abspath(file_path))

    if not resolved.is_relative_to(base):
        raise FeatureReadError(f"Invalid feature file path (must be within {base}): {file_path}")
    if not resolved.name.endswith(suffix):
        raise FeatureReadError(
            f"Invalid feature file extension (expected {suffix}): {file_path}"
        )

    try:
        return fs.read_text(resolved)
    except (OSError, UnicodeDecodeError) as exc:
        raise FeatureReadError(f"Cannot read feature file {resolved}: {exc}") from exc


def relative_posix(base_dir: Path, path: Path) -> str:
    """Render *path* relative to *base_dir* with forward slashes."""
    return Path(os.path.relpath(os.path.abspath(path), os.path.abspath(base_dir))).as_posix()
