"""Ignore patterns for vault synchronization.

This module provides:
- IgnorePatterns: gitignore-style matching on vault-relative paths
- DEFAULT_IGNORE_PATTERNS: Editor, VCS and temp files never synced
"""

from __future__ import annotations

import fnmatch
from pathlib import Path

DEFAULT_IGNORE_PATTERNS = [
    ".git/",
    ".obsidian/",
    ".trash/",
    ".webhooksync/",
    ".DS_Store",
    "Thumbs.db",
    "*.tmp",
    "*.temp",
    "~*",
    "*.swp",
    "*.swo",
]

IGNORE_FILE_NAME = ".syncignore"


class IgnorePatterns:
    """Matches vault-relative paths against ignore patterns."""

    def __init__(self, patterns: list[str] | None = None) -> None:
        self._patterns = list(DEFAULT_IGNORE_PATTERNS)
        if patterns:
            self._patterns.extend(patterns)

    @property
    def patterns(self) -> list[str]:
        return list(self._patterns)

    def add_pattern(self, pattern: str) -> None:
        """Add an ignore pattern."""
        self._patterns.append(pattern)

    def load_from_file(self, path: Path) -> None:
        """Load patterns from a .syncignore file, if present."""
        if not path.exists():
            return
        with open(path, encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#"):
                    self._patterns.append(line)

    def should_ignore(self, rel_path: str) -> bool:
        """Check if a vault-relative path should be ignored.

        Args:
            rel_path: Path relative to the vault root, forward slashes.

        Returns:
            True if the path should be ignored.
        """
        rel_path = rel_path.replace("\\", "/").strip("/")
        parts = rel_path.split("/")
        name = parts[-1]

        for pattern in self._patterns:
            # Directory patterns match the folder itself and anything below it
            if pattern.endswith("/"):
                folder = pattern[:-1]
                if any(fnmatch.fnmatch(part, folder) for part in parts):
                    return True
            elif "/" in pattern:
                if fnmatch.fnmatch(rel_path, pattern):
                    return True
            elif fnmatch.fnmatch(name, pattern):
                return True

        return False
