"""Local document store backed by a folder of markdown files.

This module provides:
- Vault: enumeration, reads, stats and writes of vault documents
- is_markdown: Extension check shared with the watcher
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from webhooksync.client.sync.ignore import IGNORE_FILE_NAME, IgnorePatterns
from webhooksync.client.sync.types import FileStat

logger = logging.getLogger(__name__)

MARKDOWN_EXTENSION = ".md"


def is_markdown(path: str) -> bool:
    """Check if a path names a markdown document."""
    return path.lower().endswith(MARKDOWN_EXTENSION)


class Vault:
    """Folder of markdown documents addressed by vault-relative paths.

    Paths use forward slashes and never escape the vault root.
    """

    def __init__(self, root: Path, ignore_patterns: list[str] | None = None) -> None:
        """Initialize the vault.

        Args:
            root: Vault directory (created if missing).
            ignore_patterns: Additional patterns to ignore.
        """
        self._root = Path(root).expanduser().resolve()
        self._root.mkdir(parents=True, exist_ok=True)
        self._ignore = IgnorePatterns(ignore_patterns)
        self._ignore.load_from_file(self._root / IGNORE_FILE_NAME)

    @property
    def root(self) -> Path:
        return self._root

    @property
    def ignore(self) -> IgnorePatterns:
        return self._ignore

    def relative(self, path: Path) -> str | None:
        """Convert an absolute path to a vault-relative one.

        Returns:
            The relative path, or None if the path is outside the vault.
        """
        try:
            rel = Path(os.path.abspath(path)).relative_to(self._root)
        except ValueError:
            return None
        return str(rel).replace("\\", "/")

    def _resolve(self, rel_path: str) -> Path:
        full = (self._root / rel_path.lstrip("/")).resolve()
        if full != self._root and self._root not in full.parents:
            raise ValueError(f"Path escapes the vault: {rel_path}")
        return full

    def is_tracked(self, rel_path: str) -> bool:
        """Check if a path is a markdown document that is not ignored."""
        return is_markdown(rel_path) and not self._ignore.should_ignore(rel_path)

    def list_documents(self) -> list[str]:
        """List every tracked document in the vault.

        Returns:
            Sorted vault-relative paths.
        """
        documents: list[str] = []
        for root_str, dirs, files in os.walk(self._root):
            root = Path(root_str)
            rel_root = self.relative(root) or ""
            if rel_root == ".":
                rel_root = ""

            dirs[:] = [
                d for d in dirs
                if not (root / d).is_symlink()
                and not self._ignore.should_ignore(f"{rel_root}/{d}/".lstrip("/"))
            ]

            for filename in files:
                rel_path = f"{rel_root}/{filename}".lstrip("/")
                if (root / filename).is_symlink() or not self.is_tracked(rel_path):
                    continue
                documents.append(rel_path)

        documents.sort()
        logger.debug("Found %d documents in %s", len(documents), self._root)
        return documents

    def exists(self, rel_path: str) -> bool:
        try:
            return self._resolve(rel_path).is_file()
        except ValueError:
            return False

    def read(self, rel_path: str) -> str:
        """Read a document's content.

        Raises:
            OSError: If the document cannot be read.
            ValueError: If the path escapes the vault.
        """
        return self._resolve(rel_path).read_text(encoding="utf-8")

    def stat(self, rel_path: str) -> FileStat | None:
        """Get document metadata, or None if it is not resolvable."""
        try:
            st = self._resolve(rel_path).stat()
        except (OSError, ValueError):
            return None
        return FileStat(
            path=rel_path,
            ctime=st.st_ctime,
            mtime=st.st_mtime,
            size=st.st_size,
        )

    def write(self, rel_path: str, content: str) -> bool:
        """Create or overwrite a document, creating parent folders.

        Returns:
            True if the document was created, False if it was updated.
        """
        full = self._resolve(rel_path)
        created = not full.exists()
        if not full.parent.exists():
            logger.debug("Creating folder %s", full.parent)
            full.parent.mkdir(parents=True, exist_ok=True)
        full.write_text(content, encoding="utf-8")
        logger.debug("%s document %s", "Created" if created else "Updated", rel_path)
        return created
