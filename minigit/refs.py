"""
Reference Manager

Branches and HEAD, stored as plain text files:

    .minigit/branches/<name>   commit id, or empty when the branch has no commits
    .minigit/HEAD              name of the current branch

Every write goes through write-to-temp + rename, so a reader never sees
a half-written ref. A branch file is only ever advanced after the commit
it names has been fully written (see store.ObjectStore.write).
"""

import logging
import os
import tempfile
from pathlib import Path

from .errors import InvalidInput, NoCurrentBranch, UnknownBranch

logger = logging.getLogger(__name__)

BRANCHES_DIR = "branches"
HEAD_FILE = "HEAD"


def _atomic_write(path: Path, content: str):
    """
    Write content to a file atomically via write-to-temp + rename.

    Prevents a truncated ref if the process dies mid-write.
    """
    fd, tmp_path = tempfile.mkstemp(
        dir=str(path.parent),
        prefix=f".{path.name}.",
        suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(content.encode("utf-8"))
            f.flush()
            os.fsync(f.fileno())
        Path(tmp_path).replace(path)
    except Exception:
        # Clean up temp file on any failure
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def validate_branch_name(name: str) -> str:
    """Reject names that cannot be stored as a single ref file."""
    if not name or name in (".", ".."):
        raise InvalidInput(f"Invalid branch name: {name!r}")
    if "/" in name or "\\" in name or os.sep in name:
        raise InvalidInput(f"Invalid branch name '{name}': path separators are not allowed")
    if name.startswith(".") or any(c.isspace() for c in name):
        raise InvalidInput(f"Invalid branch name '{name}': must not start with '.' or contain whitespace")
    return name


class RefManager:
    """Branch refs and the HEAD pointer of one repository."""

    def __init__(self, repo_dir: Path):
        self.repo_dir = Path(repo_dir)
        self.branches_dir = self.repo_dir / BRANCHES_DIR
        self.head_path = self.repo_dir / HEAD_FILE

    # ── HEAD ──────────────────────────────────────────────────────

    def head(self) -> str:
        """Name of the branch HEAD points to (may not exist, see current_branch)."""
        return self.head_path.read_bytes().decode("utf-8").strip()

    def set_head(self, name: str):
        _atomic_write(self.head_path, name)

    def current_branch(self) -> str:
        """
        Resolve HEAD to an existing branch name.

        Raises NoCurrentBranch if HEAD is missing or names a branch
        that does not exist.
        """
        name = self.head() if self.head_path.is_file() else ""
        if not name or not self.exists(name):
            raise NoCurrentBranch(name)
        return name

    # ── Branches ──────────────────────────────────────────────────

    def _branch_path(self, name: str) -> Path:
        return self.branches_dir / validate_branch_name(name)

    def exists(self, name: str) -> bool:
        try:
            return self._branch_path(name).is_file()
        except InvalidInput:
            return False

    def create_branch(self, name: str):
        """
        Create a branch with no commits.

        Re-creating an existing branch resets it to "no commits".
        """
        path = self._branch_path(name)
        if path.exists():
            logger.info("Resetting existing branch '%s'", name)
        _atomic_write(path, "")
        logger.info("Created branch '%s'", name)

    def list_branches(self) -> list[str]:
        if not self.branches_dir.is_dir():
            return []
        return sorted(
            p.name for p in self.branches_dir.iterdir()
            if p.is_file() and not p.name.startswith(".")
        )

    def switch_branch(self, name: str):
        """Point HEAD at an existing branch. Nothing else changes."""
        if not self.exists(name):
            raise UnknownBranch(name)
        self.set_head(name)
        logger.info("Switched to branch '%s'", name)

    def resolve(self, name: str) -> str | None:
        """Commit id a branch points at, or None when it has no commits."""
        path = self._branch_path(name)
        if not path.is_file():
            raise UnknownBranch(name)
        value = path.read_bytes().decode("utf-8").strip()
        return value or None

    def update_branch(self, name: str, commit_id: str):
        """Advance a branch to a commit that has already been written."""
        path = self._branch_path(name)
        if not path.is_file():
            raise UnknownBranch(name)
        _atomic_write(path, commit_id)
        logger.debug("Branch '%s' -> %s", name, commit_id)
