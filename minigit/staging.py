"""
Staging Area

Holds copies of the files that will go into the next commit:

    .minigit/staging/<name>

Entries are keyed by base name only. There is no directory structure,
so two source files with the same base name collide: the most recently
staged copy replaces the earlier one (last write wins). The commit
writer copies every entry verbatim and then clears the area.
"""

import logging
import os
import shutil
from collections.abc import Callable
from pathlib import Path

from .errors import FileNotFound, InvalidInput

logger = logging.getLogger(__name__)

STAGING_DIR = "staging"

# Record files that live next to the snapshot inside commits/<id>/
RESERVED_NAMES = frozenset({"metadata", "parent"})


def _never_ignore(name: str) -> bool:
    return False


class StagingArea:
    """
    Flat, name-keyed staging area.

    ``ignore`` is any callable taking a base name and returning True
    when the file must be skipped.
    """

    def __init__(self, repo_dir: Path, ignore: Callable[[str], bool] | None = None):
        self.repo_dir = Path(repo_dir)
        self.path = self.repo_dir / STAGING_DIR
        self.ignore = ignore or _never_ignore

    def stage(self, path) -> list[str]:
        """
        Stage a file, or every file under a directory.

        Returns the names that were staged. Ignored files are skipped
        without error, so the list can be empty.

        Raises FileNotFound if the path does not exist and InvalidInput
        if it lies inside the repository directory.
        """
        src = self.check_path(path)

        if src.is_dir():
            if self.ignore(src.name):
                logger.debug("Ignoring directory %s", src)
                return []
            return self._stage_directory(src)

        if self.ignore(src.name):
            logger.debug("Ignoring %s", src)
            return []
        if src.name in RESERVED_NAMES:
            raise InvalidInput(f"Cannot stage {path}: '{src.name}' is a reserved name")
        self._copy_in(src)
        return [src.name]

    def check_path(self, path) -> Path:
        """
        Raise unless ``path`` can be staged.

        FileNotFound if it does not exist, InvalidInput if it lies inside
        the repository directory.
        """
        src = Path(path)
        if not src.exists():
            raise FileNotFound(path)
        if self._inside_repo(src):
            raise InvalidInput(f"Cannot stage {path}: it is inside {self.repo_dir}")
        return src

    def _inside_repo(self, path: Path) -> bool:
        return path.resolve().is_relative_to(self.repo_dir.resolve())

    def _stage_directory(self, root: Path) -> list[str]:
        # Insertion-ordered set: a name staged again moves to the end
        staged = {}
        for dirpath, dirnames, filenames in os.walk(root):
            # Prune ignored directories in place; sort for a stable walk order
            dirnames[:] = sorted(
                d for d in dirnames
                if not self.ignore(d) and not self._inside_repo(Path(dirpath) / d)
            )
            for filename in sorted(filenames):
                item = Path(dirpath) / filename
                if item.is_symlink() or not item.is_file():
                    continue
                if self.ignore(filename):
                    logger.debug("Ignoring %s", item)
                    continue
                if filename in RESERVED_NAMES:
                    logger.warning("Skipping %s: '%s' is a reserved name", item, filename)
                    continue
                self._copy_in(item)
                staged.pop(filename, None)
                staged[filename] = None
        return list(staged)

    def _copy_in(self, src: Path):
        dest = self.path / src.name
        if dest.exists():
            logger.debug("Replacing staged entry '%s' with %s", src.name, src)
        shutil.copyfile(src, dest)
        logger.debug("Staged %s as '%s'", src, src.name)

    def read(self, name: str) -> bytes:
        entry = self.path / name
        if not entry.is_file():
            raise FileNotFound(entry)
        return entry.read_bytes()

    def entries(self) -> list[Path]:
        """Paths of all staged entries, sorted by name."""
        return [self.path / name for name in self.list()]

    def clear(self):
        """Remove every staged entry. Only the commit writer calls this."""
        for entry in self.entries():
            entry.unlink()
        logger.debug("Cleared staging area")

    # Defined last: the method name shadows the builtin inside the class body
    def list(self) -> list[str]:
        """Staged names, sorted."""
        if not self.path.is_dir():
            return []
        return sorted(p.name for p in self.path.iterdir() if p.is_file())
