"""
Object Store / Commit Writer

Each commit is a directory holding a flat copy of everything that was
staged, plus two small text records:

    .minigit/commits/<id>/<name>...   staged files, byte for byte
    .minigit/commits/<id>/metadata    Author: / Message: / Timestamp: lines
    .minigit/commits/<id>/parent      previous head of the branch (optional)

Commit ids are SHA-1 digests over a nanosecond clock reading, a random
UUID, the parent id, author, message and staged content. They are not
content addresses: committing the same content twice yields two ids.
The commit directory is created exclusively, so an id is never reused.

The snapshot and its records are complete before the branch ref is
advanced. A crash in between leaves an orphaned commit directory that
nothing references.
"""

import hashlib
import logging
import os
import shutil
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from .errors import CorruptCommit, FileNotFound, InvalidInput
from .refs import RefManager
from .staging import StagingArea

logger = logging.getLogger(__name__)

COMMITS_DIR = "commits"
METADATA_FILE = "metadata"
PARENT_FILE = "parent"

# Attempts at finding an unused id before giving up
_MAX_ID_ATTEMPTS = 5


@dataclass(frozen=True)
class Commit:
    """An immutable commit, as read back from storage."""

    id: str
    author: str
    message: str
    timestamp: datetime
    parent: str | None
    files: tuple[str, ...]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "author": self.author,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
            "parent": self.parent,
            "files": list(self.files),
        }


def format_metadata(author: str, message: str, timestamp: datetime) -> str:
    return f"Author: {author}\nMessage: {message}\nTimestamp: {timestamp.isoformat()}\n"


def parse_metadata(text: str) -> tuple[str, str, datetime]:
    """
    Parse a metadata record back into (author, message, timestamp).

    Author is the first line and Timestamp the last, so a message may
    span several lines and still round-trip exactly.
    """
    if text.endswith("\n"):
        text = text[:-1]
    author_line, _, rest = text.partition("\n")
    message_block, _, timestamp_line = rest.rpartition("\n")

    if not author_line.startswith("Author: "):
        raise ValueError("missing Author field")
    if not message_block.startswith("Message: "):
        raise ValueError("missing Message field")
    if not timestamp_line.startswith("Timestamp: "):
        raise ValueError("missing Timestamp field")

    author = author_line[len("Author: "):]
    message = message_block[len("Message: "):]
    timestamp = datetime.fromisoformat(timestamp_line[len("Timestamp: "):])
    return author, message, timestamp


def _require_utf8(field: str, value: str):
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise InvalidInput(f"{field} is not valid UTF-8: {value!r}") from e


def validate_author(author: str) -> str:
    if not author or not author.strip():
        raise InvalidInput("Author must not be empty")
    if "\n" in author or "\r" in author:
        raise InvalidInput(f"Author must be a single line: {author!r}")
    _require_utf8("Author", author)
    return author


def validate_message(message: str) -> str:
    # Undecodable command-line bytes arrive as lone surrogates
    _require_utf8("Message", message)
    return message


class ObjectStore:
    """Commit directories under ``.minigit/commits``."""

    def __init__(self, repo_dir: Path):
        self.path = Path(repo_dir) / COMMITS_DIR

    # ── Writing ───────────────────────────────────────────────────

    def commit(
        self,
        refs: RefManager,
        staging: StagingArea,
        message: str,
        author: str,
    ) -> Commit:
        """
        Snapshot the staging area onto the current branch.

        Raises NoCurrentBranch before writing anything if HEAD does not
        name an existing branch. An empty staging area still produces a
        commit, with an empty file set.
        """
        validate_author(author)
        validate_message(message)
        branch = refs.current_branch()
        parent = refs.resolve(branch)

        entries = staging.entries()
        commit_id, commit_dir = self._allocate(parent, author, message, entries)

        for entry in entries:
            shutil.copyfile(entry, commit_dir / entry.name)

        timestamp = datetime.now(timezone.utc)
        (commit_dir / METADATA_FILE).write_bytes(
            format_metadata(author, message, timestamp).encode("utf-8")
        )
        if parent:
            (commit_dir / PARENT_FILE).write_bytes(parent.encode("utf-8"))

        # Snapshot is complete; only now make it reachable
        refs.update_branch(branch, commit_id)
        staging.clear()

        logger.info(
            "Committed %s on '%s' (%d files, parent=%s)",
            commit_id, branch, len(entries), parent or "none",
        )
        return Commit(
            id=commit_id,
            author=author,
            message=message,
            timestamp=timestamp,
            parent=parent,
            files=tuple(e.name for e in entries),
        )

    def _allocate(self, parent, author, message, entries) -> tuple[str, Path]:
        """Pick a fresh id and claim its directory."""
        for _ in range(_MAX_ID_ATTEMPTS):
            commit_id = self._new_id(parent, author, message, entries)
            commit_dir = self.path / commit_id
            try:
                commit_dir.mkdir(parents=False, exist_ok=False)
            except FileExistsError:
                logger.warning("Commit id %s already taken, generating another", commit_id)
                continue
            return commit_id, commit_dir
        raise RuntimeError(f"Could not allocate a unique commit id in {self.path}")

    @staticmethod
    def _new_id(parent, author, message, entries) -> str:
        h = hashlib.sha1()
        h.update(str(time.time_ns()).encode())
        h.update(uuid.uuid4().bytes)
        h.update((parent or "").encode("utf-8") + b"\x00")
        h.update(author.encode("utf-8") + b"\x00")
        h.update(message.encode("utf-8") + b"\x00")
        for entry in entries:
            h.update(os.fsencode(entry.name) + b"\x00")
            h.update(entry.read_bytes())
        return h.hexdigest()

    # ── Reading ───────────────────────────────────────────────────

    def _commit_dir(self, commit_id: str) -> Path:
        if not commit_id or "/" in commit_id or "\\" in commit_id or commit_id in (".", ".."):
            raise CorruptCommit(commit_id, "invalid commit id")
        return self.path / commit_id

    def exists(self, commit_id: str) -> bool:
        try:
            return (self._commit_dir(commit_id) / METADATA_FILE).is_file()
        except CorruptCommit:
            return False

    def get(self, commit_id: str) -> Commit:
        """
        Read a commit back from disk.

        Raises CorruptCommit if the directory or its metadata is missing
        or unreadable.
        """
        commit_dir = self._commit_dir(commit_id)
        metadata_path = commit_dir / METADATA_FILE
        if not metadata_path.is_file():
            raise CorruptCommit(commit_id)

        try:
            author, message, timestamp = parse_metadata(
                metadata_path.read_bytes().decode("utf-8")
            )
        except (UnicodeDecodeError, ValueError) as e:
            raise CorruptCommit(commit_id, f"unreadable metadata ({e})") from e

        parent_path = commit_dir / PARENT_FILE
        parent = None
        if parent_path.is_file():
            parent = parent_path.read_bytes().decode("utf-8").strip() or None

        files = tuple(sorted(
            p.name for p in commit_dir.iterdir()
            if p.is_file() and p.name not in (METADATA_FILE, PARENT_FILE)
        ))
        return Commit(
            id=commit_id,
            author=author,
            message=message,
            timestamp=timestamp,
            parent=parent,
            files=files,
        )

    def read_file(self, commit_id: str, name: str) -> bytes:
        """Content of one file as captured by a commit."""
        commit = self.get(commit_id)
        if name not in commit.files:
            raise FileNotFound(f"{name} (in commit {commit_id})")
        return (self.path / commit_id / name).read_bytes()
