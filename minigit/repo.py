"""
Repository

The handle that the CLI (and any other caller) works through. It ties
together the reference manager, staging area, object store and history
walk for one repository root:

    repo = Repository.init("/path/to/project")

    repo.stage("notes.txt")
    repo.commit("first notes", author="alice")

    for commit in repo.log():
        print(commit.id, commit.message)

    repo.create_branch("feature")
    repo.switch_branch("feature")

All state lives in a .minigit directory at the root. Several handles for
different roots can coexist in one process. A single handle may be
shared between threads: stage, commit and the branch operations are
serialized on a per-handle lock.
"""

import json
import logging
import threading
import time
from collections.abc import Iterator
from pathlib import Path

from .errors import AlreadyInitialized, ConfigError, NotARepository
from .history import iter_history
from .ignore import DEFAULT_IGNORE_FILE, IgnoreRules
from .refs import RefManager, validate_branch_name
from .staging import StagingArea
from .store import Commit, ObjectStore

logger = logging.getLogger(__name__)

REPO_DIR_NAME = ".minigit"
DEFAULT_BRANCH = "main"

# Current config version; bump when the config schema changes
CONFIG_VERSION = "0.1.0"

# Known config keys for validation
KNOWN_CONFIG_KEYS = frozenset(
    {
        "version",
        "default_branch",
        "created_at",
        "ignore_file",
        "ignore_syntax",
    }
)


class Repository:
    """
    A minigit repository.

    Stores all data in a .minigit directory at the repository root.
    """

    def __init__(self, root: Path):
        self.root = Path(root).resolve()
        self.repo_dir = self.root / REPO_DIR_NAME

        if not self.repo_dir.is_dir():
            raise NotARepository(self.root)

        self.config = self._read_config()
        self._validate_config(self.config)

        self.refs = RefManager(self.repo_dir)
        self.staging = StagingArea(self.repo_dir)
        self.store = ObjectStore(self.repo_dir)
        self._lock = threading.RLock()

    @classmethod
    def init(cls, path: Path, initial_branch: str | None = None) -> "Repository":
        """
        Initialize a new repository.

        Creates .minigit with empty staging, commits and branches
        directories, points HEAD at the initial branch and creates that
        branch with no commits.

        Raises AlreadyInitialized if .minigit already exists. There is
        no rollback: a failure part way leaves whatever was created.
        """
        root = Path(path).resolve()
        repo_dir = root / REPO_DIR_NAME
        branch = validate_branch_name(initial_branch or DEFAULT_BRANCH)

        if repo_dir.exists():
            raise AlreadyInitialized(repo_dir)

        repo_dir.mkdir(parents=True)
        for sub in ("staging", "commits", "branches"):
            (repo_dir / sub).mkdir()
        (repo_dir / "config.json").write_text(
            json.dumps(
                {
                    "version": CONFIG_VERSION,
                    "default_branch": branch,
                    "created_at": time.time(),
                    "ignore_file": DEFAULT_IGNORE_FILE,
                    "ignore_syntax": "glob",
                },
                indent=2,
            ),
            encoding="utf-8",
        )

        repo = cls(root)
        # HEAD names the branch before the branch exists; this is the only
        # moment the HEAD invariant does not hold.
        repo.refs.set_head(branch)
        repo.refs.create_branch(branch)

        logger.info("Initialized empty repository in %s", repo_dir)
        return repo

    @classmethod
    def find(cls, start_path: Path | None = None) -> "Repository":
        """Find a repository by walking up from the given path."""
        path = Path(start_path or Path.cwd()).resolve()
        # Check the path itself and then walk up parents
        while True:
            if (path / REPO_DIR_NAME).is_dir():
                return cls(path)
            parent = path.parent
            if parent == path:
                break
            path = parent
        raise NotARepository(start_path or Path.cwd())

    # ── Staging ───────────────────────────────────────────────────

    def stage(self, *paths) -> list[str]:
        """
        Stage one or more files or directories.

        Every path is checked before anything is copied, so a missing
        path (or one inside .minigit) raises without staging the others.
        Returns the names that were staged, each once, in the order they
        were last written; ignored files are left out.
        """
        for p in paths:
            self.staging.check_path(p)

        staged = {}
        with self._lock:
            # Pick up edits to the pattern file made since the last call
            self.staging.ignore = self.ignore_rules()
            for p in paths:
                for name in self.staging.stage(p):
                    staged.pop(name, None)
                    staged[name] = None
        return list(staged)

    def staged(self) -> list[str]:
        return self.staging.list()

    def ignore_rules(self) -> IgnoreRules:
        """Ignore rules as currently written in the pattern file."""
        return IgnoreRules.from_file(
            self.root / self.config.get("ignore_file", DEFAULT_IGNORE_FILE),
            syntax=self.config.get("ignore_syntax", "glob"),
        )

    # ── Commits and history ───────────────────────────────────────

    def commit(self, message: str, author: str) -> Commit:
        """Commit the staging area onto the current branch."""
        with self._lock:
            return self.store.commit(self.refs, self.staging, message, author)

    def get_commit(self, commit_id: str) -> Commit:
        return self.store.get(commit_id)

    def log(self, limit: int | None = None) -> Iterator[Commit]:
        """
        Commits on the current branch, newest first.

        Lazy: each commit is read as the iterator advances. A branch
        with no commits yields nothing.
        """
        with self._lock:
            branch = self.refs.current_branch()
            head = self.refs.resolve(branch)
        return iter_history(self.store, head, limit=limit)

    # ── Branches ──────────────────────────────────────────────────

    def current_branch(self) -> str:
        return self.refs.current_branch()

    def head(self) -> str | None:
        """Commit id of the current branch, or None before its first commit."""
        with self._lock:
            return self.refs.resolve(self.refs.current_branch())

    def create_branch(self, name: str):
        with self._lock:
            self.refs.create_branch(name)

    def list_branches(self) -> list[str]:
        return self.refs.list_branches()

    def switch_branch(self, name: str):
        with self._lock:
            self.refs.switch_branch(name)

    @property
    def default_branch(self) -> str:
        """Branch the repository was initialized with."""
        return self.config.get("default_branch", DEFAULT_BRANCH)

    @property
    def created_at(self) -> float | None:
        return self.config.get("created_at")

    def status(self) -> dict:
        """Current branch, its head commit and the staged names."""
        with self._lock:
            branch = self.refs.current_branch()
            return {
                "root": str(self.root),
                "branch": branch,
                "head": self.refs.resolve(branch),
                "staged": self.staging.list(),
                "default_branch": self.default_branch,
                "created_at": self.created_at,
            }

    # ── Helpers ───────────────────────────────────────────────────

    def _read_config(self) -> dict:
        """Read repository configuration."""
        config_path = self.repo_dir / "config.json"
        if not config_path.exists():
            return {}
        try:
            return json.loads(config_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ConfigError(f"Unreadable config {config_path}: {e}") from e

    @staticmethod
    def _validate_config(config: dict) -> None:
        """Validate config version and warn on unknown keys."""
        repo_version = config.get("version")
        if repo_version:
            # Refuse to open repos from a future version
            if _version_tuple(repo_version) > _version_tuple(CONFIG_VERSION):
                raise ConfigError(
                    f"Repository config version {repo_version} is newer than "
                    f"this version of minigit ({CONFIG_VERSION}). "
                    f"Please upgrade minigit to open this repository."
                )
            if _version_tuple(repo_version) < _version_tuple(CONFIG_VERSION):
                logger.info(
                    "Repository config version %s is older than current %s",
                    repo_version,
                    CONFIG_VERSION,
                )

        # Warn on unknown keys (do not reject, forward compatibility)
        unknown_keys = set(config.keys()) - KNOWN_CONFIG_KEYS
        if unknown_keys:
            logger.warning("Unknown config keys (ignored): %s", ", ".join(sorted(unknown_keys)))


def _version_tuple(version: str) -> tuple[int, ...]:
    try:
        return tuple(int(part) for part in str(version).split("."))
    except ValueError as e:
        raise ConfigError(f"Invalid config version: {version!r}") from e
