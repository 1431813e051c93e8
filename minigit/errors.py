"""
Error taxonomy

Every failure the core can report. All of them are raised straight to
the caller; nothing is retried, since each cause is either bad user
input or a broken repository invariant.
"""


class MiniGitError(ValueError):
    """Base class for every error raised by the core."""


class AlreadyInitialized(MiniGitError):  # noqa: N818
    """Raised when init() finds an existing repository layout."""

    def __init__(self, root):
        super().__init__(f"Repository already initialized in {root}")
        self.root = root


class NotARepository(MiniGitError):  # noqa: N818
    """Raised when a command is run outside a minigit repository."""

    def __init__(self, start_path):
        super().__init__(
            f"Not inside a minigit repository (searched from {start_path})\n"
            f"  Run 'minigit init' to create one, or use '-C <path>' to specify a directory."
        )
        self.start_path = start_path


class FileNotFound(MiniGitError):  # noqa: N818
    """Raised when staging a path that does not exist."""

    def __init__(self, path):
        super().__init__(f"File not found: {path}")
        self.path = path


class UnknownBranch(MiniGitError):  # noqa: N818
    """Raised when switching to a branch that does not exist."""

    def __init__(self, name):
        super().__init__(f"Branch '{name}' does not exist")
        self.name = name


class NoCurrentBranch(MiniGitError):  # noqa: N818
    """Raised when HEAD names a branch that does not exist."""

    def __init__(self, name):
        super().__init__(f"HEAD points to branch '{name}', which does not exist")
        self.name = name


class CorruptCommit(MiniGitError):  # noqa: N818
    """Raised when a branch ref or parent link names an unreadable commit."""

    def __init__(self, commit_id, reason="commit not found"):
        super().__init__(f"Corrupt commit {commit_id}: {reason}")
        self.commit_id = commit_id
        self.reason = reason


class InvalidInput(MiniGitError):  # noqa: N818
    """Raised for branch names, authors or file names the layout cannot hold."""


class ConfigError(MiniGitError):
    """Raised when the repository config cannot be used."""
