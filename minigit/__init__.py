"""
minigit: a minimal local version-control core

Records flat snapshots of staged files as commits, keeps independently
advancing branches, and walks commit history from the current branch.
Single user, single machine, no remotes.
"""

__version__ = "0.1.0"

__all__ = [
    # Core
    "Repository",
    "Commit",
    # Components
    "ObjectStore",
    "RefManager",
    "StagingArea",
    "IgnoreRules",
    "iter_history",
    # Errors
    "MiniGitError",
    "AlreadyInitialized",
    "NotARepository",
    "FileNotFound",
    "UnknownBranch",
    "NoCurrentBranch",
    "CorruptCommit",
    "InvalidInput",
    "ConfigError",
]

_ERRORS = (
    "MiniGitError",
    "AlreadyInitialized",
    "NotARepository",
    "FileNotFound",
    "UnknownBranch",
    "NoCurrentBranch",
    "CorruptCommit",
    "InvalidInput",
    "ConfigError",
)


# Lazy imports, resolved on first access
def __getattr__(name):
    if name == "Repository":
        from .repo import Repository

        return Repository
    if name in ("Commit", "ObjectStore"):
        from .store import Commit, ObjectStore

        return Commit if name == "Commit" else ObjectStore
    if name == "RefManager":
        from .refs import RefManager

        return RefManager
    if name == "StagingArea":
        from .staging import StagingArea

        return StagingArea
    if name == "IgnoreRules":
        from .ignore import IgnoreRules

        return IgnoreRules
    if name == "iter_history":
        from .history import iter_history

        return iter_history
    if name in _ERRORS:
        from . import errors

        return getattr(errors, name)
    raise AttributeError(f"module 'minigit' has no attribute {name!r}")
