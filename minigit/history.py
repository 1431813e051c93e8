"""
History traversal

Walks parent links from a branch head back to the root commit. The walk
is a generator: commits are read from disk one at a time as the caller
advances, newest first. Calling again starts over from the head.
"""

import logging
from collections.abc import Iterator

from .errors import CorruptCommit
from .store import Commit, ObjectStore

logger = logging.getLogger(__name__)


def iter_history(
    store: ObjectStore,
    start_id: str | None,
    limit: int | None = None,
) -> Iterator[Commit]:
    """
    Yield commits from ``start_id`` following parent links.

    Yields nothing when ``start_id`` is None (a branch with no commits).
    Raises CorruptCommit when a link names a missing commit, or when the
    links loop back on themselves.
    """
    commit_id = start_id
    visited = set()
    count = 0

    while commit_id:
        if limit is not None and count >= limit:
            return
        if commit_id in visited:
            raise CorruptCommit(commit_id, "parent links form a cycle")
        visited.add(commit_id)

        commit = store.get(commit_id)
        yield commit
        count += 1
        commit_id = commit.parent

    logger.debug("History walk from %s finished after %d commits", start_id, count)
