"""History traversal tests."""

import types

import pytest

from minigit.errors import CorruptCommit
from minigit.history import iter_history


class TestIterHistory:
    def test_none_start_yields_nothing(self, repo):
        assert list(iter_history(repo.store, None)) == []

    def test_is_lazy(self, repo):
        repo.commit("one", author="a")
        head = repo.commit("two", author="a").id
        # Break the chain below the head; nothing is read until iteration
        (repo.repo_dir / "commits" / head / "parent").write_text("missing")

        walk = iter_history(repo.store, head)
        assert isinstance(walk, types.GeneratorType)
        assert next(walk).id == head
        with pytest.raises(CorruptCommit):
            next(walk)

    def test_newest_first(self, repo):
        for i in range(5):
            repo.commit(f"c{i}", author="a")
        messages = [c.message for c in iter_history(repo.store, repo.head())]
        assert messages == ["c4", "c3", "c2", "c1", "c0"]

    def test_cycle_detected(self, repo):
        first = repo.commit("one", author="a")
        second = repo.commit("two", author="a")
        (repo.repo_dir / "commits" / first.id / "parent").write_text(second.id)

        with pytest.raises(CorruptCommit, match="cycle"):
            list(iter_history(repo.store, second.id))

    def test_limit_zero(self, repo):
        repo.commit("one", author="a")
        assert list(iter_history(repo.store, repo.head(), limit=0)) == []
