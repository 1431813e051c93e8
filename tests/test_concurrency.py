"""
Thread-safety of a shared Repository handle.

Commits and branch switches from many threads must serialize: every
commit lands, ids stay unique, and the parent chain stays linear.
"""

from concurrent.futures import ThreadPoolExecutor

from minigit.repo import Repository


class TestSharedHandle:
    def test_concurrent_commits_form_a_chain(self, repo):
        n = 25

        def do_commit(i):
            return repo.commit(f"commit {i}", author=f"agent-{i}").id

        with ThreadPoolExecutor(max_workers=8) as executor:
            ids = list(executor.map(do_commit, range(n)))

        assert len(set(ids)) == n
        history = list(repo.log())
        assert len(history) == n
        assert {c.id for c in history} == set(ids)
        # Every commit's parent is the next one down the chain
        for newer, older in zip(history, history[1:]):
            assert newer.parent == older.id
        assert history[-1].parent is None

    def test_concurrent_branch_creation(self, repo):
        names = [f"b{i}" for i in range(20)]
        with ThreadPoolExecutor(max_workers=8) as executor:
            list(executor.map(repo.create_branch, names))
        assert repo.list_branches() == sorted(names + ["main"])

    def test_independent_handles(self, tmp_path):
        a = Repository.init(tmp_path / "a")
        b = Repository.init(tmp_path / "b", initial_branch="trunk")
        a.commit("in a", author="x")
        assert b.head() is None
        assert b.current_branch() == "trunk"
        assert [c.message for c in a.log()] == ["in a"]
