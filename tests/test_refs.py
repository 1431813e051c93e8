"""RefManager unit tests."""

import pytest

from minigit.errors import InvalidInput, NoCurrentBranch, UnknownBranch
from minigit.refs import RefManager, validate_branch_name


@pytest.fixture
def refs(tmp_path):
    (tmp_path / "branches").mkdir()
    r = RefManager(tmp_path)
    r.set_head("main")
    r.create_branch("main")
    return r


class TestBranches:
    def test_create_branch_has_no_commits(self, refs):
        refs.create_branch("feature")
        assert refs.resolve("feature") is None

    def test_create_twice_lists_once(self, refs):
        refs.create_branch("x")
        refs.create_branch("x")
        assert refs.list_branches().count("x") == 1

    def test_recreate_resets_branch(self, refs):
        refs.update_branch("main", "abc123")
        refs.create_branch("main")
        assert refs.resolve("main") is None

    def test_list_is_sorted(self, refs):
        for name in ("zeta", "alpha", "mid"):
            refs.create_branch(name)
        assert refs.list_branches() == ["alpha", "main", "mid", "zeta"]

    def test_update_and_resolve(self, refs):
        refs.update_branch("main", "abc123")
        assert refs.resolve("main") == "abc123"

    def test_update_unknown_branch(self, refs):
        with pytest.raises(UnknownBranch):
            refs.update_branch("ghost", "abc123")

    def test_no_temp_files_left_behind(self, refs):
        refs.update_branch("main", "abc123")
        names = [p.name for p in refs.branches_dir.iterdir()]
        assert names == ["main"]


class TestHead:
    def test_switch_updates_head(self, refs):
        refs.create_branch("feature")
        refs.switch_branch("feature")
        assert refs.head() == "feature"
        assert refs.current_branch() == "feature"

    def test_switch_unknown_leaves_head(self, refs):
        with pytest.raises(UnknownBranch):
            refs.switch_branch("ghost")
        assert refs.head() == "main"

    def test_dangling_head(self, refs):
        refs.set_head("gone")
        with pytest.raises(NoCurrentBranch, match="gone"):
            refs.current_branch()

    def test_missing_head_file(self, refs):
        refs.head_path.unlink()
        with pytest.raises(NoCurrentBranch):
            refs.current_branch()


class TestBranchNames:
    @pytest.mark.parametrize("name", ["", ".", "..", "a/b", "a\\b", ".hidden", "has space"])
    def test_invalid_names_rejected(self, name):
        with pytest.raises(InvalidInput):
            validate_branch_name(name)

    @pytest.mark.parametrize("name", ["main", "feature-x", "release_1.2"])
    def test_valid_names(self, name):
        assert validate_branch_name(name) == name

    def test_invalid_name_does_not_exist(self, refs):
        assert refs.exists("../main") is False
