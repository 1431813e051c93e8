"""StagingArea unit tests."""

import pytest

from minigit.errors import FileNotFound, InvalidInput
from minigit.staging import StagingArea


@pytest.fixture
def area(tmp_path):
    repo_dir = tmp_path / ".minigit"
    (repo_dir / "staging").mkdir(parents=True)
    return StagingArea(repo_dir)


@pytest.fixture
def src(tmp_path):
    d = tmp_path / "src"
    d.mkdir()
    return d


class TestStage:
    def test_stage_copies_content(self, area, src):
        f = src / "a.txt"
        f.write_bytes(b"\x00binary\xff")
        assert area.stage(f) == ["a.txt"]
        assert area.read("a.txt") == b"\x00binary\xff"

    def test_copy_is_independent_of_source(self, area, src):
        f = src / "a.txt"
        f.write_text("before")
        area.stage(f)
        f.write_text("after")
        assert area.read("a.txt") == b"before"

    def test_same_base_name_overwrites(self, area, src):
        (src / "x").mkdir()
        (src / "y").mkdir()
        (src / "x" / "n.txt").write_text("from x")
        (src / "y" / "n.txt").write_text("from y")
        area.stage(src / "x" / "n.txt")
        area.stage(src / "y" / "n.txt")
        assert area.list() == ["n.txt"]
        assert area.read("n.txt") == b"from y"

    def test_missing_path(self, area, src):
        with pytest.raises(FileNotFound):
            area.stage(src / "missing.txt")

    def test_reserved_name_rejected(self, area, src):
        f = src / "metadata"
        f.write_text("x")
        with pytest.raises(InvalidInput, match="reserved"):
            area.stage(f)

    @pytest.mark.parametrize("inner", ["HEAD", "staging/a.txt"])
    def test_path_inside_repo_rejected(self, area, tmp_path, inner):
        target = tmp_path / ".minigit" / inner
        target.write_text("x")
        with pytest.raises(InvalidInput, match="inside"):
            area.stage(target)

    def test_ignore_predicate_skips(self, tmp_path, src):
        repo_dir = tmp_path / ".minigit"
        (repo_dir / "staging").mkdir(parents=True)
        area = StagingArea(repo_dir, ignore=lambda name: name.endswith(".log"))
        f = src / "run.log"
        f.write_text("noise")
        assert area.stage(f) == []
        assert area.list() == []


class TestStageDirectory:
    def test_directory_is_flattened(self, area, src):
        (src / "sub").mkdir()
        (src / "top.txt").write_text("t")
        (src / "sub" / "deep.txt").write_text("d")
        staged = area.stage(src)
        assert sorted(staged) == ["deep.txt", "top.txt"]
        assert area.list() == ["deep.txt", "top.txt"]

    def test_ignored_directory_pruned(self, tmp_path, src):
        repo_dir = tmp_path / ".minigit"
        (repo_dir / "staging").mkdir(parents=True)
        area = StagingArea(repo_dir, ignore=lambda name: name == "build")
        (src / "build").mkdir()
        (src / "build" / "out.bin").write_text("o")
        (src / "keep.txt").write_text("k")
        assert area.stage(src) == ["keep.txt"]

    def test_reserved_name_skipped_in_directory(self, area, src):
        (src / "parent").write_text("p")
        (src / "ok.txt").write_text("o")
        assert area.stage(src) == ["ok.txt"]


    def test_repeated_name_listed_once(self, area, src):
        (src / "a").mkdir()
        (src / "b").mkdir()
        (src / "a" / "n.txt").write_text("from a")
        (src / "b" / "n.txt").write_text("from b")
        (src / "z.txt").write_text("z")
        assert area.stage(src) == ["z.txt", "n.txt"]
        assert area.read("n.txt") == b"from b"

    def test_walk_never_enters_repo_dir(self, area, tmp_path):
        (tmp_path / ".minigit" / "HEAD").write_text("main")
        (tmp_path / "top.txt").write_text("t")
        assert area.stage(tmp_path) == ["top.txt"]


class TestClear:
    def test_clear_empties(self, area, src):
        for name in ("a", "b", "c"):
            (src / name).write_text(name)
            area.stage(src / name)
        assert area.list() == ["a", "b", "c"]
        area.clear()
        assert area.list() == []
