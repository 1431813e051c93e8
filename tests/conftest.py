"""Shared pytest fixtures."""

import pytest

from minigit.repo import Repository


@pytest.fixture
def project(tmp_path):
    """An empty project directory (no repository yet)."""
    p = tmp_path / "project"
    p.mkdir()
    return p


@pytest.fixture
def repo(project):
    """Freshly initialized repository."""
    return Repository.init(project)


@pytest.fixture
def write_file(project):
    """Write a file under the project directory and return its path."""

    def _write(name, content="content"):
        path = project / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content)
        return path

    return _write
