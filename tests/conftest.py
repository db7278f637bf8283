"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from gitcas.core import ObjectCodec, TreeBuilder
from gitcas.storage import ObjectStore


@pytest.fixture
def git_dir(tmp_path: Path) -> Path:
    """Create a temporary .git directory with an objects/ subdirectory."""
    git = tmp_path / ".git"
    git.mkdir()
    (git / "objects").mkdir()
    return git


@pytest.fixture
def store(git_dir: Path) -> ObjectStore:
    """Create an ObjectStore instance."""
    return ObjectStore(git_dir)


@pytest.fixture
def codec(store: ObjectStore) -> ObjectCodec:
    """Create an ObjectCodec over the temporary store."""
    return ObjectCodec(store)


@pytest.fixture
def builder(codec: ObjectCodec) -> TreeBuilder:
    """Create a TreeBuilder over the temporary store."""
    return TreeBuilder(codec)


@pytest.fixture
def workspace(tmp_path: Path, git_dir: Path) -> Path:
    """Create a small work tree next to the .git directory.

    Creates:
        README.md ("# demo\\n")
        src/
            main.py ("print('hi')\\n")
            util/
                helpers.py ("")
    """
    (tmp_path / "README.md").write_bytes(b"# demo\n")
    (tmp_path / "src" / "util").mkdir(parents=True)
    (tmp_path / "src" / "main.py").write_bytes(b"print('hi')\n")
    (tmp_path / "src" / "util" / "helpers.py").write_bytes(b"")
    return tmp_path
