"""Repository scaffolding and discovery."""

import logging
from pathlib import Path

from gitcas.constants import DEFAULT_HEAD_REF, GIT_DIR, HEAD_FILE, OBJECTS_DIR, REFS_DIR
from gitcas.errors import FilesystemError, RepositoryExistsError, RepositoryNotFoundError

logger = logging.getLogger(__name__)


def init_repository(root: Path, force: bool = False) -> Path:
    """Create .git/objects, .git/refs and .git/HEAD under root.

    Args:
        root: Workspace directory
        force: Re-create missing pieces of an existing repository instead of
               failing. Existing objects and HEAD are left untouched.

    Returns:
        Path to the .git directory

    Raises:
        RepositoryExistsError: If .git exists and force is False
        FilesystemError: If a directory or HEAD can't be created
    """
    git_dir = Path(root) / GIT_DIR
    if git_dir.exists() and not force:
        raise RepositoryExistsError(f"Repository already exists: {git_dir}")

    try:
        git_dir.mkdir(exist_ok=True)
        (git_dir / OBJECTS_DIR).mkdir(exist_ok=True)
        (git_dir / REFS_DIR).mkdir(exist_ok=True)
        head = git_dir / HEAD_FILE
        if not head.exists():
            head.write_text(DEFAULT_HEAD_REF, encoding="utf-8")
    except OSError as e:
        raise FilesystemError(f"Failed to initialize repository ({e.strerror})", e.filename) from e

    logger.debug("Initialized repository at %s", git_dir)
    return git_dir


def find_git_dir(start: Path) -> Path:
    """Find the nearest .git directory at or above start.

    Raises:
        RepositoryNotFoundError: If no ancestor contains a .git directory
    """
    start = Path(start).resolve()
    for candidate in (start, *start.parents):
        git_dir = candidate / GIT_DIR
        if git_dir.is_dir():
            return git_dir
    raise RepositoryNotFoundError(f"Not a git repository (or any parent up to /): {start}")
