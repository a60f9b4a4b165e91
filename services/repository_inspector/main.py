"""
Repository Inspector.

Reads the most recent commit from a local Git working tree and turns it
into a ``CommitRecord``. All queries are read-only and go through
GitPython, which shells out to the ``git`` executable.
"""

import logging
from typing import Optional

from git import Repo
from git.exc import GitCommandError, GitError

from shared.models import CommitRecord
from shared.results import ErrorKind, Failure, Result, Success

logger = logging.getLogger(__name__)

DETACHED_HEAD = "HEAD"


class RepositoryInspector:
    """Extracts commit metadata from the repository containing ``repo_path``."""

    def __init__(self, repo_path: str = "."):
        self.repo_path = repo_path

    def _open_repo(self) -> Repo:
        return Repo(self.repo_path, search_parent_directories=True)

    def current_branch(self, repo: Repo) -> str:
        """
        Name of the checked-out branch, or ``""`` for a detached HEAD.

        ``git branch --show-current`` answers first. ``git rev-parse
        --abbrev-ref HEAD`` is only asked when that fails (git older than
        2.22) or prints nothing, and its ``HEAD`` answer means detached.
        """
        try:
            branch = repo.git.branch("--show-current").strip()
        except GitCommandError as e:
            logger.warning(f"git branch --show-current failed, trying rev-parse: {e}")
            branch = ""
        if branch:
            return branch

        fallback = repo.git.rev_parse("--abbrev-ref", "HEAD").strip()
        if fallback == DETACHED_HEAD:
            logger.info("HEAD is detached; reporting an empty branch")
            return ""
        return fallback

    def extract_commit(self) -> Result[CommitRecord]:
        """Read the last commit. Any git failure becomes an ``EXTRACTION`` failure."""
        try:
            repo = self._open_repo()
            message = repo.git.log("-1", "--pretty=format:%s").strip()
            full_hash = repo.git.log("-1", "--pretty=format:%H").strip()
            changed_files = repo.git.show("--name-status", "--pretty=format:", "HEAD").strip()
            touched_paths = repo.git.show("HEAD", "--pretty=format:", "--name-only").strip()
            branch = self.current_branch(repo)
        except GitError as e:
            logger.error(f"Could not get git commit info from {self.repo_path}: {e}")
            return Failure(
                kind=ErrorKind.EXTRACTION,
                operation="extract_commit",
                message=f"Could not read commit data from {self.repo_path}: {e}",
            )

        if not full_hash:
            logger.error(f"No commit hash found in {self.repo_path}")
            return Failure(
                kind=ErrorKind.EXTRACTION,
                operation="extract_commit",
                message=f"No commits found in {self.repo_path}",
            )

        commit = CommitRecord(
            message=message,
            full_hash=full_hash,
            changed_files=changed_files,
            touched_paths=touched_paths,
            branch=branch,
        )
        logger.info(
            f"Found commit {commit.short_hash} on '{commit.branch or 'detached HEAD'}': "
            f"{commit.message} ({commit.changed_file_count} files)"
        )
        logger.debug(f"Changed files:\n{commit.changed_files}")
        return Success(commit)


def read_origin_url(repo_path: str = ".") -> Optional[str]:
    """URL of the ``origin`` remote, or ``None`` when it cannot be read."""
    try:
        repo = Repo(repo_path, search_parent_directories=True)
        url = repo.git.config("--get", "remote.origin.url").strip()
    except GitError as e:
        logger.warning(f"Failed to get git remote: {e}")
        return None
    return url or None
