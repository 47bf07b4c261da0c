"""Repository interfaces for Git operations."""

from abc import ABC, abstractmethod
from pathlib import Path

from git_brag.git.domain.entities import Commit
from git_brag.git.domain.value_objects import CommitDiff, CommitQuery


class GitRepository(ABC):
    """Interface for Git repository operations."""

    @abstractmethod
    def list_commits(self, repo_path: Path, query: CommitQuery) -> tuple[Commit, ...]:
        """
        List commits of a repository matching the query filters.

        Args:
            repo_path: Path to the git repository
            query: Author, date, merge and count filters

        Returns:
            Tuple of commits in log order (most recent first)
        """
        ...

    @abstractmethod
    def get_commit_diff(self, repo_path: Path, commit_hash: str) -> CommitDiff:
        """
        Get the diff content for a specific commit.

        Args:
            repo_path: Path to the git repository
            commit_hash: Hash of the commit

        Returns:
            CommitDiff containing the unified diff of the commit

        Raises:
            RuntimeError: If the diff cannot be retrieved
        """
        ...
