"""Git service for coordinating Git operations."""

import os
from collections.abc import Sequence
from fnmatch import fnmatchcase
from pathlib import Path

from git_brag.git.domain.entities import Commit
from git_brag.git.domain.value_objects import CommitDiff, CommitQuery, RepositoryRef
from git_brag.git.repositories.interfaces import GitRepository
from git_brag.logging import get_logger

logger = get_logger(__name__)

_SKIPPED_DIRECTORIES = frozenset({"node_modules"})


class GitService:
    """Service for Git operations."""

    def __init__(self, git_repository: GitRepository) -> None:
        """
        Initialize GitService.

        Args:
            git_repository: Repository implementation for Git operations
        """
        self._git_repository = git_repository

    def scan_repositories(self, root_path: Path) -> tuple[RepositoryRef, ...]:
        """
        Find every git repository below a directory.

        A directory holding a ``.git`` folder is a repository. The walk never
        descends into ``.git`` itself or into ``node_modules``, but does
        continue below a repository to find nested ones.

        Args:
            root_path: Directory to scan

        Returns:
            Repositories in walk order, without duplicates
        """
        repositories: dict[Path, RepositoryRef] = {}
        for current, dirnames, _ in os.walk(root_path, onerror=self._log_walk_error):
            dirnames.sort()
            if ".git" in dirnames:
                repo_path = Path(current)
                repositories.setdefault(
                    repo_path, RepositoryRef(name=repo_path.name, path=repo_path)
                )
            dirnames[:] = [
                name for name in dirnames
                if name != ".git" and name not in _SKIPPED_DIRECTORIES
            ]
        return tuple(repositories.values())

    @staticmethod
    def filter_repositories(
        repositories: Sequence[RepositoryRef],
        include_globs: Sequence[str] = (),
        exclude_globs: Sequence[str] = (),
    ) -> tuple[RepositoryRef, ...]:
        """
        Keep repositories whose name matches an include glob and no exclude glob.

        Args:
            repositories: Candidate repositories
            include_globs: Glob patterns; empty means include everything
            exclude_globs: Glob patterns; empty means exclude nothing

        Returns:
            Filtered repositories in their original order
        """
        def matches(name: str, globs: Sequence[str]) -> bool:
            return any(fnmatchcase(name, pattern) for pattern in globs)

        return tuple(
            repo
            for repo in repositories
            if (not include_globs or matches(repo.name, include_globs))
            and not (exclude_globs and matches(repo.name, exclude_globs))
        )

    def list_commits(self, repo_path: Path, query: CommitQuery) -> tuple[Commit, ...]:
        """
        List commits of a repository matching the query filters.

        Args:
            repo_path: Path to the git repository
            query: Author, date, merge and count filters

        Returns:
            Tuple of commits in log order
        """
        return self._git_repository.list_commits(repo_path, query)

    def get_commit_diff_content(self, repo_path: Path, commit_hash: str) -> CommitDiff:
        """
        Get the diff content for a specific commit.

        Args:
            repo_path: Path to the git repository
            commit_hash: Hash of the commit

        Returns:
            CommitDiff containing the diff content
        """
        return self._git_repository.get_commit_diff(repo_path, commit_hash)

    @staticmethod
    def _log_walk_error(error: OSError) -> None:
        logger.debug("Skipping unreadable directory %s: %s", error.filename, error.strerror)
