"""Concrete implementation of Git repository operations."""

import re
import subprocess
from datetime import datetime
from pathlib import Path

from git_brag.git.domain.entities import Commit
from git_brag.git.domain.value_objects import CommitDiff, CommitQuery
from git_brag.git.repositories.interfaces import GitRepository

_LOG_FORMAT = "--pretty=format:%H|%ad|%an|%ae|%s"


class GitRepositoryImpl(GitRepository):
    """Concrete implementation of Git repository operations using git commands."""

    def list_commits(self, repo_path: Path, query: CommitQuery) -> tuple[Commit, ...]:
        """
        List commits of a repository matching the query filters.

        Args:
            repo_path: Path to the git repository
            query: Author, date, merge and count filters

        Returns:
            Tuple of commits in log order (most recent first)

        Raises:
            RuntimeError: If git log fails
        """
        result = self._run_git(self._build_log_args(query), repo_path, "list commits")

        commits: list[Commit] = []
        for line in result.splitlines():
            if not line.strip():
                continue
            parts = line.split("|", 4)
            if len(parts) != 5:
                continue
            commit_hash, date_str, author_name, author_email, message = parts
            commits.append(
                Commit(
                    hash=commit_hash,
                    message=message,
                    date=self._parse_date(date_str),
                    author_name=author_name,
                    author_email=author_email,
                )
            )

        return tuple(commits)

    def get_commit_diff(self, repo_path: Path, commit_hash: str) -> CommitDiff:
        """
        Get the diff content for a specific commit.

        Args:
            repo_path: Path to the git repository
            commit_hash: Hash of the commit

        Returns:
            CommitDiff containing the unified diff of the commit

        Raises:
            RuntimeError: If git show fails
        """
        diff_content = self._run_git(
            ["show", "--format=", "--unified=3", commit_hash],
            repo_path,
            f"get diff for {commit_hash[:7]}",
        )
        return CommitDiff(commit_hash=commit_hash, diff_content=diff_content)

    @staticmethod
    def _parse_date(date_str: str) -> datetime:
        value = date_str.strip()
        # git prints "Z" for UTC in iso-strict mode
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        return datetime.fromisoformat(value)

    @staticmethod
    def _build_log_args(query: CommitQuery) -> list[str]:
        """Translate a CommitQuery into git log arguments."""
        args = ["log"]
        if query.emails:
            author_regex = "(" + "|".join(re.escape(email) for email in query.emails) + ")"
            args.extend(
                [f"--author={author_regex}", "--extended-regexp", "--regexp-ignore-case"]
            )
        args.extend([_LOG_FORMAT, "--date=iso-strict"])
        if not query.include_merges:
            args.append("--no-merges")
        if query.since:
            args.append(f"--since={query.since}")
        if query.until:
            args.append(f"--until={query.until}")
        if query.max_commits:
            args.append(f"--max-count={query.max_commits}")
        return args

    @staticmethod
    def _run_git(args: list[str], repo_path: Path, action: str) -> str:
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=repo_path,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=True,
            )
        except subprocess.CalledProcessError as e:
            raise RuntimeError(
                f"Failed to {action} in {repo_path}: {e.stderr.strip() if e.stderr else str(e)}"
            ) from e
        except FileNotFoundError as e:
            raise RuntimeError("Unable to locate the 'git' executable") from e
        return result.stdout
