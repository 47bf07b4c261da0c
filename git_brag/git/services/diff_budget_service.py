"""Service for collecting commit diffs under byte budgets."""

from collections.abc import Sequence
from dataclasses import dataclass

from git_brag.git.domain.entities import Commit, EnrichedCommit
from git_brag.git.domain.value_objects import (
    TRUNCATION_MARKER,
    DiffSizeConfig,
    DiffSnippet,
    RepositoryRef,
    TruncateReason,
)
from git_brag.git.services.git_service import GitService
from git_brag.logging import get_logger

logger = get_logger(__name__)

_DIFF_HEADER = "diff --git "


@dataclass
class RepositoryDiffBudget:
    """Bytes still available for the diffs of one repository."""

    remaining_bytes: int
    per_commit_max_bytes: int

    @property
    def exhausted(self) -> bool:
        return self.remaining_bytes <= 0

    def limit_for_next_commit(self) -> tuple[int, TruncateReason]:
        """Return the effective byte limit and which budget imposes it."""
        if self.remaining_bytes < self.per_commit_max_bytes:
            return self.remaining_bytes, TruncateReason.PER_REPO
        return self.per_commit_max_bytes, TruncateReason.PER_COMMIT

    def consume(self, snippet: DiffSnippet) -> None:
        self.remaining_bytes = max(0, self.remaining_bytes - snippet.bytes_used)


class DiffBudgetService:
    """Turns commits into enriched commits carrying size-bounded diff snippets."""

    def __init__(
        self,
        git_service: GitService,
        diff_size_config: DiffSizeConfig | None = None,
        capture_full_diff: bool = False,
    ) -> None:
        """
        Initialize DiffBudgetService.

        Args:
            git_service: Service used to fetch full commit diffs
            diff_size_config: Per-repository and per-commit byte budgets
            capture_full_diff: Keep the untruncated diff on each enriched commit
        """
        self._git_service = git_service
        self._diff_size_config = diff_size_config or DiffSizeConfig()
        self._capture_full_diff = capture_full_diff

    def new_budget(self) -> RepositoryDiffBudget:
        return RepositoryDiffBudget(
            remaining_bytes=self._diff_size_config.max_diff_bytes,
            per_commit_max_bytes=self._diff_size_config.per_commit_max_bytes,
        )

    def enrich_repository(
        self, repository: RepositoryRef, commits: Sequence[Commit]
    ) -> list[EnrichedCommit]:
        """
        Collect bounded diffs for the commits of one repository, in order.

        Diff fetch failures are recorded on the commit (``diff_error``) and
        do not stop the walk.

        Args:
            repository: Repository the commits belong to
            commits: Commits in log order

        Returns:
            One enriched commit per input commit, in the same order
        """
        budget = self.new_budget()
        enriched: list[EnrichedCommit] = []
        for commit in commits:
            enriched.append(self._enrich_commit(repository, commit, budget))
        return enriched

    def _enrich_commit(
        self, repository: RepositoryRef, commit: Commit, budget: RepositoryDiffBudget
    ) -> EnrichedCommit:
        if budget.exhausted:
            logger.debug("Diff budget exhausted for %s, skipping %s", repository.name, commit.short_hash)
            return EnrichedCommit(
                commit=commit,
                repo_name=repository.name,
                repo_path=repository.path,
                diff=DiffSnippet.exhausted(),
            )

        logger.info(
            "Collecting diff %s@%s (%s)...",
            repository.name,
            commit.short_hash,
            commit.date.date().isoformat(),
        )
        diff_text = ""
        diff_error: str | None = None
        try:
            diff_text = self._git_service.get_commit_diff_content(
                repository.path, commit.hash
            ).diff_content
        except Exception as e:
            diff_error = str(e)
            logger.warning("Diff for %s@%s failed: %s", repository.name, commit.short_hash, e)

        snippet = DiffSnippet.empty()
        if diff_text:
            max_bytes, reason = budget.limit_for_next_commit()
            snippet = self.build_snippet(diff_text, max_bytes, reason)
            budget.consume(snippet)

        return EnrichedCommit(
            commit=commit,
            repo_name=repository.name,
            repo_path=repository.path,
            diff=snippet,
            files=self.extract_file_paths(diff_text),
            diff_error=diff_error,
            diff_full=diff_text if self._capture_full_diff and diff_text else None,
        )

    @staticmethod
    def build_snippet(diff_text: str, max_bytes: int, reason: TruncateReason) -> DiffSnippet:
        """
        Bound a diff to ``max_bytes`` UTF-8 bytes without splitting lines.

        Args:
            diff_text: Full diff text
            max_bytes: Largest number of diff bytes the snippet may carry
            reason: Budget reported when the diff has to be cut

        Returns:
            The whole diff when it fits, otherwise the leading complete lines
            followed by the truncation marker line
        """
        if not diff_text:
            return DiffSnippet.empty()

        total_bytes = len(diff_text.encode("utf-8"))
        if total_bytes <= max_bytes:
            return DiffSnippet(snippet=diff_text, bytes_used=total_bytes)

        kept: list[str] = []
        bytes_used = 0
        for line in diff_text.split("\n"):
            line_bytes = len((line + "\n").encode("utf-8"))
            if bytes_used + line_bytes > max_bytes:
                break
            kept.append(line)
            bytes_used += line_bytes
        kept.append(TRUNCATION_MARKER)

        return DiffSnippet(
            snippet="\n".join(kept),
            bytes_used=bytes_used,
            truncated=True,
            truncate_reason=reason,
        )

    @staticmethod
    def extract_file_paths(diff_text: str) -> tuple[str, ...]:
        """Return the paths named by ``diff --git`` headers, deduplicated in order."""
        files: dict[str, None] = {}
        for line in diff_text.split("\n"):
            if not line.startswith(_DIFF_HEADER):
                continue
            parts = line.split()
            if len(parts) < 4:
                continue
            a_path = parts[2].removeprefix("a/")
            b_path = parts[3].removeprefix("b/")
            for path in (a_path, b_path):
                if path:
                    files.setdefault(path, None)
        return tuple(files)
