"""Grouping of enriched commits into request-sized batches."""

from collections.abc import Iterable

from git_brag.git.domain.entities import EnrichedCommit

PROMPT_OVERHEAD_CHARS = 400


class BatchingService:
    """
    Greedy, order-preserving packing of commits under a character budget.

    A commit larger than the budget on its own gets a batch to itself; it is
    never split or dropped.
    """

    def __init__(self, max_chars_per_batch: int = 40_000) -> None:
        if max_chars_per_batch <= 0:
            raise ValueError("max_chars_per_batch must be positive")
        self._max_chars_per_batch = max_chars_per_batch

    @property
    def max_chars_per_batch(self) -> int:
        return self._max_chars_per_batch

    @staticmethod
    def approx_length(commit: EnrichedCommit) -> int:
        """Approximate prompt characters a commit contributes to a batch."""
        return len(commit.message) + len(commit.diff_snippet) + PROMPT_OVERHEAD_CHARS

    def chunk(self, commits: Iterable[EnrichedCommit]) -> list[list[EnrichedCommit]]:
        """
        Partition commits into batches, keeping input order.

        Args:
            commits: Enriched commits in pipeline order

        Returns:
            Consecutive non-empty batches covering every commit exactly once
        """
        batches: list[list[EnrichedCommit]] = []
        current: list[EnrichedCommit] = []
        current_length = 0

        for commit in commits:
            length = self.approx_length(commit)
            if current and current_length + length > self._max_chars_per_batch:
                batches.append(current)
                current = []
                current_length = 0
            current.append(commit)
            current_length += length

        if current:
            batches.append(current)
        return batches
