"""Batch classification of commits with guaranteed fallback."""

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from git_brag.git.domain.entities import EnrichedCommit
from git_brag.git.domain.value_objects import CommitType
from git_brag.logging import get_logger
from git_brag.summarization.domain.value_objects import NO_SUMMARY, Classification
from git_brag.summarization.repositories.interfaces import LLMClientRepository
from git_brag.summarization.services.batching_service import BatchingService
from git_brag.summarization.services.prompts import build_classification_prompt
from git_brag.summarization.services.response_parsing import parse_json_array

if TYPE_CHECKING:
    from git_brag.pipeline.domain.value_objects import RunErrors

logger = get_logger(__name__)

CLASSIFICATION_ERROR_KEY = "classification"


def fallback_classifications(commits: Iterable[EnrichedCommit]) -> dict[str, Classification]:
    """Classify every commit from its type hint and message alone."""
    return {commit.hash: Classification.fallback_for(commit) for commit in commits}


class CommitClassifier:
    """
    Classifies commits through an LLM, one batch per request.

    Whatever the model does, every commit ends up with exactly one
    classification: failed batches fall back per commit, and commits the
    model left out are filled in after the last batch.
    """

    def __init__(
        self,
        llm_client: LLMClientRepository,
        batching_service: BatchingService | None = None,
    ) -> None:
        """
        Initialize CommitClassifier.

        Args:
            llm_client: Client used for every batch request
            batching_service: Batch packer. Defaults to a 40,000 character budget
        """
        self._llm_client = llm_client
        self._batching_service = batching_service or BatchingService()

    def classify(self, batch: Sequence[EnrichedCommit]) -> dict[str, Classification]:
        """
        Classify one batch of commits.

        An unparseable response falls back for the whole batch. In a parsed
        array, entries without a hash are skipped, unknown types become
        ``other`` and blank summaries become a placeholder.

        Args:
            batch: Commits to classify in a single request

        Returns:
            Mapping of commit hash to classification

        Raises:
            RuntimeError: If the provider call fails
        """
        raw_text = self._llm_client.complete(build_classification_prompt(batch))

        try:
            items = parse_json_array(raw_text)
        except ValueError as e:
            logger.warning("Unparseable classification response, using fallback: %s", e)
            return fallback_classifications(batch)

        classifications: dict[str, Classification] = {}
        for item in items:
            if not isinstance(item, dict):
                continue
            commit_hash = str(item.get("hash") or "").strip()
            if not commit_hash:
                continue
            summary = item.get("summary")
            if not isinstance(summary, str) or not summary.strip():
                summary = NO_SUMMARY
            classifications[commit_hash] = Classification(
                type=CommitType.parse(item.get("type")),
                summary=summary.strip(),
            )
        return classifications

    def classify_all(
        self,
        commits: Sequence[EnrichedCommit],
        errors: "RunErrors | None" = None,
    ) -> dict[str, Classification]:
        """
        Classify every commit and attach the result as ``analysis``.

        Batches run sequentially; a failing batch never stops the next one.

        Args:
            commits: Commits of every repository, in pipeline order
            errors: Optional run error log receiving batch failures

        Returns:
            Mapping of commit hash to classification, covering every commit
        """
        batches = self._batching_service.chunk(commits)
        analysis: dict[str, Classification] = {}

        for idx, batch in enumerate(batches, start=1):
            logger.info("Analyzing batch %d/%d (%d commits)...", idx, len(batches), len(batch))
            try:
                analysis.update(self.classify(batch))
            except Exception as e:
                logger.warning("Batch %d/%d failed, using fallback: %s", idx, len(batches), e)
                if errors is not None:
                    errors.record(CLASSIFICATION_ERROR_KEY, f"batch {idx}: {e}")
                for commit in batch:
                    analysis.setdefault(commit.hash, Classification.fallback_for(commit))

        attach_classifications(commits, analysis)
        return analysis


def attach_classifications(
    commits: Iterable[EnrichedCommit], analysis: dict[str, Classification]
) -> None:
    """Fill missing entries with the fallback and set ``analysis`` on each commit."""
    for commit in commits:
        if commit.hash not in analysis:
            analysis[commit.hash] = Classification.fallback_for(commit)
        commit.analysis = analysis[commit.hash]
