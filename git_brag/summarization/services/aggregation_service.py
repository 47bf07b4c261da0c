"""Repository, cross-repository, CV and performance summarization."""

from collections.abc import Sequence
from typing import TYPE_CHECKING

from git_brag.git.domain.entities import EnrichedCommit
from git_brag.logging import get_logger
from git_brag.summarization.domain.value_objects import (
    CvDocuments,
    OverallSummary,
    RepoSummary,
    ResponseFormat,
)
from git_brag.summarization.repositories.interfaces import LLMClientRepository
from git_brag.summarization.services import offline_summaries
from git_brag.summarization.services.prompts import (
    build_cv_prompt,
    build_overall_summary_prompt,
    build_performance_prompt,
    build_repo_summary_prompt,
)
from git_brag.summarization.services.response_parsing import parse_json_object

if TYPE_CHECKING:
    from git_brag.pipeline.domain.value_objects import RunErrors

logger = get_logger(__name__)

OVERALL_ERROR_KEY = "overall"
CV_ERROR_KEY = "cv"
PERFORMANCE_ERROR_KEY = "performance"


class AggregationService:
    """
    Produces the summary artifacts of a run from classified commits.

    Each stage makes one model call and substitutes the deterministic offline
    equivalent on any failure, including unparseable or empty output. Without
    an LLM client every stage is offline.
    """

    def __init__(
        self,
        llm_client: LLMClientRepository | None = None,
        errors: "RunErrors | None" = None,
    ) -> None:
        """
        Initialize AggregationService.

        Args:
            llm_client: Client for model calls, or None for offline-only runs
            errors: Optional run error log receiving stage failures
        """
        self._llm_client = llm_client
        self._errors = errors

    @property
    def uses_llm(self) -> bool:
        return self._llm_client is not None

    def summarize_repository(
        self, repo_name: str, commits: Sequence[EnrichedCommit]
    ) -> RepoSummary:
        """
        Summarize one repository.

        Args:
            repo_name: Repository name
            commits: Classified commits of the repository

        Returns:
            Model summary, or the offline summary on failure
        """
        if self._llm_client is None:
            return offline_summaries.build_basic_repo_summary(repo_name, commits)
        try:
            raw_text = self._llm_client.complete(build_repo_summary_prompt(repo_name, commits))
            summary = RepoSummary.from_payload(parse_json_object(raw_text), repo_name)
            if summary.is_empty():
                raise ValueError("Repository summary was empty")
            return summary
        except Exception as e:
            self._record_failure(repo_name, f"summary: {e}")
            return offline_summaries.build_basic_repo_summary(repo_name, commits)

    def summarize_overall(self, repo_summaries: Sequence[RepoSummary]) -> OverallSummary:
        """
        Merge repository summaries into the cross-repository summary.

        Args:
            repo_summaries: Summaries in repository order

        Returns:
            Model summary, or the offline merge on failure
        """
        if self._llm_client is None:
            return offline_summaries.build_basic_overall_summary(repo_summaries)
        try:
            raw_text = self._llm_client.complete(build_overall_summary_prompt(repo_summaries))
            summary = OverallSummary.from_payload(parse_json_object(raw_text))
            if summary.is_empty():
                raise ValueError("Overall summary was empty")
            return summary
        except Exception as e:
            self._record_failure(OVERALL_ERROR_KEY, f"summary: {e}")
            return offline_summaries.build_basic_overall_summary(repo_summaries)

    def generate_cv(
        self, repo_summaries: Sequence[RepoSummary], overall_summary: OverallSummary
    ) -> CvDocuments:
        """Generate the CV paragraphs and bullet list."""
        if self._llm_client is None:
            return offline_summaries.build_fallback_cv(repo_summaries, overall_summary)
        try:
            raw_text = self._llm_client.complete(build_cv_prompt(repo_summaries, overall_summary))
            payload = parse_json_object(raw_text)
            cv_md = payload.get("cv_md")
            cv_bullets_md = payload.get("cv_bullets_md")
            if not isinstance(cv_md, str) or not isinstance(cv_bullets_md, str):
                raise ValueError("CV output was empty")
            if not cv_md.strip() or not cv_bullets_md.strip():
                raise ValueError("CV output was empty")
            return CvDocuments(cv_md=cv_md, cv_bullets_md=cv_bullets_md)
        except Exception as e:
            self._record_failure(CV_ERROR_KEY, str(e))
            return offline_summaries.build_fallback_cv(repo_summaries, overall_summary)

    def generate_performance_report(
        self, repo_summaries: Sequence[RepoSummary], overall_summary: OverallSummary
    ) -> str:
        """Generate the Markdown performance report."""
        if self._llm_client is None:
            return offline_summaries.build_fallback_performance_report(
                repo_summaries, overall_summary
            )
        try:
            report = self._llm_client.complete(
                build_performance_prompt(repo_summaries, overall_summary),
                ResponseFormat.TEXT,
            ).strip()
            if not report:
                raise ValueError("Performance output was empty")
            return report
        except Exception as e:
            self._record_failure(PERFORMANCE_ERROR_KEY, str(e))
            return offline_summaries.build_fallback_performance_report(
                repo_summaries, overall_summary
            )

    def _record_failure(self, key: str, message: str) -> None:
        logger.warning("Falling back to offline %s output: %s", key, message)
        if self._errors is not None:
            self._errors.record(key, message)
