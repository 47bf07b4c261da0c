"""Orchestration of the commit-analysis pipeline."""

from collections.abc import Sequence

from git_brag.git.domain.entities import EnrichedCommit
from git_brag.git.domain.value_objects import CommitQuery, RepositoryRef
from git_brag.git.services.diff_budget_service import DiffBudgetService
from git_brag.git.services.git_service import GitService
from git_brag.logging import get_logger
from git_brag.pipeline.domain.value_objects import (
    OutputPlan,
    PipelineOptions,
    PipelineResult,
    RepositoryCommits,
    RunErrors,
)
from git_brag.summarization.domain.value_objects import Classification
from git_brag.summarization.repositories.interfaces import LLMClientRepository
from git_brag.summarization.services.aggregation_service import AggregationService
from git_brag.summarization.services.batching_service import BatchingService
from git_brag.summarization.services.commit_classifier import (
    CommitClassifier,
    attach_classifications,
    fallback_classifications,
)

logger = get_logger(__name__)


class ContributionPipeline:
    """
    Runs diff collection, classification and aggregation for a set of repositories.

    Everything is sequential: repositories, diffs, batches and aggregation
    calls happen one at a time, in input order. Without an LLM client the
    run is fully offline and only the summary artifact is planned.
    """

    def __init__(
        self,
        git_service: GitService,
        options: PipelineOptions | None = None,
        llm_client: LLMClientRepository | None = None,
    ) -> None:
        """
        Initialize ContributionPipeline.

        Args:
            git_service: Service for listing commits and fetching diffs
            options: Budgets and output plan. Defaults to PipelineOptions()
            llm_client: Model client, or None for a run without any model call
        """
        self._git_service = git_service
        self._options = options or PipelineOptions()
        self._llm_client = llm_client
        self._diff_budget_service = DiffBudgetService(
            git_service,
            diff_size_config=self._options.diff_size,
            capture_full_diff=self._options.capture_full_diff,
        )

    @property
    def output_plan(self) -> OutputPlan:
        if self._llm_client is None:
            return OutputPlan.select(no_llm=True)
        return self._options.output_plan

    def collect_commits(
        self,
        repositories: Sequence[RepositoryRef],
        query: CommitQuery,
        errors: RunErrors,
    ) -> tuple[RepositoryCommits, ...]:
        """
        List matching commits per repository, dropping repositories without any.

        A repository whose log cannot be read is recorded in ``errors`` and skipped.
        """
        selected: list[RepositoryCommits] = []
        for repository in repositories:
            try:
                commits = self._git_service.list_commits(repository.path, query)
            except RuntimeError as e:
                logger.warning("Skipping %s: %s", repository.name, e)
                errors.record(repository.name, str(e))
                continue
            if commits:
                selected.append(RepositoryCommits(repository=repository, commits=commits))
        return tuple(selected)

    def run(
        self,
        repositories: Sequence[RepositoryCommits],
        errors: RunErrors | None = None,
    ) -> PipelineResult:
        """
        Analyze the commits of the given repositories.

        Args:
            repositories: Repositories with their commits, in output order
            errors: Run error log to extend; a new one is created otherwise

        Returns:
            Classified commits, summaries and the planned artifacts
        """
        errors = errors if errors is not None else RunErrors()
        plan = self.output_plan

        commits_by_repo: dict[str, list[EnrichedCommit]] = {}
        for item in repositories:
            enriched = self._diff_budget_service.enrich_repository(item.repository, item.commits)
            for commit in enriched:
                if commit.diff_error:
                    errors.record(
                        item.repository.name, f"diff {commit.commit.short_hash}: {commit.diff_error}"
                    )
            commits_by_repo.setdefault(item.repository.name, []).extend(enriched)

        all_commits = [commit for commits in commits_by_repo.values() for commit in commits]
        analysis = self._classify(all_commits, errors)

        aggregation = AggregationService(self._llm_client, errors)
        repo_summaries = [
            aggregation.summarize_repository(name, commits)
            for name, commits in commits_by_repo.items()
        ]
        overall_summary = aggregation.summarize_overall(repo_summaries)

        result = PipelineResult(
            repositories=tuple(repositories),
            commits_by_repo=commits_by_repo,
            analysis=analysis,
            repo_summaries=repo_summaries,
            overall_summary=overall_summary,
            output_plan=plan,
            errors=errors,
        )
        if plan.cv:
            result.cv = aggregation.generate_cv(repo_summaries, overall_summary)
        if plan.perf:
            result.performance_report = aggregation.generate_performance_report(
                repo_summaries, overall_summary
            )
        return result

    def _classify(
        self, commits: Sequence[EnrichedCommit], errors: RunErrors
    ) -> dict[str, Classification]:
        if self._llm_client is None:
            analysis = fallback_classifications(commits)
            attach_classifications(commits, analysis)
            return analysis

        logger.info(
            "Using provider: %s (batched analysis, %d commits)...",
            self._llm_client.description,
            len(commits),
        )
        classifier = CommitClassifier(
            self._llm_client, BatchingService(self._options.max_chars_per_batch)
        )
        return classifier.classify_all(commits, errors)
