"""Value objects for the contribution pipeline."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from git_brag.git.domain.entities import Commit, EnrichedCommit
from git_brag.git.domain.value_objects import DiffSizeConfig, RepositoryRef
from git_brag.summarization.domain.value_objects import (
    Classification,
    CvDocuments,
    OverallSummary,
    RepoSummary,
)


class RunErrors:
    """Soft failures of a run, keyed by repository or stage name."""

    def __init__(self) -> None:
        self._errors: dict[str, list[str]] = {}

    def record(self, key: str, message: str) -> None:
        self._errors.setdefault(key, []).append(message)

    def get(self, key: str) -> list[str]:
        return list(self._errors.get(key, ()))

    def __bool__(self) -> bool:
        return bool(self._errors)

    def to_dict(self) -> dict[str, list[str]]:
        return {key: list(messages) for key, messages in self._errors.items()}


class GenerationMode(str, Enum):
    """Which optional artifacts to produce besides the summary and brag document."""

    CV = "cv"
    PERF = "perf"
    ALL = "all"


class Artifact(str, Enum):
    """Artifacts a run can emit."""

    BRAG = "brag"
    SUMMARY = "summary"
    CV = "cv"
    PERF = "perf"


@dataclass(frozen=True)
class OutputPlan:
    """Artifacts selected for a run."""

    summary: bool = True
    brag: bool = True
    cv: bool = False
    perf: bool = False

    @classmethod
    def select(
        cls,
        mode: GenerationMode = GenerationMode.ALL,
        only: Artifact | None = None,
        no_llm: bool = False,
    ) -> "OutputPlan":
        """
        Choose the artifacts of a run.

        ``no_llm`` wins over everything and keeps only the summary; ``only``
        selects exactly one artifact; otherwise summary and brag document
        are always produced and ``mode`` adds CV and/or performance report.
        """
        if no_llm:
            return cls(summary=True, brag=False, cv=False, perf=False)
        if only is not None:
            return cls(
                summary=only is Artifact.SUMMARY,
                brag=only is Artifact.BRAG,
                cv=only is Artifact.CV,
                perf=only is Artifact.PERF,
            )
        return cls(
            cv=mode in (GenerationMode.ALL, GenerationMode.CV),
            perf=mode in (GenerationMode.ALL, GenerationMode.PERF),
        )


@dataclass(frozen=True)
class PipelineOptions:
    """Tuning knobs of a pipeline run."""

    diff_size: DiffSizeConfig = field(default_factory=DiffSizeConfig)
    max_chars_per_batch: int = 40_000
    output_plan: OutputPlan = field(default_factory=OutputPlan.select)
    capture_full_diff: bool = False

    def __post_init__(self) -> None:
        """Validate the options."""
        if self.max_chars_per_batch <= 0:
            raise ValueError("max_chars_per_batch must be positive")


@dataclass(frozen=True)
class RepositoryCommits:
    """A repository and the commits selected from it, in log order."""

    repository: RepositoryRef
    commits: tuple[Commit, ...]


@dataclass
class PipelineResult:
    """Everything a run hands over to the document renderer."""

    repositories: tuple[RepositoryCommits, ...]
    commits_by_repo: dict[str, list[EnrichedCommit]]
    analysis: dict[str, Classification]
    repo_summaries: list[RepoSummary]
    overall_summary: OverallSummary
    output_plan: OutputPlan
    errors: RunErrors
    cv: CvDocuments | None = None
    performance_report: str | None = None

    @property
    def enriched_commits(self) -> list[EnrichedCommit]:
        return [commit for commits in self.commits_by_repo.values() for commit in commits]

    @property
    def total_commits(self) -> int:
        return sum(len(commits) for commits in self.commits_by_repo.values())

    def to_raw_dict(self, scanned: Sequence[RepositoryRef] = ()) -> dict[str, Any]:
        """Serialize the run for ``raw.json``."""
        return {
            "reposScanned": [{"name": repo.name, "path": str(repo.path)} for repo in scanned],
            "selectedRepos": [
                {"name": item.repository.name, "path": str(item.repository.path)}
                for item in self.repositories
            ],
            "enrichedCommitsByRepo": {
                name: [commit.to_dict() for commit in commits]
                for name, commits in self.commits_by_repo.items()
            },
            "analysisMap": {
                commit_hash: classification.to_dict()
                for commit_hash, classification in self.analysis.items()
            },
            "repoSummaries": [summary.to_dict() for summary in self.repo_summaries],
            "overallSummary": self.overall_summary.to_dict(),
            "errorsByRepo": self.errors.to_dict(),
        }
