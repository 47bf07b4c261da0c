"""Tests for the end-to-end contribution pipeline with in-memory git and LLM."""

from __future__ import annotations

import json
from pathlib import Path

from git_brag.git.domain.value_objects import CommitQuery, CommitType, DiffSizeConfig, RepositoryRef
from git_brag.git.services.git_service import GitService
from git_brag.pipeline.domain.value_objects import OutputPlan, PipelineOptions, RunErrors
from git_brag.pipeline.services.contribution_pipeline import ContributionPipeline
from tests._fixtures.fakes import FakeGitRepository, FakeLLMClient, make_commit, raising

API = RepositoryRef(name="api", path=Path("/work/api"))
WEB = RepositoryRef(name="web", path=Path("/work/web"))
EMPTY = RepositoryRef(name="empty", path=Path("/work/empty"))


def _git() -> FakeGitRepository:
    return FakeGitRepository(
        commits={
            API.path: [make_commit("a1", "feat: search", day=3), make_commit("a2", "fix: crash", day=2)],
            WEB.path: [make_commit("w1", "refactor: styles", day=1)],
        },
        diffs={
            "a1": "diff --git a/src/search.py b/src/search.py\n+def search(): ...\n",
            "a2": "diff --git a/src/app.py b/src/app.py\n-crash\n+ok\n",
            "w1": "diff --git a/web/app.css b/web/app.css\n+a {}\n",
        },
    )


def _collect(pipeline: ContributionPipeline, errors: RunErrors):  # type: ignore[no-untyped-def]
    return pipeline.collect_commits([API, WEB, EMPTY], CommitQuery(emails=("dev@example.com",)), errors)


def test_offline_run_classifies_every_commit_from_hints() -> None:
    errors = RunErrors()
    pipeline = ContributionPipeline(GitService(_git()))
    selected = _collect(pipeline, errors)

    result = pipeline.run(selected, errors)

    assert [item.repository.name for item in selected] == ["api", "web"]
    assert result.total_commits == 3
    assert {h: c.type for h, c in result.analysis.items()} == {
        "a1": CommitType.FEATURE,
        "a2": CommitType.FIX,
        "w1": CommitType.TECH_IMPROVEMENT,
    }
    assert all(commit.analysis is not None for commit in result.enriched_commits)
    assert result.output_plan == OutputPlan(summary=True, brag=False, cv=False, perf=False)
    assert [summary.repo for summary in result.repo_summaries] == ["api", "web"]
    assert result.overall_summary.skills_surface.backend == ("Python",)
    assert result.cv is None and result.performance_report is None
    assert not errors


def test_unreadable_repository_is_recorded_and_skipped() -> None:
    git = _git()
    git.failing_repos.add(WEB.path)
    errors = RunErrors()

    selected = _collect(ContributionPipeline(GitService(git)), errors)

    assert [item.repository.name for item in selected] == ["api"]
    assert "not a git repository" in errors.get("web")[0]


def test_diff_errors_are_recorded_per_repository() -> None:
    git = _git()
    git.failing_diffs.add("a2")
    errors = RunErrors()
    pipeline = ContributionPipeline(GitService(git))

    result = pipeline.run(_collect(pipeline, errors), errors)

    assert result.total_commits == 3
    assert errors.get("api")[0].startswith("diff a2: ")


def test_llm_run_falls_back_everywhere_when_provider_is_down() -> None:
    client = FakeLLMClient([raising("Gemini error 503: unavailable")] * 10)
    errors = RunErrors()
    pipeline = ContributionPipeline(GitService(_git()), PipelineOptions(), client)

    result = pipeline.run(_collect(pipeline, errors), errors)

    assert result.output_plan == OutputPlan(summary=True, brag=True, cv=True, perf=True)
    assert result.analysis["a1"].summary == "feat: search"
    assert result.cv is not None and result.cv.cv_bullets_md.startswith("# CV Bullets")
    assert result.performance_report is not None
    assert set(errors.to_dict()) == {"classification", "api", "web", "overall", "cv", "performance"}


def test_llm_run_uses_model_classifications() -> None:
    classifications = json.dumps(
        [
            {"hash": "a1", "type": "feature", "summary": "Added search endpoint"},
            {"hash": "a2", "type": "fix", "summary": "Stopped startup crash"},
            {"hash": "w1", "type": "chore", "summary": "Tidied styles"},
        ]
    )
    client = FakeLLMClient([classifications])
    options = PipelineOptions(
        diff_size=DiffSizeConfig(max_diff_bytes=1_000),
        output_plan=OutputPlan.select(),
    )
    pipeline = ContributionPipeline(GitService(_git()), options, client)

    result = pipeline.run(_collect(pipeline, RunErrors()))

    assert result.analysis["w1"].type is CommitType.CHORE
    assert result.commits_by_repo["api"][0].analysis.summary == "Added search endpoint"
    assert "HASH: w1" in client.prompts[0]


def test_raw_dump_shape() -> None:
    errors = RunErrors()
    pipeline = ContributionPipeline(GitService(_git()))
    result = pipeline.run(_collect(pipeline, errors), errors)

    raw = result.to_raw_dict([API, WEB, EMPTY])

    assert [repo["name"] for repo in raw["reposScanned"]] == ["api", "web", "empty"]
    assert [repo["name"] for repo in raw["selectedRepos"]] == ["api", "web"]
    first = raw["enrichedCommitsByRepo"]["api"][0]
    assert first["hash"] == "a1"
    assert first["files"] == ["src/search.py"]
    assert first["diffTruncated"] is False
    assert first["analysis"] == {"type": "feature", "summary": "feat: search"}
    assert raw["analysisMap"]["w1"]["type"] == "tech-improvement"
    assert raw["errorsByRepo"] == {}
