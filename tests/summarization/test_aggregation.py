"""Tests for repository, overall, CV and performance summaries."""

from __future__ import annotations

import json

from git_brag.git.domain.value_objects import CommitType
from git_brag.pipeline.domain.value_objects import RunErrors
from git_brag.summarization.domain.value_objects import (
    Classification,
    OverallSummary,
    RepoSummary,
    ResponseFormat,
)
from git_brag.summarization.services.aggregation_service import AggregationService
from tests._fixtures.fakes import FakeLLMClient, make_enriched, raising


def _classified_commits():  # type: ignore[no-untyped-def]
    first = make_enriched("h1", "feat: search", files=["src/search.ts", "src/api.go"])
    first.analysis = Classification(CommitType.FEATURE, "Added search")
    second = make_enriched("h2", "fix: crash", files=["Dockerfile"])
    second.analysis = Classification(CommitType.FIX, "Fixed crash on start")
    return [first, second]


def test_repo_summary_from_model() -> None:
    payload = {
        "repo": "api",
        "themes": ["search"],
        "highlights": ["Added search"],
        "risks_or_debt": [],
        "evidence": ["feat: search | src/search.ts"],
        "outline": ["Search"],
    }
    client = FakeLLMClient([f"Summary:\n{json.dumps(payload)}"])

    summary = AggregationService(client).summarize_repository("api", _classified_commits())

    assert summary.themes == ("search",)
    assert summary.evidence == ("feat: search | src/search.ts",)
    assert '"repo": "api"' in client.prompts[0]


def test_repo_summary_falls_back_on_failure_and_records_error() -> None:
    errors = RunErrors()
    service = AggregationService(FakeLLMClient([raising("OpenAI error 500: down")]), errors)

    summary = service.summarize_repository("api", _classified_commits())

    assert summary.themes == ("features", "fixes")
    assert summary.highlights == ("Added search", "Fixed crash on start")
    assert errors.get("api") == ["summary: OpenAI error 500: down"]


def test_empty_model_output_counts_as_failure() -> None:
    errors = RunErrors()
    service = AggregationService(FakeLLMClient(['{"themes": []}']), errors)

    summary = service.summarize_repository("api", _classified_commits())

    assert not summary.is_empty()
    assert errors.get("api")


def test_overall_summary_parses_projects_and_skills() -> None:
    payload = {
        "overall_themes": ["search"],
        "overall_highlights": ["Added search"],
        "by_project": {"api": {"themes": ["search"], "highlights": [], "risks_or_debt": []}},
        "skills_surface": {"frontend": ["TypeScript"], "backend": [], "devops": ["Docker"]},
    }
    service = AggregationService(FakeLLMClient([json.dumps(payload)]))

    overall = service.summarize_overall([RepoSummary(repo="api", themes=("search",))])

    assert overall.by_project["api"].themes == ("search",)
    assert overall.skills_surface.devops == ("Docker",)


def test_cv_requires_both_documents() -> None:
    errors = RunErrors()
    service = AggregationService(FakeLLMClient(['{"cv_md": "# CV"}']), errors)
    summaries = [RepoSummary(repo="api", highlights=("Added search",))]

    cv = service.generate_cv(summaries, OverallSummary(overall_themes=("search",)))

    assert cv.cv_md.startswith("# Experience Highlights")
    assert cv.cv_bullets_md.startswith("# CV Bullets")
    assert errors.get("cv")


def test_cv_from_model() -> None:
    client = FakeLLMClient(['{"cv_md": "# CV\\nText", "cv_bullets_md": "- Built search"}'])

    cv = AggregationService(client).generate_cv([], OverallSummary())

    assert cv.cv_md == "# CV\nText"
    assert cv.cv_bullets_md == "- Built search"


def test_performance_report_requests_plain_text() -> None:
    client = FakeLLMClient(["  # Performance Report\n\n## Summary\n- Shipped search\n"])

    report = AggregationService(client).generate_performance_report([], OverallSummary())

    assert report.startswith("# Performance Report")
    assert client.formats == [ResponseFormat.TEXT]


def test_without_client_every_stage_is_offline() -> None:
    service = AggregationService()
    commits = _classified_commits()

    repo_summary = service.summarize_repository("api", commits)
    overall = service.summarize_overall([repo_summary])
    report = service.generate_performance_report([repo_summary], overall)

    assert not service.uses_llm
    assert overall.overall_highlights == ("Added search", "Fixed crash on start")
    assert "## Projects breakdown (per repo)" in report
