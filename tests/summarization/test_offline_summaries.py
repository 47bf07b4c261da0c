"""Tests for summaries built without a language model."""

from __future__ import annotations

from git_brag.git.domain.value_objects import CommitType
from git_brag.summarization.domain.value_objects import Classification, OverallSummary, RepoSummary
from git_brag.summarization.services import offline_summaries
from tests._fixtures.fakes import make_enriched


def test_repo_summary_limits_highlights_and_evidence() -> None:
    commits = []
    for i in range(12):
        commit = make_enriched(
            f"h{i}", f"feat: item {i}", files=[f"src/f{i}.py", f"src/g{i}.py", f"src/h{i}.py"]
        )
        commit.analysis = Classification(CommitType.FEATURE, f"Item {i}")
        commits.append(commit)

    summary = offline_summaries.build_basic_repo_summary("api", commits)

    assert summary.themes == ("features",)
    assert len(summary.highlights) == offline_summaries.MAX_REPO_HIGHLIGHTS
    assert len(summary.evidence) == offline_summaries.MAX_REPO_EVIDENCE
    assert summary.evidence[0] == "feat: item 0 | src/f0.py"
    assert summary.evidence[2] == "feat: item 1 | src/f1.py"


def test_unclassified_commits_use_type_hint_and_message() -> None:
    summary = offline_summaries.build_basic_repo_summary("api", [make_enriched("h", "fix: x")])

    assert summary.themes == ("fixes",)
    assert summary.highlights == ("fix: x",)


def test_overall_summary_takes_two_highlights_per_repo() -> None:
    summaries = [
        RepoSummary(repo="api", themes=("features",), highlights=("a1", "a2", "a3")),
        RepoSummary(repo="web", themes=("fixes", "features"), highlights=("w1",)),
    ]

    overall = offline_summaries.build_basic_overall_summary(summaries)

    assert overall.overall_themes == ("features", "fixes")
    assert overall.overall_highlights == ("a1", "a2", "w1")
    assert set(overall.by_project) == {"api", "web"}


def test_skills_surface_is_inferred_from_evidence_files() -> None:
    summaries = [
        RepoSummary(
            repo="api",
            evidence=("feat | web/app.tsx", "fix | svc/main.go", "chore | Dockerfile", "x | deploy.yml"),
        )
    ]

    skills = offline_summaries.build_skills_surface(summaries)

    assert skills.frontend == ("TypeScript",)
    assert skills.backend == ("Go",)
    assert skills.devops == ("Docker", "YAML")


def test_fallback_cv_pads_to_minimum_bullets() -> None:
    summaries = [RepoSummary(repo="api", highlights=("search",), evidence=("s | a.py",))]

    cv = offline_summaries.build_fallback_cv(summaries, OverallSummary(overall_themes=("features",)))

    assert "Focused on features across multiple repositories." in cv.cv_md
    assert (
        "- Delivered search in api using Python to improve maintainability "
        "(impact unclear from diff)."
    ) in cv.cv_bullets_md
    assert "additional improvements" in cv.cv_bullets_md


def test_fallback_performance_report_sections() -> None:
    report = offline_summaries.build_fallback_performance_report(
        [RepoSummary(repo="api", risks_or_debt=("flaky tests",))], OverallSummary()
    )

    assert report.startswith("# Performance Report")
    assert "- (unclear from diff)" in report
    assert "- flaky tests" in report
    assert "## Next month plan suggestions" in report


def test_pipe_in_commit_subject_does_not_hide_the_file() -> None:
    assert offline_summaries.infer_tech_from_evidence(["feat: a | b pipeline | src/app.go"]) == ["Go"]
