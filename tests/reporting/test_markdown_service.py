"""Tests for summary and brag document rendering."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from git_brag.git.domain.value_objects import RepositoryRef
from git_brag.git.services.git_service import GitService
from git_brag.pipeline.domain.value_objects import (
    OutputPlan,
    PipelineResult,
    RepositoryCommits,
    RunErrors,
)
from git_brag.pipeline.services.contribution_pipeline import ContributionPipeline
from git_brag.reporting.services.markdown_service import MarkdownService
from git_brag.summarization.domain.value_objects import OverallSummary
from tests._fixtures.fakes import FakeGitRepository, make_commit

API = RepositoryRef(name="api", path=Path("/work/api"))


def _result() -> PipelineResult:
    git = FakeGitRepository(
        diffs={"abcdef123": "diff --git a/src/x.py b/src/x.py\n+x\n", "fedcba987": ""}
    )
    selected = [
        RepositoryCommits(
            repository=API,
            commits=(
                make_commit("abcdef123", "feat: export", day=5),
                make_commit("fedcba987", "fix: typo", day=6),
            ),
        )
    ]
    return ContributionPipeline(GitService(git)).run(selected)


def test_summary_doc_lists_overall_and_per_repo_sections() -> None:
    doc = MarkdownService().build_summary_doc(
        _result(),
        ["dev@example.com"],
        since="2025-01-01",
        generated_at=datetime(2025, 2, 1, tzinfo=timezone.utc),
    )

    assert doc.startswith("# Contribution Summary")
    assert "Generated: 2025-02-01T00:00:00+00:00" in doc
    assert "Date range: 2025-01-01 -> ?" in doc
    assert "Repos: 1 | Commits: 2" in doc
    assert "### api" in doc
    assert "- feat: export | src/x.py" in doc
    assert "- Backend: Python" in doc
    assert "- (none noted)" in doc


def test_brag_doc_groups_commits_by_type() -> None:
    doc = MarkdownService().build_brag_doc(_result(), ["dev@example.com"])

    assert doc.startswith("# Brag Document for dev@example.com")
    assert "## 📂 Repository: api" in doc
    features = doc.index("### 🚀 Features Delivered")
    fixes = doc.index("### 🐛 Bug Fixes")
    assert features < fixes
    assert "- feat: export (abcdef1, 2025-01-05)" in doc
    assert "- fix: typo (fedcba9, 2025-01-06)" in doc
    assert "Documentation" not in doc


def test_brag_doc_requires_commits() -> None:
    empty = PipelineResult(
        repositories=(),
        commits_by_repo={},
        analysis={},
        repo_summaries=[],
        overall_summary=OverallSummary(),
        output_plan=OutputPlan(),
        errors=RunErrors(),
    )

    with pytest.raises(ValueError, match="No commits"):
        MarkdownService().build_brag_doc(empty, ["dev@example.com"])
