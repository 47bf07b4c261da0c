"""Tests for batched commit classification and its fallbacks."""

from __future__ import annotations

import json

from git_brag.git.domain.value_objects import CommitType
from git_brag.pipeline.domain.value_objects import RunErrors
from git_brag.summarization.domain.value_objects import NO_SUMMARY, Classification
from git_brag.summarization.services.batching_service import BatchingService
from git_brag.summarization.services.commit_classifier import CommitClassifier
from tests._fixtures.fakes import FakeLLMClient, make_enriched, raising


def test_prose_wrapped_array_is_parsed() -> None:
    commits = [make_enriched("abc1234", "feat: login page")]
    client = FakeLLMClient(
        ['Sure! [{"hash":"abc1234","type":"feature","summary":"Added login page"}] Thanks.']
    )

    analysis = CommitClassifier(client).classify_all(commits)

    assert analysis == {"abc1234": Classification(CommitType.FEATURE, "Added login page")}
    assert commits[0].analysis == analysis["abc1234"]
    assert "HASH: abc1234" in client.prompts[0]


def test_provider_failure_falls_back_to_message_and_hint() -> None:
    commits = [make_enriched("def5678", "fix: null pointer in parser")]
    errors = RunErrors()

    analysis = CommitClassifier(FakeLLMClient([raising("Gemini error 500: down")])).classify_all(
        commits, errors
    )

    assert analysis["def5678"] == Classification(CommitType.FIX, "fix: null pointer in parser")
    assert errors.get("classification") == ["batch 1: Gemini error 500: down"]


def test_unparseable_response_falls_back_for_the_batch() -> None:
    commits = [make_enriched("a1", "refactor: split"), make_enriched("a2", "misc")]

    analysis = CommitClassifier(FakeLLMClient(["I cannot do that."])).classify_all(commits)

    assert analysis["a1"] == Classification(CommitType.TECH_IMPROVEMENT, "refactor: split")
    assert analysis["a2"] == Classification(CommitType.OTHER, "misc")


def test_missing_entries_and_bad_fields_are_repaired() -> None:
    commits = [make_enriched("h1", "feat: one"), make_enriched("h2", "fix: two")]
    response = json.dumps(
        [
            {"hash": "h1", "type": "wizardry", "summary": "  "},
            {"type": "fix", "summary": "no hash"},
            "noise",
        ]
    )

    analysis = CommitClassifier(FakeLLMClient([response])).classify_all(commits)

    assert analysis["h1"] == Classification(CommitType.OTHER, NO_SUMMARY)
    assert analysis["h2"] == Classification(CommitType.FIX, "fix: two")
    assert set(analysis) == {"h1", "h2"}


def test_one_failing_batch_does_not_stop_the_next() -> None:
    commits = [make_enriched("b1", "feat: a", diff="x" * 300), make_enriched("b2", "docs: b")]
    client = FakeLLMClient(
        [
            raising("boom"),
            '[{"hash":"b2","type":"docs","summary":"Documented b"}]',
        ]
    )
    classifier = CommitClassifier(client, BatchingService(max_chars_per_batch=800))

    analysis = classifier.classify_all(commits)

    assert len(client.prompts) == 2
    assert analysis["b1"] == Classification(CommitType.FEATURE, "feat: a")
    assert analysis["b2"] == Classification(CommitType.DOCS, "Documented b")


def test_fallback_classification_is_deterministic() -> None:
    commit = make_enriched("c1", "perf: faster")

    assert Classification.fallback_for(commit) == Classification.fallback_for(commit)
    assert Classification.fallback_for(commit).type is CommitType.TECH_IMPROVEMENT


def test_rerun_with_failing_provider_yields_identical_fallback() -> None:
    commits = [make_enriched("i1", "feat: x"), make_enriched("i2", "chore: y")]

    first = CommitClassifier(FakeLLMClient([raising("down")])).classify_all(commits)
    second = CommitClassifier(FakeLLMClient([raising("down")])).classify_all(commits)

    assert first == second
    assert [commit.analysis for commit in commits] == [first["i1"], first["i2"]]
