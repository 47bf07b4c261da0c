"""Tests for artifact selection."""

from __future__ import annotations

import pytest

from git_brag.pipeline.domain.value_objects import (
    Artifact,
    GenerationMode,
    OutputPlan,
    PipelineOptions,
)


@pytest.mark.parametrize(
    ("mode", "cv", "perf"),
    [
        (GenerationMode.ALL, True, True),
        (GenerationMode.CV, True, False),
        (GenerationMode.PERF, False, True),
    ],
)
def test_mode_adds_optional_artifacts(mode: GenerationMode, cv: bool, perf: bool) -> None:
    assert OutputPlan.select(mode) == OutputPlan(summary=True, brag=True, cv=cv, perf=perf)


def test_only_selects_a_single_artifact() -> None:
    assert OutputPlan.select(GenerationMode.ALL, Artifact.BRAG) == OutputPlan(
        summary=False, brag=True, cv=False, perf=False
    )


def test_no_llm_wins_over_everything() -> None:
    assert OutputPlan.select(GenerationMode.ALL, Artifact.CV, no_llm=True) == OutputPlan(
        summary=True, brag=False, cv=False, perf=False
    )


def test_pipeline_options_default_to_every_artifact() -> None:
    assert PipelineOptions().output_plan == OutputPlan.select(GenerationMode.ALL)
