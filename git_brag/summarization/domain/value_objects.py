"""Value objects for Summarization domain."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from git_brag.git.domain.entities import EnrichedCommit
from git_brag.git.domain.value_objects import CommitType

NO_SUMMARY = "(no summary)"


class ResponseFormat(str, Enum):
    """Shape of output requested from a provider."""

    JSON = "json"
    TEXT = "text"


def _string_list(value: object) -> tuple[str, ...]:
    """Keep the truthy items of a list as strings; anything else becomes empty."""
    if not isinstance(value, list):
        return ()
    return tuple(str(item) for item in value if item)


@dataclass(frozen=True)
class Classification:
    """Type and one-line summary assigned to a commit."""

    type: CommitType
    summary: str

    @classmethod
    def fallback_for(cls, commit: EnrichedCommit) -> "Classification":
        """Deterministic classification used whenever the model gives none."""
        return cls(type=commit.type_hint, summary=commit.message)

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type.value, "summary": self.summary}


@dataclass(frozen=True)
class RepoSummary:
    """Themes and highlights of one repository's contributions."""

    repo: str
    themes: tuple[str, ...] = ()
    highlights: tuple[str, ...] = ()
    risks_or_debt: tuple[str, ...] = ()
    evidence: tuple[str, ...] = ()
    outline: tuple[str, ...] = ()

    @classmethod
    def from_payload(cls, payload: object, repo_name: str) -> "RepoSummary":
        """
        Build a summary from an untrusted JSON payload.

        Missing or malformed list fields become empty; a missing repo name
        falls back to ``repo_name``.
        """
        data: Mapping[str, Any] = payload if isinstance(payload, dict) else {}
        return cls(
            repo=str(data.get("repo") or repo_name),
            themes=_string_list(data.get("themes")),
            highlights=_string_list(data.get("highlights")),
            risks_or_debt=_string_list(data.get("risks_or_debt")),
            evidence=_string_list(data.get("evidence")),
            outline=_string_list(data.get("outline")),
        )

    def is_empty(self) -> bool:
        return not (
            self.themes or self.highlights or self.risks_or_debt or self.evidence or self.outline
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "repo": self.repo,
            "themes": list(self.themes),
            "highlights": list(self.highlights),
            "risks_or_debt": list(self.risks_or_debt),
            "evidence": list(self.evidence),
            "outline": list(self.outline),
        }


@dataclass(frozen=True)
class ProjectSummary:
    """Per-repository slice of the overall summary."""

    themes: tuple[str, ...] = ()
    highlights: tuple[str, ...] = ()
    risks_or_debt: tuple[str, ...] = ()

    @classmethod
    def from_payload(cls, payload: object) -> "ProjectSummary":
        data: Mapping[str, Any] = payload if isinstance(payload, dict) else {}
        return cls(
            themes=_string_list(data.get("themes")),
            highlights=_string_list(data.get("highlights")),
            risks_or_debt=_string_list(data.get("risks_or_debt")),
        )

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "themes": list(self.themes),
            "highlights": list(self.highlights),
            "risks_or_debt": list(self.risks_or_debt),
        }


@dataclass(frozen=True)
class SkillsSurface:
    """Technologies evidenced by the contributions, by area."""

    frontend: tuple[str, ...] = ()
    backend: tuple[str, ...] = ()
    devops: tuple[str, ...] = ()

    @classmethod
    def from_payload(cls, payload: object) -> "SkillsSurface":
        data: Mapping[str, Any] = payload if isinstance(payload, dict) else {}
        return cls(
            frontend=_string_list(data.get("frontend")),
            backend=_string_list(data.get("backend")),
            devops=_string_list(data.get("devops")),
        )

    def is_empty(self) -> bool:
        return not (self.frontend or self.backend or self.devops)

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "frontend": list(self.frontend),
            "backend": list(self.backend),
            "devops": list(self.devops),
        }


@dataclass(frozen=True)
class OverallSummary:
    """Cross-repository summary of contributions."""

    overall_themes: tuple[str, ...] = ()
    overall_highlights: tuple[str, ...] = ()
    by_project: Mapping[str, ProjectSummary] = field(default_factory=dict)
    skills_surface: SkillsSurface = field(default_factory=SkillsSurface)

    @classmethod
    def from_payload(cls, payload: object) -> "OverallSummary":
        """Build an overall summary from an untrusted JSON payload."""
        data: Mapping[str, Any] = payload if isinstance(payload, dict) else {}
        raw_projects = data.get("by_project")
        by_project = (
            {str(name): ProjectSummary.from_payload(value) for name, value in raw_projects.items()}
            if isinstance(raw_projects, dict)
            else {}
        )
        return cls(
            overall_themes=_string_list(data.get("overall_themes")),
            overall_highlights=_string_list(data.get("overall_highlights")),
            by_project=by_project,
            skills_surface=SkillsSurface.from_payload(data.get("skills_surface")),
        )

    def is_empty(self) -> bool:
        return not (self.overall_themes or self.overall_highlights or self.by_project)

    def to_dict(self) -> dict[str, Any]:
        return {
            "overall_themes": list(self.overall_themes),
            "overall_highlights": list(self.overall_highlights),
            "by_project": {name: project.to_dict() for name, project in self.by_project.items()},
            "skills_surface": self.skills_surface.to_dict(),
        }


@dataclass(frozen=True)
class CvDocuments:
    """Markdown bodies of the CV artifacts."""

    cv_md: str
    cv_bullets_md: str
