"""Deterministic summaries built without a language model."""

from collections.abc import Iterable, Sequence
from pathlib import PurePosixPath

from git_brag.git.domain.entities import EnrichedCommit
from git_brag.git.domain.value_objects import CommitType
from git_brag.summarization.domain.value_objects import (
    CvDocuments,
    OverallSummary,
    ProjectSummary,
    RepoSummary,
    SkillsSurface,
)

UNCLEAR = "(unclear from diff)"

MAX_REPO_HIGHLIGHTS = 7
MAX_REPO_EVIDENCE = 10
EVIDENCE_FILES_PER_COMMIT = 2
HIGHLIGHTS_PER_REPO_OVERALL = 2
MAX_OVERALL_HIGHLIGHTS = 10
MIN_CV_BULLETS = 6
MAX_CV_BULLETS = 12

THEME_NAMES: dict[CommitType, str] = {
    CommitType.FEATURE: "features",
    CommitType.FIX: "fixes",
    CommitType.TECH_IMPROVEMENT: "tech improvements",
    CommitType.DOCS: "documentation",
    CommitType.CHORE: "chores",
    CommitType.OTHER: "other work",
}

_TECH_BY_EXTENSION: dict[str, str] = {
    ".ts": "TypeScript",
    ".tsx": "TypeScript",
    ".js": "JavaScript",
    ".jsx": "JavaScript",
    ".go": "Go",
    ".php": "PHP",
    ".py": "Python",
    ".rb": "Ruby",
    ".java": "Java",
    ".cs": "C#",
    ".kt": "Kotlin",
    ".kts": "Kotlin",
    ".swift": "Swift",
    ".sql": "SQL",
    ".vue": "Vue",
    ".svelte": "Svelte",
    ".css": "CSS",
    ".scss": "CSS",
    ".sass": "CSS",
    ".yml": "YAML",
    ".yaml": "YAML",
    ".tf": "Terraform",
    ".hcl": "Terraform",
}

_FRONTEND_TECH = frozenset({"TypeScript", "JavaScript", "Vue", "Svelte", "CSS"})
_DEVOPS_TECH = frozenset({"Docker", "YAML", "Terraform"})


def format_bullet_list(items: Iterable[str], fallback: str = f"- {UNCLEAR}") -> list[str]:
    """Render items as Markdown bullets, or a single fallback line when empty."""
    lines = [f"- {item}" for item in items]
    return lines or [fallback]


def infer_tech_from_evidence(evidence: Iterable[str]) -> list[str]:
    """
    Guess technologies from ``"<subject> | <file>"`` evidence lines.

    Returns:
        Technology names in first-seen order
    """
    techs: dict[str, None] = {}
    for line in evidence:
        parts = str(line).rsplit("|", 1)
        if len(parts) < 2 or not parts[1].strip():
            continue
        path = PurePosixPath(parts[1].strip())
        if path.name.lower() == "dockerfile":
            techs.setdefault("Docker", None)
        tech = _TECH_BY_EXTENSION.get(path.suffix.lower())
        if tech:
            techs.setdefault(tech, None)
    return list(techs)


def build_skills_surface(repo_summaries: Sequence[RepoSummary]) -> SkillsSurface:
    """Sort technologies evidenced across repositories into frontend, backend and devops."""
    techs = infer_tech_from_evidence(
        line for summary in repo_summaries for line in summary.evidence
    )
    return SkillsSurface(
        frontend=tuple(tech for tech in techs if tech in _FRONTEND_TECH),
        backend=tuple(
            tech for tech in techs if tech not in _FRONTEND_TECH and tech not in _DEVOPS_TECH
        ),
        devops=tuple(tech for tech in techs if tech in _DEVOPS_TECH),
    )


def build_basic_repo_summary(repo_name: str, commits: Sequence[EnrichedCommit]) -> RepoSummary:
    """
    Summarize a repository from classifications alone.

    Themes are the classification types seen, highlights the leading commit
    summaries, evidence pairs commit subjects with touched files.
    """
    themes: dict[str, None] = {}
    highlights: list[str] = []
    evidence: list[str] = []

    for commit in commits:
        commit_type = commit.analysis.type if commit.analysis else commit.type_hint
        themes.setdefault(THEME_NAMES.get(commit_type, "other work"), None)
        summary = commit.analysis.summary if commit.analysis else commit.message
        if summary and len(highlights) < MAX_REPO_HIGHLIGHTS:
            highlights.append(summary)
        for file_path in commit.files[:EVIDENCE_FILES_PER_COMMIT]:
            if len(evidence) >= MAX_REPO_EVIDENCE:
                break
            evidence.append(f"{commit.message} | {file_path}")

    return RepoSummary(
        repo=repo_name,
        themes=tuple(themes),
        highlights=tuple(highlights),
        risks_or_debt=(),
        evidence=tuple(evidence),
        outline=tuple(highlights[:MAX_REPO_HIGHLIGHTS]),
    )


def build_basic_overall_summary(repo_summaries: Sequence[RepoSummary]) -> OverallSummary:
    """Merge repository summaries into an overall summary without a model."""
    themes: dict[str, None] = {}
    highlights: list[str] = []
    by_project: dict[str, ProjectSummary] = {}

    for summary in repo_summaries:
        for theme in summary.themes:
            themes.setdefault(theme, None)
        highlights.extend(summary.highlights[:HIGHLIGHTS_PER_REPO_OVERALL])
        by_project[summary.repo] = ProjectSummary(
            themes=summary.themes,
            highlights=summary.highlights,
            risks_or_debt=summary.risks_or_debt,
        )

    return OverallSummary(
        overall_themes=tuple(themes),
        overall_highlights=tuple(highlights[:MAX_OVERALL_HIGHLIGHTS]),
        by_project=by_project,
        skills_surface=build_skills_surface(repo_summaries),
    )


def _tech_label(summary: RepoSummary) -> str:
    hints = infer_tech_from_evidence(summary.evidence)[:2]
    return ", ".join(hints) if hints else "core stack"


def build_fallback_cv(
    repo_summaries: Sequence[RepoSummary], overall_summary: OverallSummary
) -> CvDocuments:
    """Build CV paragraphs and bullets from summaries without a model."""
    themes = ", ".join(overall_summary.overall_themes[:4])
    highlights = "; ".join(overall_summary.overall_highlights[:4])
    intro = " ".join(
        [
            f"Focused on {themes} across multiple repositories."
            if themes
            else "Focused on product and technical improvements across multiple repositories.",
            f"Highlights include {highlights}." if highlights else "Highlights are unclear from diff.",
        ]
    )

    cv_lines = ["# Experience Highlights", "", intro, ""]
    for summary in repo_summaries:
        cv_lines.append(f"## {summary.repo}")
        cv_lines.extend(format_bullet_list(summary.highlights[:3]))
        cv_lines.append("")

    bullets: list[tuple[str, str, str]] = []
    for summary in repo_summaries:
        label = _tech_label(summary)
        for highlight in summary.highlights:
            if len(bullets) >= MAX_CV_BULLETS:
                break
            bullets.append((summary.repo, highlight, label))
        if len(bullets) >= MAX_CV_BULLETS:
            break
    for summary in repo_summaries:
        if len(bullets) >= MIN_CV_BULLETS:
            break
        bullets.append((summary.repo, "additional improvements", _tech_label(summary)))

    by_repo: dict[str, list[tuple[str, str]]] = {}
    for repo, text, label in bullets:
        by_repo.setdefault(repo, []).append((text, label))

    bullet_lines = ["# CV Bullets", ""]
    for repo, items in by_repo.items():
        bullet_lines.append(f"## {repo}")
        for text, label in items[:6]:
            bullet_lines.append(
                f"- Delivered {text} in {repo} using {label} to improve maintainability "
                "(impact unclear from diff)."
            )
        bullet_lines.append("")
    if not by_repo:
        bullet_lines.append(f"- {UNCLEAR}")

    return CvDocuments(cv_md="\n".join(cv_lines), cv_bullets_md="\n".join(bullet_lines))


def build_fallback_performance_report(
    repo_summaries: Sequence[RepoSummary], overall_summary: OverallSummary
) -> str:
    """Build the sectioned performance report without a model."""
    lines = [
        "# Performance Report",
        "",
        "## Summary (what I shipped / improved)",
        *format_bullet_list(overall_summary.overall_highlights),
        "",
        "## Projects breakdown (per repo)",
    ]
    for summary in repo_summaries:
        lines.append(f"### {summary.repo}")
        lines.extend(format_bullet_list(summary.highlights))
        lines.append("")

    risks = [risk for summary in repo_summaries for risk in summary.risks_or_debt]
    lines.extend(
        [
            "## Outcomes & impact",
            "- Impact is unclear from diff; see highlights above.",
            "",
            "## Challenges/constraints",
            f"- {UNCLEAR}",
            "",
            "## Risks/tech debt + follow-ups",
            *format_bullet_list(risks, fallback="- (none noted)"),
            "",
            "## Next month plan suggestions",
            "- (optional)",
            "",
        ]
    )
    return "\n".join(lines)
