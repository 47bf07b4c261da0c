"""Markdown rendering of the summary and brag documents."""

from collections.abc import Sequence
from datetime import datetime, timezone

from git_brag.git.domain.value_objects import CommitType
from git_brag.pipeline.domain.value_objects import PipelineResult
from git_brag.summarization.domain.value_objects import Classification
from git_brag.summarization.services.offline_summaries import format_bullet_list

BRAG_SECTIONS: tuple[tuple[CommitType, str], ...] = (
    (CommitType.FEATURE, "🚀 Features Delivered"),
    (CommitType.FIX, "🐛 Bug Fixes"),
    (CommitType.TECH_IMPROVEMENT, "⚙️ Technical Improvements"),
    (CommitType.DOCS, "📚 Documentation"),
    (CommitType.CHORE, "🧹 Chores & Housekeeping"),
    (CommitType.OTHER, "📁 Misc"),
)


class MarkdownService:
    """Renders pipeline results as Markdown documents."""

    def build_summary_doc(
        self,
        result: PipelineResult,
        emails: Sequence[str],
        since: str | None = None,
        until: str | None = None,
        generated_at: datetime | None = None,
    ) -> str:
        """
        Render the contribution summary.

        Args:
            result: Pipeline output
            emails: Author emails the run was filtered on
            since: Optional lower date bound of the run
            until: Optional upper date bound of the run
            generated_at: Timestamp printed in the header. Defaults to now (UTC)

        Returns:
            Markdown document
        """
        generated_at = generated_at or datetime.now(timezone.utc)
        overall = result.overall_summary

        lines = [
            "# Contribution Summary",
            "",
            f"Generated: {generated_at.isoformat()}",
            f"Emails: {', '.join(emails)}",
        ]
        if since or until:
            lines.append(f"Date range: {since or '?'} -> {until or '?'}")
        lines.extend(
            [
                f"Repos: {len(result.repo_summaries)} | Commits: {result.total_commits}",
                "",
                "## Overall Summary",
                "### Themes",
                *format_bullet_list(overall.overall_themes),
                "",
                "### Highlights",
                *format_bullet_list(overall.overall_highlights),
                "",
            ]
        )

        skills = overall.skills_surface
        if not skills.is_empty():
            lines.append("### Skills Surface (evidence-based)")
            for label, values in (
                ("Frontend", skills.frontend),
                ("Backend", skills.backend),
                ("DevOps", skills.devops),
            ):
                if values:
                    lines.append(f"- {label}: {', '.join(values)}")
            lines.append("")

        lines.append("## Per-Repo Summary")
        for summary in result.repo_summaries:
            lines.extend(
                [
                    f"### {summary.repo}",
                    "**Themes**",
                    *format_bullet_list(summary.themes),
                    "",
                    "**Highlights**",
                    *format_bullet_list(summary.highlights),
                    "",
                    "**Risks / Tech Debt**",
                    *format_bullet_list(summary.risks_or_debt, fallback="- (none noted)"),
                    "",
                    "**Evidence**",
                    *format_bullet_list(summary.evidence),
                    "",
                    "**Contribution Outline**",
                    *format_bullet_list(summary.outline),
                    "",
                ]
            )

        return "\n".join(lines)

    def build_brag_doc(self, result: PipelineResult, emails: Sequence[str]) -> str:
        """
        Render the brag document: one section per repository, commits grouped by type.

        Raises:
            ValueError: If the result holds no commits
        """
        if not result.total_commits:
            raise ValueError("No commits to include in brag document.")

        lines = [f"# Brag Document for {', '.join(emails)}", ""]
        for repo_name, commits in result.commits_by_repo.items():
            if not commits:
                continue
            lines.extend([f"## 📂 Repository: {repo_name}", ""])

            groups: dict[CommitType, list[str]] = {commit_type: [] for commit_type, _ in BRAG_SECTIONS}
            for commit in commits:
                analysis = commit.analysis or Classification.fallback_for(commit)
                date_str = commit.date.date().isoformat()
                groups[analysis.type].append(
                    f"- {analysis.summary} ({commit.commit.short_hash}, {date_str})"
                )

            for commit_type, title in BRAG_SECTIONS:
                items = groups[commit_type]
                if items:
                    lines.extend([f"### {title}", *items, ""])
            lines.append("")

        return "\n".join(lines)
