"""Prompt builders for commit classification and contribution summaries."""

import json
from collections.abc import Sequence

from git_brag.git.domain.entities import EnrichedCommit
from git_brag.summarization.domain.value_objects import OverallSummary, RepoSummary

_EVIDENCE_RULES = """Rules:
- Use ONLY the provided {source}.
- Do NOT invent metrics, tickets, or impact. If unclear, say "unclear from diff".
- Keep outputs concise and evidence-based."""


def _format_date(commit: EnrichedCommit) -> str:
    return commit.date.isoformat()


def build_classification_prompt(commits: Sequence[EnrichedCommit]) -> str:
    """Create the prompt classifying a batch of commits."""
    blocks = "\n".join(
        "\n".join(
            [
                f"=== COMMIT {idx} START ===",
                f"HASH: {commit.hash}",
                f"REPO: {commit.repo_name}",
                f"DATE: {_format_date(commit)}",
                f"TYPE_HINT: {commit.type_hint.value}",
                f"MESSAGE: {commit.message}",
                "DIFF:",
                "```diff",
                commit.diff_snippet,
                "```",
                f"=== COMMIT {idx} END ===",
                "",
            ]
        )
        for idx, commit in enumerate(commits, start=1)
    )

    return f"""You are analyzing git commits for a performance review brag document.

You receive multiple commits with:
- HASH
- REPO
- DATE
- TYPE_HINT (from commit prefix, may be useful but not always correct)
- MESSAGE (commit message)
- DIFF (unified diff)

For EACH commit:
1. Read MESSAGE and DIFF together to understand what changed and why.
2. Classify into EXACTLY ONE type:
   - "feature"          = new user-facing capability or significant behavior change
   - "fix"              = bug fix, defect resolution
   - "tech-improvement" = refactor, performance, infra, tests, DX, cleanup
   - "docs"             = documentation, comments, READMEs
   - "chore"            = minor config tweaks, housekeeping
   - "other"
3. Generate ONE concise summary (max 25 words) describing the impact of the change.

Use TYPE_HINT only as a weak signal; if DIFF clearly contradicts it, trust the DIFF.

Return ONLY a JSON array. Each element MUST be:

{{
  "hash": "<commit hash from input>",
  "type": "feature" | "fix" | "tech-improvement" | "docs" | "chore" | "other",
  "summary": "<short impact-focused sentence>"
}}

Now process the following commits:

{blocks}""".strip()


def build_repo_summary_prompt(repo_name: str, commits: Sequence[EnrichedCommit]) -> str:
    """Create the prompt summarizing one repository from its classified commits."""
    entries: list[str] = []
    for idx, commit in enumerate(commits, start=1):
        analysis = commit.analysis
        commit_type = analysis.type if analysis else commit.type_hint
        entries.append(
            "\n".join(
                [
                    f"COMMIT {idx}",
                    f"HASH: {commit.hash}",
                    f"DATE: {_format_date(commit)}",
                    f"AUTHOR: {commit.commit.author_name} <{commit.commit.author_email}>",
                    f"TYPE: {commit_type.value}",
                    f"SUBJECT: {commit.message}",
                    f"SUMMARY: {analysis.summary if analysis else commit.message}",
                    f"FILES: {', '.join(commit.files) if commit.files else 'unknown'}",
                ]
            )
        )
    commit_data = "\n\n".join(entries)
    rules = _EVIDENCE_RULES.format(source="commit subjects, summaries, and file paths")

    return f"""You are summarizing contributions for a single git repository.

{rules}

Return ONLY a JSON object with this exact shape:
{{
  "repo": {json.dumps(repo_name)},
  "themes": ["..."],
  "highlights": ["..."],
  "risks_or_debt": ["..."],
  "evidence": ["<commit subject> | <file path>", "..."],
  "outline": ["..."]
}}

Commit data:
{commit_data}"""


def build_overall_summary_prompt(repo_summaries: Sequence[RepoSummary]) -> str:
    """Create the prompt merging repository summaries into a cross-repo summary."""
    payload = json.dumps([summary.to_dict() for summary in repo_summaries], indent=2)
    rules = _EVIDENCE_RULES.format(source="repo summaries")

    return f"""You are producing a cross-repo summary of contributions.

{rules}

Return ONLY a JSON object with this exact shape:
{{
  "overall_themes": ["..."],
  "overall_highlights": ["..."],
  "by_project": {{
    "<repo>": {{
      "themes": ["..."],
      "highlights": ["..."],
      "risks_or_debt": ["..."]
    }}
  }},
  "skills_surface": {{
    "frontend": ["..."],
    "backend": ["..."],
    "devops": ["..."]
  }}
}}

Repo summaries:
{payload}"""


def _summaries_payload(
    repo_summaries: Sequence[RepoSummary], overall_summary: OverallSummary
) -> str:
    return json.dumps(
        {
            "repoSummaries": [summary.to_dict() for summary in repo_summaries],
            "overallSummary": overall_summary.to_dict(),
        },
        indent=2,
    )


def build_cv_prompt(
    repo_summaries: Sequence[RepoSummary], overall_summary: OverallSummary
) -> str:
    """Create the prompt producing CV paragraphs and bullets."""
    return f"""You are writing CV content from git contribution evidence.

Rules:
- Use ONLY the provided summaries.
- Do NOT invent metrics, tickets, or impact. If unclear, say "unclear from diff".
- Keep text concise and professional.
- Avoid fluff words like "helped" or "worked on".

Return ONLY a JSON object:
{{
  "cv_md": "<markdown>",
  "cv_bullets_md": "<markdown>"
}}

Required formatting:
1) cv_md:
   - 1-3 short paragraphs total
   - grouped by repo with short highlights (use headings)
2) cv_bullets_md:
   - 6-12 bullets total, grouped by repo headings
   - each bullet: action verb + scope + tech + impact (no invented numbers)
   - each bullet should be <= 2 lines

Input:
{_summaries_payload(repo_summaries, overall_summary)}"""


def build_performance_prompt(
    repo_summaries: Sequence[RepoSummary], overall_summary: OverallSummary
) -> str:
    """Create the prompt producing the Markdown performance report."""
    rules = _EVIDENCE_RULES.format(source="summaries")
    return f"""You are writing a performance report from git contribution evidence.

{rules}

Return ONLY markdown with these sections:
- Summary (what I shipped / improved)
- Projects breakdown (per repo)
- Outcomes & impact (no fabricated metrics; qualify uncertainty)
- Challenges/constraints (if inferred)
- Risks/tech debt + follow-ups
- Next month plan suggestions (optional)

Input:
{_summaries_payload(repo_summaries, overall_summary)}"""
