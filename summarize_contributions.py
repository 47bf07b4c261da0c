#!/usr/bin/env python3
"""
Summarize your git contributions across local repositories:
- Scans a directory tree for git repositories
- Lists commits by author email(s) and optional date range
- Classifies commits and summarizes them with an LLM (Gemini, OpenAI or Anthropic)
- Writes summary.md, brag.md and optionally cv.md, cv_bullets.md, performance.md
- --no-llm: offline run producing only raw.json, meta.json and summary.md
"""

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path

from git_brag import __version__
from git_brag.git.domain.value_objects import CommitQuery, DiffSizeConfig
from git_brag.git.repositories.implementations import GitRepositoryImpl
from git_brag.git.services.git_service import GitService
from git_brag.logging import configure_logging
from git_brag.pipeline.domain.value_objects import (
    Artifact,
    GenerationMode,
    OutputPlan,
    PipelineOptions,
    RunErrors,
)
from git_brag.pipeline.services.contribution_pipeline import ContributionPipeline
from git_brag.reporting.services.output_service import OutputService
from git_brag.settings import env, load_env_file, parse_bool, parse_comma_list, positive_int
from git_brag.summarization.repositories.factory import (
    create_llm_client,
    resolve_api_keys,
    resolve_provider,
)
from git_brag.summarization.repositories.implementations import RotatingProviderClient

DEFAULT_MAX_DIFF_BYTES = 1_500_000
DEFAULT_MAX_COMMITS = 200
DEFAULT_OUTPUT_DIR = "./contrib-output"


@dataclass(frozen=True)
class RunSettings:
    """Settings of one run, merged from command-line flags and environment."""

    root_path: Path
    emails: tuple[str, ...]
    since: str | None
    until: str | None
    include_globs: tuple[str, ...]
    exclude_globs: tuple[str, ...]
    output_dir: Path
    mode: GenerationMode
    only: Artifact | None
    max_diff_bytes: int
    max_commits: int
    no_llm: bool
    include_merges: bool
    full_diff: bool


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Summarize git contributions across local repositories into "
            "brag, summary, CV and performance documents"
        )
    )
    parser.add_argument("--path", "-p", type=Path, default=Path("."),
                        help="Directory scanned for git repositories (default: .)")
    parser.add_argument("--email", "-e", help="Author email")
    parser.add_argument("--emails", help="Comma-separated author emails")
    parser.add_argument("--since", help="Only commits after this date (e.g. 2025-01-01)")
    parser.add_argument("--until", help="Only commits before this date (e.g. 2025-12-31)")
    parser.add_argument("--provider", help="gemini, gpt or claude (default: gemini)")
    parser.add_argument("--model", help="Model name (default depends on provider)")
    parser.add_argument("--api-key", help="API key for the selected provider")
    parser.add_argument("--api-keys", help="Comma-separated API keys for the selected provider")
    for name in ("gemini", "openai", "anthropic"):
        parser.add_argument(f"--{name}-api-key", help=f"{name.capitalize()} API key")
        parser.add_argument(
            f"--{name}-api-keys", help=f"Comma-separated {name.capitalize()} API keys"
        )
    parser.add_argument("--include", help="Comma-separated repository name globs to include")
    parser.add_argument("--exclude", help="Comma-separated repository name globs to exclude")
    parser.add_argument("--output-dir", help=f"Base output directory (default: {DEFAULT_OUTPUT_DIR})")
    parser.add_argument("--mode", help="Additional outputs: cv, perf or all (default: all)")
    parser.add_argument("--only", help="Generate a single artifact: brag, summary, cv or perf")
    parser.add_argument("--max-diff-bytes",
                        help=f"Diff byte budget per repository (default: {DEFAULT_MAX_DIFF_BYTES})")
    parser.add_argument("--max-commits",
                        help=f"Maximum commits per repository (default: {DEFAULT_MAX_COMMITS})")
    parser.add_argument("--no-llm", action="store_true",
                        help="Do not call any LLM; write raw data and summary.md only")
    parser.add_argument("--include-merges", action="store_true", help="Include merge commits")
    parser.add_argument("--full-diff", action="store_true",
                        help="Keep untruncated diffs in raw.json")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", type=Path, help="Also write logs to this file")
    return parser


def build_run_settings(args: argparse.Namespace) -> RunSettings:
    """
    Merge command-line flags with GITBRAG_* environment variables.

    Raises:
        ValueError: If emails are missing or mode/only are invalid
    """
    load_env_file()

    emails = parse_comma_list(args.emails or env("GITBRAG_EMAILS"))
    if not emails:
        single = args.email or env("GITBRAG_EMAIL")
        emails = [single.strip()] if single and single.strip() else []
    if not emails:
        raise ValueError("--emails/--email or GITBRAG_EMAIL(S) is required.")

    raw_mode = (args.mode or env("GITBRAG_MODE") or GenerationMode.ALL.value).strip().lower()
    try:
        mode = GenerationMode(raw_mode)
    except ValueError:
        raise ValueError("--mode must be cv, perf, or all.") from None

    raw_only = (args.only or env("GITBRAG_ONLY") or "").strip().lower()
    try:
        only = Artifact(raw_only) if raw_only else None
    except ValueError:
        raise ValueError("--only must be brag, summary, cv, or perf.") from None

    return RunSettings(
        root_path=args.path.resolve(),
        emails=tuple(dict.fromkeys(emails)),
        since=args.since or env("GITBRAG_SINCE"),
        until=args.until or env("GITBRAG_UNTIL"),
        include_globs=tuple(parse_comma_list(args.include or env("GITBRAG_INCLUDE"))),
        exclude_globs=tuple(parse_comma_list(args.exclude or env("GITBRAG_EXCLUDE"))),
        output_dir=Path(args.output_dir or env("GITBRAG_OUTPUT_DIR") or DEFAULT_OUTPUT_DIR).resolve(),
        mode=mode,
        only=only,
        max_diff_bytes=positive_int(
            args.max_diff_bytes or env("GITBRAG_MAX_DIFF_BYTES"), DEFAULT_MAX_DIFF_BYTES
        ),
        max_commits=positive_int(
            args.max_commits or env("GITBRAG_MAX_COMMITS"), DEFAULT_MAX_COMMITS
        ),
        no_llm=args.no_llm or parse_bool(env("GITBRAG_NO_LLM")),
        include_merges=args.include_merges or parse_bool(env("GITBRAG_INCLUDE_MERGES")),
        full_diff=args.full_diff or parse_bool(env("GITBRAG_FULL_DIFF")),
    )


def build_llm_client(args: argparse.Namespace) -> RotatingProviderClient:
    """
    Create the LLM client from flags and environment.

    Raises:
        ValueError: If the provider is unknown or no API key is available
    """
    provider = resolve_provider(args.provider)
    flag_prefix = {"gemini": "gemini", "gpt": "openai", "claude": "anthropic"}[provider.value]
    api_keys = resolve_api_keys(
        provider,
        provider_keys=parse_comma_list(getattr(args, f"{flag_prefix}_api_keys")),
        generic_keys=parse_comma_list(args.api_keys),
        provider_key=getattr(args, f"{flag_prefix}_api_key"),
        generic_key=args.api_key,
    )
    return create_llm_client(provider, api_keys, model_name=args.model)


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, run the pipeline and write the artifacts."""
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose, log_file=args.log_file)

    try:
        settings = build_run_settings(args)
        llm_client = None if settings.no_llm else build_llm_client(args)
    except ValueError as e:
        print(f"✗ Configuration error: {e}", file=sys.stderr)
        return 1

    git_service = GitService(GitRepositoryImpl())
    options = PipelineOptions(
        diff_size=DiffSizeConfig(max_diff_bytes=settings.max_diff_bytes),
        output_plan=OutputPlan.select(settings.mode, settings.only, settings.no_llm),
        capture_full_diff=settings.full_diff,
    )
    pipeline = ContributionPipeline(git_service, options, llm_client)
    errors = RunErrors()

    print(f"🔍 Scanning repositories under: {settings.root_path}")
    scanned = git_service.scan_repositories(settings.root_path)
    repositories = git_service.filter_repositories(
        scanned, settings.include_globs, settings.exclude_globs
    )
    if not repositories:
        print("✗ No git repositories found.", file=sys.stderr)
        return 1

    query = CommitQuery(
        emails=settings.emails,
        since=settings.since,
        until=settings.until,
        include_merges=settings.include_merges,
        max_commits=settings.max_commits,
    )
    selected = pipeline.collect_commits(repositories, query, errors)
    if not selected:
        print("✗ No commits found for this filter.", file=sys.stderr)
        return 1

    total_found = sum(len(item.commits) for item in selected)
    print(
        f"✓ Found {len(selected)} repos with {total_found} commits for "
        f"{', '.join(settings.emails)}"
    )
    if settings.no_llm:
        print("  --no-llm enabled: only raw.json + summary.md will be generated.")

    try:
        print("\n📝 Analyzing contributions...")
        result = pipeline.run(selected, errors)
        run_dir = OutputService().write_run(
            settings.output_dir,
            result,
            emails=settings.emails,
            since=settings.since,
            until=settings.until,
            scanned=scanned,
            meta=_build_meta(settings, llm_client),
        )
    except Exception as e:
        print(f"✗ Failed to generate summaries: {e}", file=sys.stderr)
        return 1

    print(f"\n✓ Done. {result.total_commits} commits summarized.")
    print(f"  Output directory: {run_dir}")
    return 0


def _build_meta(settings: RunSettings, llm_client: RotatingProviderClient | None) -> dict:
    return {
        "tool": {"name": "git-brag", "version": __version__},
        "args": {
            "path": str(settings.root_path),
            "emails": list(settings.emails),
            "since": settings.since,
            "until": settings.until,
            "include": list(settings.include_globs),
            "exclude": list(settings.exclude_globs),
            "outputDir": str(settings.output_dir),
            "mode": settings.mode.value,
            "only": settings.only.value if settings.only else None,
            "maxDiffBytes": settings.max_diff_bytes,
            "maxCommits": settings.max_commits,
            "includeMerges": settings.include_merges,
            "noLlm": settings.no_llm,
            "fullDiff": settings.full_diff,
        },
        "environment": {
            "provider": llm_client.provider.value if llm_client else None,
            "model": llm_client.model if llm_client else None,
            "apiKeyCount": llm_client.key_count if llm_client else 0,
        },
    }


if __name__ == "__main__":
    sys.exit(main())
