"""Value objects for Git domain."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class CommitType(str, Enum):
    """Classification bucket of a commit."""

    FEATURE = "feature"
    FIX = "fix"
    TECH_IMPROVEMENT = "tech-improvement"
    DOCS = "docs"
    CHORE = "chore"
    OTHER = "other"

    @classmethod
    def from_message(cls, message: str) -> "CommitType":
        """
        Derive a type hint from a conventional-commit style message prefix.

        Args:
            message: Commit subject line

        Returns:
            FEATURE, FIX or TECH_IMPROVEMENT for known prefixes, OTHER otherwise
        """
        lowered = message.lower()
        if lowered.startswith("feat"):
            return cls.FEATURE
        if lowered.startswith("fix"):
            return cls.FIX
        if lowered.startswith(("perf", "refactor")):
            return cls.TECH_IMPROVEMENT
        return cls.OTHER

    @classmethod
    def parse(cls, value: object) -> "CommitType":
        """Coerce an untrusted value to a CommitType, defaulting to OTHER."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


class TruncateReason(str, Enum):
    """Which budget cut a diff short."""

    PER_COMMIT = "per-commit"
    PER_REPO = "per-repo"


TRUNCATION_MARKER = "/* TRUNCATED: exceeded per-commit or per-repo diff limit */"


@dataclass(frozen=True)
class RepositoryRef:
    """A git repository found on disk."""

    name: str
    path: Path


@dataclass(frozen=True)
class CommitQuery:
    """Filters applied when listing commits of a repository."""

    emails: tuple[str, ...] = ()
    since: str | None = None
    until: str | None = None
    include_merges: bool = False
    max_commits: int | None = 200


@dataclass(frozen=True)
class DiffSizeConfig:
    """Byte budgets applied while collecting diffs."""

    max_diff_bytes: int = 1_500_000  # Per repository
    per_commit_max_bytes: int = 12_000

    def __post_init__(self) -> None:
        """Validate the budgets."""
        if self.max_diff_bytes < 0:
            raise ValueError("max_diff_bytes cannot be negative")
        if self.per_commit_max_bytes <= 0:
            raise ValueError("per_commit_max_bytes must be positive")


@dataclass(frozen=True)
class DiffSnippet:
    """A possibly truncated view of a commit diff."""

    snippet: str
    bytes_used: int
    truncated: bool = False
    truncate_reason: TruncateReason | None = None

    @classmethod
    def empty(cls) -> "DiffSnippet":
        """Snippet for a commit without any diff content."""
        return cls(snippet="", bytes_used=0)

    @classmethod
    def exhausted(cls) -> "DiffSnippet":
        """Snippet for a commit reached after the repository budget ran out."""
        return cls(
            snippet="",
            bytes_used=0,
            truncated=True,
            truncate_reason=TruncateReason.PER_REPO,
        )


@dataclass(frozen=True)
class CommitDiff:
    """Full diff text of a single commit."""

    commit_hash: str
    diff_content: str
