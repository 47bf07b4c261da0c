"""Git domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from git_brag.git.domain.value_objects import CommitType, DiffSnippet, TruncateReason

if TYPE_CHECKING:
    from git_brag.summarization.domain.value_objects import Classification


@dataclass(frozen=True)
class Commit:
    """Commit entity as listed by the repository log."""

    hash: str
    message: str
    date: datetime
    author_name: str
    author_email: str
    type_hint: CommitType = field(init=False)

    def __post_init__(self) -> None:
        """Derive the type hint once from the message prefix."""
        object.__setattr__(self, "type_hint", CommitType.from_message(self.message))

    @property
    def short_hash(self) -> str:
        return self.hash[:7]

    def to_dict(self) -> dict[str, Any]:
        return {
            "hash": self.hash,
            "message": self.message,
            "date": self.date.isoformat(),
            "authorName": self.author_name,
            "authorEmail": self.author_email,
            "typeHint": self.type_hint.value,
        }


@dataclass
class EnrichedCommit:
    """
    Commit carrying its repository, bounded diff and, later, its classification.

    Everything but ``analysis`` is fixed once the diff has been collected;
    ``analysis`` is attached exactly once by the classifier.
    """

    commit: Commit
    repo_name: str
    repo_path: Path
    diff: DiffSnippet = field(default_factory=DiffSnippet.empty)
    files: tuple[str, ...] = ()
    diff_error: str | None = None
    diff_full: str | None = None
    analysis: "Classification | None" = None

    @property
    def hash(self) -> str:
        return self.commit.hash

    @property
    def message(self) -> str:
        return self.commit.message

    @property
    def date(self) -> datetime:
        return self.commit.date

    @property
    def type_hint(self) -> CommitType:
        return self.commit.type_hint

    @property
    def diff_snippet(self) -> str:
        return self.diff.snippet

    @property
    def diff_bytes(self) -> int:
        return self.diff.bytes_used

    @property
    def truncated(self) -> bool:
        return self.diff.truncated

    @property
    def truncate_reason(self) -> TruncateReason | None:
        return self.diff.truncate_reason

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the raw run dump."""
        data = self.commit.to_dict()
        data.update(
            {
                "repoName": self.repo_name,
                "repoPath": str(self.repo_path),
                "diffSnippet": self.diff_snippet,
                "diffBytes": self.diff_bytes,
                "diffTruncated": self.truncated,
                "diffTruncateReason": (
                    self.truncate_reason.value if self.truncate_reason else None
                ),
                "diffError": self.diff_error,
                "files": list(self.files),
                "analysis": self.analysis.to_dict() if self.analysis else None,
            }
        )
        if self.diff_full is not None:
            data["diffFull"] = self.diff_full
        return data
