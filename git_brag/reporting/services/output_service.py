"""Writing of run artifacts to a timestamped output directory."""

import json
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

from git_brag.git.domain.value_objects import RepositoryRef
from git_brag.logging import get_logger
from git_brag.pipeline.domain.value_objects import PipelineResult
from git_brag.reporting.services.markdown_service import MarkdownService

logger = get_logger(__name__)


def format_run_directory_name(timestamp: datetime) -> str:
    """Name a run directory like ``2025-01-31__142305``."""
    return timestamp.strftime("%Y-%m-%d__%H%M%S")


class OutputService:
    """Writes the artifacts selected by a run's output plan."""

    def __init__(self, markdown_service: MarkdownService | None = None) -> None:
        self._markdown_service = markdown_service or MarkdownService()

    def write_run(
        self,
        output_base_dir: Path,
        result: PipelineResult,
        *,
        emails: Sequence[str],
        since: str | None = None,
        until: str | None = None,
        scanned: Sequence[RepositoryRef] = (),
        meta: dict[str, Any] | None = None,
        timestamp: datetime | None = None,
    ) -> Path:
        """
        Create the run directory and write every planned artifact into it.

        ``raw.json`` and ``meta.json`` are always written; Markdown documents
        follow the result's output plan.

        Args:
            output_base_dir: Directory holding one sub-directory per run
            result: Pipeline output
            emails: Author emails of the run
            since: Optional lower date bound
            until: Optional upper date bound
            scanned: Every repository found before filtering
            meta: Run metadata for ``meta.json``
            timestamp: Run time. Defaults to now

        Returns:
            Path of the run directory
        """
        timestamp = timestamp or datetime.now()
        run_dir = output_base_dir / format_run_directory_name(timestamp)
        run_dir.mkdir(parents=True, exist_ok=True)

        self._write_json(run_dir / "raw.json", result.to_raw_dict(scanned))
        run_meta = dict(meta or {})
        run_meta["run"] = {"timestamp": timestamp.isoformat(), "outputDir": str(run_dir)}
        self._write_json(run_dir / "meta.json", run_meta)

        plan = result.output_plan
        if plan.summary:
            self._write_text(
                run_dir / "summary.md",
                self._markdown_service.build_summary_doc(
                    result, emails, since, until, generated_at=timestamp
                ),
            )
        if plan.brag:
            self._write_text(run_dir / "brag.md", self._markdown_service.build_brag_doc(result, emails))
        if plan.cv and result.cv is not None:
            self._write_text(run_dir / "cv.md", result.cv.cv_md)
            self._write_text(run_dir / "cv_bullets.md", result.cv.cv_bullets_md)
        if plan.perf and result.performance_report is not None:
            self._write_text(run_dir / "performance.md", result.performance_report)

        return run_dir

    @staticmethod
    def _write_json(path: Path, payload: dict[str, Any]) -> None:
        with path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
            f.write("\n")

    @staticmethod
    def _write_text(path: Path, content: str) -> None:
        logger.debug("Writing %s", path)
        with path.open("w", encoding="utf-8") as f:
            f.write(content)
            if not content.endswith("\n"):
                f.write("\n")
