"""Checker service for coordinating a strict implementation check run.

This module provides the CheckerService, which discovers source files, runs
the language adapter over them and collects diagnostics and per-file errors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from strictimpl.adapters import LanguageAdapter, TypeScriptAdapter
from strictimpl.core.config import StrictImplConfig, get_config
from strictimpl.core.models import Diagnostic

logger = logging.getLogger(__name__)


@dataclass
class CheckResult:
    """Result of a check run."""

    source_path: Path
    files_checked: int = 0
    diagnostics: list[Diagnostic] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    failed_files: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """Check if every file was checked without error."""
        return len(self.errors) == 0

    @property
    def has_diagnostics(self) -> bool:
        return len(self.diagnostics) > 0


class CheckerService:
    """Service for checking a source tree.

    Runs the TypeScript adapter over a directory (or single file) and turns
    its per-file reports into a single result. A file whose check fails is
    reported as an error and contributes no diagnostics; other files are
    unaffected.
    """

    def __init__(
        self,
        config: StrictImplConfig | None = None,
        adapter: LanguageAdapter | None = None,
    ) -> None:
        """Initialize checker service.

        Args:
            config: Runner configuration; defaults to the global config.
            adapter: Language adapter to run; defaults to TypeScriptAdapter.
        """
        self._config = config or get_config()
        self._adapter = adapter or TypeScriptAdapter(self._config)

    def check_path(self, source_path: Path) -> CheckResult:
        """Check all source files under a path.

        Args:
            source_path: Root directory of source code, or a single file.

        Returns:
            CheckResult with diagnostics (ordered by file, then position)
            and any errors.
        """
        result = CheckResult(source_path=source_path)

        if not source_path.exists():
            result.errors.append(f"Source path does not exist: {source_path}")
            return result

        try:
            reports = self._adapter.analyze(source_path)
        except Exception as e:
            logger.exception(f"Check of {source_path} failed")
            result.errors.append(f"Error checking {self._adapter.language_name}: {e}")
            return result

        if not reports:
            result.errors.append("No TypeScript source files found")
            return result

        for report in reports:
            result.files_checked += 1
            if report.success:
                result.diagnostics.extend(report.diagnostics)
            else:
                result.failed_files.append(report.file_path)
                result.errors.append(f"{report.file_path}: {report.error}")

        logger.info(
            f"Checked {result.files_checked} files: "
            f"{len(result.diagnostics)} diagnostics, {len(result.errors)} errors"
        )
        return result
