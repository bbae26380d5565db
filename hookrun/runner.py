"""Pipeline orchestration for the pre-commit and prepare-commit-msg phases."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .config import HookConfig, load_config
from .detectors import CategoryDetector, FileCategory, discover_categories
from .dispatch import DispatchContext, Dispatcher, ToolResult, default_tool_runner
from .errors import FatalHookError
from .git.tracked import TrackedFiles
from .logging import get_logger
from .models import PHASES, HookReport, TrackedFileSet
from .stages import build_stages


class HookRunner:
    """Detects categories in a repository and dispatches each phase's stages."""

    def __init__(
        self,
        tracked_files: TrackedFiles | None = None,
        detector: CategoryDetector | None = None,
        dispatcher: Dispatcher | None = None,
        categories: Optional[Iterable[FileCategory]] = None,
        tool_runner: Callable[..., ToolResult] | None = None,
        which: Callable[[str], Optional[str]] | None = None,
    ) -> None:
        self.tracked_files = tracked_files or TrackedFiles()
        self.detector = detector or CategoryDetector()
        self.dispatcher = dispatcher or Dispatcher()
        self._category_overrides = list(categories) if categories is not None else None
        self._tool_runner = tool_runner or default_tool_runner
        self._which = which
        self.logger = get_logger("runner")

    def load_config(self, repo_path: Path, config_path: Path | None = None) -> HookConfig:
        return load_config(config_path or repo_path, repo_root=repo_path)

    def categories(self, config: HookConfig) -> List[FileCategory]:
        if self._category_overrides is not None:
            return [c for c in self._category_overrides if config.is_enabled(c.name)]
        return discover_categories(config.disabled)

    def detect(
        self,
        repo_path: Path,
        config: HookConfig,
        categories: Optional[List[FileCategory]] = None,
    ) -> Tuple[TrackedFileSet, Dict[str, Tuple[str, ...]]]:
        """Return the tracked file snapshot and the files matched per category."""
        if categories is None:
            categories = self.categories(config)
        file_set = self.tracked_files.list(repo_path)
        self.logger.debug("git reports %d tracked files", len(file_set.paths))
        return file_set, self.detector.detect(file_set, categories)

    def run(
        self,
        phase: str,
        repo_path: Path | str,
        *,
        config: HookConfig | None = None,
    ) -> HookReport:
        """Run every stage of ``phase`` and return the collected report.

        Raises FatalHookError when a fatal stage fails; its ``report`` holds
        the results of the stages that completed before it.
        """
        if phase not in PHASES:
            raise ValueError(f"Unknown hook phase: {phase}")

        repo = Path(repo_path).expanduser().resolve()
        config = config or self.load_config(repo)
        self.logger.info("Running %s in %s", phase, repo)

        categories = self.categories(config)
        _, detected = self.detect(repo, config, categories)
        stages = build_stages(phase, categories, config)
        context = self._context(repo, config)

        report = HookReport(phase=phase)
        for stage in stages:
            files = detected.get(stage.category.name)
            if not files:
                continue
            try:
                result = self.dispatcher.dispatch(stage, files, context)
            except FatalHookError as exc:
                self.logger.debug("%s halted at %s", phase, stage.category.label)
                exc.report = report
                raise
            report.results.append(result)
        return report

    def _context(self, repo: Path, config: HookConfig) -> DispatchContext:
        context = DispatchContext(root=repo, config=config, runner=self._tool_runner)
        if self._which is not None:
            context.which = self._which
        return context
