"""Strategy selection and execution for detected categories."""

from __future__ import annotations

import os
import shutil
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .config import HookConfig
from .detectors.base import FileCategory
from .errors import FatalHookError
from .logging import get_logger
from .models import StageResult

FILES_PLACEHOLDER = "{files}"
FILE_PLACEHOLDER = "{file}"


@dataclass(frozen=True)
class ToolResult:
    """Exit status and combined stdout/stderr of one external command."""

    returncode: int
    output: str


def default_tool_runner(args: Sequence[str], *, cwd: Path) -> ToolResult:
    """Run ``args`` to completion and capture stdout and stderr together."""
    try:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=False,
            encoding="utf-8",
            errors="replace",
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
        )
    except OSError as exc:
        return ToolResult(returncode=127, output=f"{args[0]}: {exc.strerror or exc}\n")
    return ToolResult(returncode=completed.returncode, output=completed.stdout or "")


@dataclass
class DispatchContext:
    """Everything a strategy needs besides the matched files."""

    root: Path
    config: HookConfig
    runner: Callable[..., ToolResult] = default_tool_runner
    which: Callable[[str], Optional[str]] = shutil.which


class Strategy(ABC):
    """One way of servicing a category."""

    @abstractmethod
    def supports(self, context: DispatchContext) -> bool:
        """Return True when this strategy can run in the given context."""

    @abstractmethod
    def run(
        self, context: DispatchContext, category: FileCategory, files: Tuple[str, ...]
    ) -> StageResult:
        """Produce the diagnostic text for ``files``; may raise FatalHookError."""

    @abstractmethod
    def describe(self) -> str:
        """Short human-readable name used in logs and results."""


class OverrideScript(Strategy):
    """Repository-local or shared executable that replaces the generic tool."""

    def __init__(self, script_name: str, *, shared: bool = False) -> None:
        self.script_name = script_name
        self.shared = shared

    def path(self, context: DispatchContext) -> Optional[Path]:
        if self.shared:
            base = context.config.shared_hooks_dir
            if base is None:
                return None
            return Path(base) / self.script_name
        return context.root / self.script_name

    def supports(self, context: DispatchContext) -> bool:
        path = self.path(context)
        return path is not None and path.is_file() and os.access(path, os.X_OK)

    def run(
        self, context: DispatchContext, category: FileCategory, files: Tuple[str, ...]
    ) -> StageResult:
        path = self.path(context)
        if path is None:
            raise RuntimeError(f"{self.describe()} has no hooks directory configured")
        result = context.runner([str(path), *files], cwd=context.root)
        return StageResult(
            category=category.name,
            files=files,
            strategy=self.describe(),
            output=_terminate(result.output),
            returncode=result.returncode,
        )

    def describe(self) -> str:
        scope = "shared" if self.shared else "local"
        return f"{scope} override {self.script_name}"


class GenericTool(Strategy):
    """Runs one or more external commands found on PATH.

    ``{files}`` in an argument expands to every matched file; a command that
    contains ``{file}`` runs once per matched file. With ``fatal`` set, the
    first command exiting non-zero halts the pipeline.
    """

    def __init__(self, commands: Sequence[Sequence[str]], *, fatal: bool = False) -> None:
        if not commands or any(not command for command in commands):
            raise ValueError("GenericTool requires at least one non-empty command")
        self.commands: Tuple[Tuple[str, ...], ...] = tuple(tuple(c) for c in commands)
        self.fatal = fatal

    @property
    def executables(self) -> Tuple[str, ...]:
        names: List[str] = []
        for command in self.commands:
            if command[0] not in names:
                names.append(command[0])
        return tuple(names)

    def supports(self, context: DispatchContext) -> bool:
        return all(context.which(name) is not None for name in self.executables)

    def run(
        self, context: DispatchContext, category: FileCategory, files: Tuple[str, ...]
    ) -> StageResult:
        chunks: List[str] = []
        returncode = 0
        for argv in self._expand(files):
            result = context.runner(list(argv), cwd=context.root)
            chunks.append(_terminate(result.output))
            returncode = result.returncode
            if self.fatal and result.returncode != 0:
                raise FatalHookError(
                    f"{category.label}: `{' '.join(argv)}` exited with status {result.returncode}",
                    category=category.name,
                    output="".join(chunks),
                )
        return StageResult(
            category=category.name,
            files=files,
            strategy=self.describe(),
            output="".join(chunks),
            returncode=returncode,
        )

    def describe(self) -> str:
        return " + ".join(" ".join(command) for command in self.commands)

    def _expand(self, files: Tuple[str, ...]) -> Iterable[Tuple[str, ...]]:
        for command in self.commands:
            if FILE_PLACEHOLDER in command:
                for name in files:
                    yield tuple(name if arg == FILE_PLACEHOLDER else arg for arg in command)
                continue
            argv: List[str] = []
            for arg in command:
                if arg == FILES_PLACEHOLDER:
                    argv.extend(files)
                else:
                    argv.append(arg)
            yield tuple(argv)


class DegradedNotice(Strategy):
    """Fallback that reports which tools are missing and carries on."""

    def __init__(self, tools: Sequence[str] = ()) -> None:
        self.tools = tuple(tools)

    def supports(self, context: DispatchContext) -> bool:
        return True

    def run(
        self, context: DispatchContext, category: FileCategory, files: Tuple[str, ...]
    ) -> StageResult:
        missing = [tool for tool in self.tools if context.which(tool) is None] or list(self.tools)
        if missing:
            message = f"{', '.join(missing)} not found; skipping {category.label} checks\n"
        else:
            message = f"No checker configured; skipping {category.label} checks\n"
        return StageResult(
            category=category.name,
            files=files,
            strategy=self.describe(),
            output=message,
        )

    def describe(self) -> str:
        return "notice"


class RequiredScript(Strategy):
    """Terminal strategy for categories that cannot proceed without an override."""

    def __init__(self, script_name: str) -> None:
        self.script_name = script_name

    def supports(self, context: DispatchContext) -> bool:
        return True

    def run(
        self, context: DispatchContext, category: FileCategory, files: Tuple[str, ...]
    ) -> StageResult:
        locations = [str(context.root)]
        if context.config.shared_hooks_dir is not None:
            locations.append(str(context.config.shared_hooks_dir))
        raise FatalHookError(
            f"{category.label} files are tracked but no executable "
            f"'{self.script_name}' was found in {' or '.join(locations)}",
            category=category.name,
        )

    def describe(self) -> str:
        return f"required {self.script_name}"


@dataclass(frozen=True)
class Stage:
    """A category and its strategies for one phase, in priority order."""

    category: FileCategory
    strategies: Tuple[Strategy, ...] = field(default_factory=tuple)


class Dispatcher:
    """Runs exactly one strategy per stage: the first that supports the context."""

    def __init__(self) -> None:
        self.logger = get_logger("dispatch")

    def dispatch(
        self, stage: Stage, files: Tuple[str, ...], context: DispatchContext
    ) -> StageResult:
        for strategy in stage.strategies:
            if not strategy.supports(context):
                continue
            self.logger.debug("%s: using %s", stage.category.label, strategy.describe())
            return strategy.run(context, stage.category, files)
        self.logger.debug("%s: no applicable strategy", stage.category.label)
        return StageResult(category=stage.category.name, files=files, strategy="none")


def _terminate(text: str) -> str:
    if text and not text.endswith("\n"):
        return text + "\n"
    return text
