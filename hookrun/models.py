"""Core data models shared across hookrun components."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

PRE_COMMIT = "pre-commit"
PREPARE_COMMIT_MSG = "prepare-commit-msg"

PHASES: Tuple[str, ...] = (PRE_COMMIT, PREPARE_COMMIT_MSG)


@dataclass(frozen=True)
class TrackedFileSet:
    """Snapshot of the paths git knows about, relative to the repository root."""

    root: Path
    paths: Tuple[str, ...]

    def absolute(self, rel_path: str) -> Path:
        return self.root / rel_path


@dataclass(frozen=True)
class StageResult:
    """Outcome of dispatching a single category."""

    category: str
    files: Tuple[str, ...]
    strategy: str
    output: str = ""
    returncode: int = 0


@dataclass
class HookReport:
    """Ordered stage results for one hook invocation."""

    phase: str
    results: List[StageResult] = field(default_factory=list)

    @property
    def output(self) -> str:
        """Raw concatenation of every stage's diagnostic text."""
        return "".join(result.output for result in self.results)

    def result_for(self, category: str) -> Optional[StageResult]:
        for result in self.results:
            if result.category == category:
                return result
        return None
