"""Routes collected hook output to stdout, stderr, or the commit message file."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, TextIO

from .config import DEFAULT_COMMENT_CHAR

PREVIEW = "preview"
APPEND = "append"
STDERR = "stderr"

MESSAGE_SENTINEL = "message"


@dataclass(frozen=True)
class RouteTarget:
    """Where prepare-commit-msg output goes, derived from the hook arguments."""

    mode: str
    message_file: Optional[Path] = None


def resolve_target(args: Sequence[str]) -> RouteTarget:
    """Interpret git's ``prepare-commit-msg`` argument list.

    No arguments previews on stdout. A message file appends to it unless the
    second argument is ``message`` (``git commit -m``), which goes to stderr.
    """
    if not args:
        return RouteTarget(mode=PREVIEW)
    message_file = Path(args[0])
    if len(args) > 1 and args[1] == MESSAGE_SENTINEL:
        return RouteTarget(mode=STDERR, message_file=message_file)
    return RouteTarget(mode=APPEND, message_file=message_file)


def comment_lines(text: str, comment_char: str = DEFAULT_COMMENT_CHAR) -> str:
    """Prefix every line of ``text`` with the comment marker."""
    if not text:
        return ""
    lines = []
    for line in text.splitlines():
        lines.append(f"{comment_char} {line}" if line.strip() else comment_char)
    return "\n".join(lines) + "\n"


class OutputRouter:
    """Emits the concatenated stage output according to a ``RouteTarget``."""

    def __init__(
        self,
        comment_char: str = DEFAULT_COMMENT_CHAR,
        *,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self.comment_char = comment_char
        self._stdout = stdout
        self._stderr = stderr

    def emit(self, output: str, target: RouteTarget) -> None:
        if not output:
            return

        if target.mode == PREVIEW:
            stream = self._stdout or sys.stdout
            stream.write(output)
            stream.flush()
        elif target.mode == STDERR:
            stream = self._stderr or sys.stderr
            stream.write(comment_lines(output, self.comment_char))
            stream.flush()
        elif target.mode == APPEND:
            if target.message_file is None:
                raise ValueError("append mode requires a message file")
            self._append(target.message_file, comment_lines(output, self.comment_char))
        else:
            raise ValueError(f"Unknown output mode: {target.mode}")

    @staticmethod
    def _append(path: Path, text: str) -> None:
        prefix = ""
        if path.exists():
            with path.open("rb") as handle:
                handle.seek(0, 2)
                if handle.tell():
                    handle.seek(-1, 2)
                    if handle.read(1) != b"\n":
                        prefix = "\n"
        with path.open("a", encoding="utf-8") as handle:
            handle.write(prefix + text)
