"""Tests for prepare-commit-msg output routing."""

from __future__ import annotations

from pathlib import Path

import pytest

from hookrun.router import (
    APPEND,
    PREVIEW,
    STDERR,
    OutputRouter,
    RouteTarget,
    comment_lines,
    resolve_target,
)

OUTPUT = "a.sh:1:1: warning\n\nb.yml:2:3: error\n"


def test_resolve_target_modes() -> None:
    assert resolve_target([]) == RouteTarget(mode=PREVIEW)
    assert resolve_target(["MSG"]) == RouteTarget(mode=APPEND, message_file=Path("MSG"))
    assert resolve_target(["MSG", "template"]).mode == APPEND
    assert resolve_target(["MSG", "commit", "HEAD"]).mode == APPEND
    assert resolve_target(["MSG", "message"]) == RouteTarget(mode=STDERR, message_file=Path("MSG"))


def test_comment_lines_prefixes_every_line() -> None:
    assert comment_lines(OUTPUT) == "# a.sh:1:1: warning\n#\n# b.yml:2:3: error\n"
    assert comment_lines(OUTPUT, ";") == "; a.sh:1:1: warning\n;\n; b.yml:2:3: error\n"
    assert comment_lines("") == ""


def test_preview_writes_raw_output_to_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    OutputRouter().emit(OUTPUT, RouteTarget(mode=PREVIEW))

    captured = capsys.readouterr()
    assert captured.out == OUTPUT
    assert captured.err == ""


def test_append_preserves_existing_message(tmp_path: Path) -> None:
    message = tmp_path / "COMMIT_EDITMSG"
    original = "Fix the thing\n\nLonger body.\n"
    message.write_text(original, encoding="utf-8")

    OutputRouter().emit(OUTPUT, resolve_target([str(message)]))

    content = message.read_text(encoding="utf-8")
    assert content.startswith(original)
    appended = content[len(original):].splitlines()
    assert appended == ["# a.sh:1:1: warning", "#", "# b.yml:2:3: error"]
    assert all(line.startswith("#") for line in appended)


def test_append_adds_newline_when_message_lacks_one(tmp_path: Path) -> None:
    message = tmp_path / "COMMIT_EDITMSG"
    message.write_text("Subject", encoding="utf-8")

    OutputRouter().emit("warn\n", resolve_target([str(message)]))

    assert message.read_text(encoding="utf-8") == "Subject\n# warn\n"


def test_message_mode_leaves_file_untouched(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    message = tmp_path / "COMMIT_EDITMSG"
    message.write_text("Subject\n", encoding="utf-8")

    OutputRouter().emit(OUTPUT, resolve_target([str(message), "message"]))

    assert message.read_text(encoding="utf-8") == "Subject\n"
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == "# a.sh:1:1: warning\n#\n# b.yml:2:3: error\n"


def test_empty_output_writes_nothing(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    message = tmp_path / "COMMIT_EDITMSG"
    message.write_text("Subject", encoding="utf-8")
    router = OutputRouter()

    for target in (resolve_target([]), resolve_target([str(message)]), resolve_target([str(message), "message"])):
        router.emit("", target)

    assert message.read_text(encoding="utf-8") == "Subject"
    assert capsys.readouterr() == ("", "")
