"""CLI entrypoints for hookrun commands."""

from __future__ import annotations

import argparse
import subprocess
import sys
from pathlib import Path

from .config import ConfigError, HookConfig, load_config
from .errors import FatalHookError
from .git.install import install_hooks
from .git.tracked import find_repo_root
from .logging import configure_logging
from .models import PRE_COMMIT, PREPARE_COMMIT_MSG
from .router import PREVIEW, OutputRouter, RouteTarget, resolve_target
from .runner import HookRunner

_MAX_PREPARE_ARGS = 3


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Log strategy selection and tool invocations to stderr.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hookrun",
        description="Dispatch tracked files to linters and build tools from git hooks.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--repo",
        default=".",
        help="Path inside the repository (defaults to current directory).",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Configuration file (defaults to .hookrun.yml at the repository root).",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write a DEBUG-level log of the run to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    pre_commit_parser = subparsers.add_parser(
        PRE_COMMIT,
        help="Run gating checks before a commit is recorded.",
    )
    _add_verbose_option(pre_commit_parser, suppress_default=True)

    prepare_parser = subparsers.add_parser(
        PREPARE_COMMIT_MSG,
        help="Append linter findings to the commit message as comments.",
    )
    _add_verbose_option(prepare_parser, suppress_default=True)
    prepare_parser.add_argument(
        "hook_args",
        nargs="*",
        metavar="ARG",
        help="Arguments git passes to the hook: message file, source, and commit.",
    )

    detect_parser = subparsers.add_parser(
        "detect",
        help="List the file categories found among tracked files.",
    )
    _add_verbose_option(detect_parser, suppress_default=True)

    install_parser = subparsers.add_parser(
        "install",
        help="Install hookrun as the repository's git hooks.",
    )
    _add_verbose_option(install_parser, suppress_default=True)
    install_parser.add_argument(
        "--force",
        action="store_true",
        help="Replace existing hooks that were not installed by hookrun.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for hookrun commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = Path(args.log_file).expanduser() if args.log_file else None
    configure_logging(verbose=bool(args.verbose), log_file=log_file)

    repo = find_repo_root(args.repo)

    if args.command == "install":
        try:
            written = install_hooks(repo, force=bool(getattr(args, "force", False)))
        except (FileExistsError, RuntimeError) as exc:
            parser.exit(1, f"{exc}\n")
        for path in written:
            print(f"Installed {_relativize(path)}")
        return

    try:
        config = load_config(Path(args.config) if args.config else repo, repo_root=repo)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    runner = HookRunner()

    if args.command == PRE_COMMIT:
        _run_phase(parser, runner, PRE_COMMIT, repo, config, RouteTarget(mode=PREVIEW))
    elif args.command == PREPARE_COMMIT_MSG:
        hook_args = list(args.hook_args)
        if len(hook_args) > _MAX_PREPARE_ARGS:
            parser.error(f"{PREPARE_COMMIT_MSG} takes at most {_MAX_PREPARE_ARGS} arguments")
        _run_phase(parser, runner, PREPARE_COMMIT_MSG, repo, config, resolve_target(hook_args))
    elif args.command == "detect":
        try:
            _, detected = runner.detect(repo, config)
        except (RuntimeError, ValueError, subprocess.CalledProcessError, OSError) as exc:
            parser.exit(1, f"hookrun detect failed: {exc}\n")
        if not detected:
            print("No recognised file categories")
        for name, files in detected.items():
            print(f"{name}: {len(files)} file(s)")
            for path in files:
                print(f"  {_display(path)}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_phase(
    parser: argparse.ArgumentParser,
    runner: HookRunner,
    phase: str,
    repo: Path,
    config: HookConfig,
    target: RouteTarget,
) -> None:
    router = OutputRouter(config.comment_char)
    try:
        report = runner.run(phase, repo, config=config)
    except FatalHookError as exc:
        partial = exc.report.output if exc.report is not None else ""
        router.emit(partial + exc.output, target)
        parser.exit(exc.exit_code, f"hookrun {phase} failed: {exc}\n")
    except (RuntimeError, ValueError, subprocess.CalledProcessError, OSError) as exc:
        parser.exit(1, f"hookrun {phase} failed: {exc}\n")
    router.emit(report.output, target)


def pre_commit_main(argv: list[str] | None = None) -> None:
    """Entrypoint for a git ``pre-commit`` hook symlinked to this script."""
    main([PRE_COMMIT, *(sys.argv[1:] if argv is None else argv)])


def prepare_commit_msg_main(argv: list[str] | None = None) -> None:
    """Entrypoint for a git ``prepare-commit-msg`` hook symlinked to this script."""
    main([PREPARE_COMMIT_MSG, *(sys.argv[1:] if argv is None else argv)])


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


def _display(path: str) -> str:
    # Undecodable file name bytes survive as surrogates; show them as U+FFFD.
    return path.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


if __name__ == "__main__":
    main(sys.argv[1:])
