"""Configuration loading for hookrun (.hookrun.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import yaml

CONFIG_FILENAME = ".hookrun.yml"
DEFAULT_COMMENT_CHAR = "#"
DEFAULT_SHARED_HOOKS_DIR = Path("~/.hookrun/hooks")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class HookConfig:
    """Represents the settings defined in .hookrun.yml."""

    root: Path
    comment_char: str = DEFAULT_COMMENT_CHAR
    shared_hooks_dir: Optional[Path] = None
    disabled: List[str] = field(default_factory=list)
    commands: Dict[str, Tuple[Tuple[str, ...], ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.shared_hooks_dir is None:
            self.shared_hooks_dir = DEFAULT_SHARED_HOOKS_DIR.expanduser()

    def is_enabled(self, category: str) -> bool:
        return category.lower() not in {name.lower() for name in self.disabled}

    def commands_for(self, category: str) -> Optional[Tuple[Tuple[str, ...], ...]]:
        """Return the configured generic commands for ``category`` if any."""
        return self.commands.get(category.lower())


def load_config(config_path: Path, repo_root: Path | None = None) -> HookConfig:
    """Load configuration from disk.

    ``config_path`` may be the repository root or the config file itself.
    A missing file yields the defaults. ``repo_root`` anchors a relative
    ``shared_hooks_dir``; without it the config file's directory is used.
    """
    config_file = _resolve_config_path(config_path)
    root = Path(repo_root).resolve() if repo_root is not None else config_file.parent.resolve()

    if not config_file.exists():
        return HookConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    comment_char = _as_str(data.get("comment_char")) or DEFAULT_COMMENT_CHAR
    comment_char = comment_char.strip() or DEFAULT_COMMENT_CHAR

    shared_dir_str = _as_str(data.get("shared_hooks_dir"))
    shared_hooks_dir = None
    if shared_dir_str:
        shared_hooks_dir = Path(shared_dir_str).expanduser()
        if not shared_hooks_dir.is_absolute():
            shared_hooks_dir = root / shared_hooks_dir

    disabled = [name.lower() for name in _as_str_list(data.get("disabled"))]

    commands: Dict[str, Tuple[Tuple[str, ...], ...]] = {}
    for category, raw in _as_dict(data.get("commands")).items():
        parsed = _as_command_list(raw)
        if parsed is None:
            raise ConfigError(
                f"commands.{category} must be a command or a list of commands"
            )
        commands[str(category).lower()] = parsed

    return HookConfig(
        root=root,
        comment_char=comment_char,
        shared_hooks_dir=shared_hooks_dir,
        disabled=disabled,
        commands=commands,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}

    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_command_list(value: Any) -> Optional[Tuple[Tuple[str, ...], ...]]:
    # Accepts "tool --flag", ["tool", "--flag"] or [["tool"], ["other", "x"]].
    if isinstance(value, str):
        argv = tuple(value.split())
        return (argv,) if argv else None
    if not isinstance(value, Sequence) or not value:
        return None
    if all(isinstance(item, str) for item in value):
        return (tuple(str(item) for item in value),)
    commands: List[Tuple[str, ...]] = []
    for item in value:
        if isinstance(item, str):
            argv = tuple(item.split())
        elif isinstance(item, Sequence):
            argv = tuple(str(part) for part in item if isinstance(part, (str, int, float)))
        else:
            return None
        if not argv:
            return None
        commands.append(argv)
    return tuple(commands)


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []
