"""Configuration management for diffparser."""

from __future__ import annotations

from dataclasses import dataclass, field
from fnmatch import fnmatch
from pathlib import Path
from typing import Any

import yaml  # type: ignore

CONFIG_FILENAME = ".diffparser.yml"

_DEFAULT_CONFIG: dict[str, dict[str, Any]] = {
    "source": {
        "mode": "worktree",
        "target_branch": "main",
        "context_lines": 3,
    },
    "exclusions": {
        "paths": [],
    },
    "reporting": {
        "format": ["json"],
        "output_dir": None,
    },
}


@dataclass
class DiffParserConfig:
    """Full diffparser configuration loaded from `.diffparser.yml`."""

    mode: str = "worktree"
    target_branch: str = "main"
    context_lines: int = 3
    excluded_paths: list[str] = field(default_factory=list)
    report_formats: list[str] = field(default_factory=lambda: ["json"])
    output_dir: str | None = None

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> DiffParserConfig:
        """Load configuration from a YAML file, falling back to defaults.

        Search order:
        1. Explicit ``config_path`` argument
        2. ``.diffparser.yml`` in the current directory
        3. Built-in defaults

        Keys left empty in the file keep their default value.
        """
        user: dict[str, Any] = {}
        path = _find_config_file(config_path)
        if path is not None:
            with open(path, encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
            if isinstance(loaded, dict):
                user = loaded

        return cls._from_sections(
            source=_section(user, "source"),
            exclusions=_section(user, "exclusions"),
            reporting=_section(user, "reporting"),
        )

    @classmethod
    def _from_sections(
        cls,
        source: dict[str, Any],
        exclusions: dict[str, Any],
        reporting: dict[str, Any],
    ) -> DiffParserConfig:
        """Build config from the per-section settings of a config file."""
        return cls(
            mode=source["mode"],
            target_branch=str(source["target_branch"]),
            context_lines=int(source["context_lines"]),
            excluded_paths=_as_list(exclusions["paths"]),
            report_formats=_as_list(reporting["format"]),
            output_dir=reporting["output_dir"],
        )

    def is_path_excluded(self, file_path: str) -> bool:
        """Check if a file path is excluded by glob patterns."""
        return any(fnmatch(file_path, pattern) for pattern in self.excluded_paths)


def _find_config_file(config_path: str | Path | None) -> Path | None:
    """Return the first existing config file in search order."""
    candidates = [Path(config_path)] if config_path else []
    candidates.append(Path(CONFIG_FILENAME))
    return next((p for p in candidates if p.exists()), None)


def _section(user: dict[str, Any], name: str) -> dict[str, Any]:
    """Overlay one section of the user's config on its defaults.

    An empty section or key (``None`` in YAML) means "use the default".
    """
    settings = dict(_DEFAULT_CONFIG[name])
    overrides = user.get(name)
    if isinstance(overrides, dict):
        settings.update({k: v for k, v in overrides.items() if v is not None})
    return settings


def _as_list(value: Any) -> list[str]:
    """Accept a single YAML scalar where a list is expected."""
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return [str(value)]
