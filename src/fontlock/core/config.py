"""Configuration models used by the font locking pipeline.

FontDefaults

`display` (`str`)
: Default `font-display` value forwarded to the catalog stylesheet endpoint
  when a declaration does not provide one.

`preconnect` (`bool`)
: Whether remote selections ask the renderer to emit preconnect hints for the
  catalog hosts. Surfaced as `FontSelection.preconnect`.

FontLockConfig

`project_dir` (`Path`)
: Project root. Relative paths below resolve against it, and manifest CSS
  paths are recorded relative to it.

`use_locked_fonts` (`bool`)
: Let the selector built by `CacheSelector.from_config` direct renders to the
  locally cached assets. When `False` every render goes to the remote catalog.

`fonts_dir` (`Path`)
: Directory receiving font binaries and the combined per-family stylesheet.
  Defaults to `assets/fonts`.

`manifest_file` (`Path`)
: JSON manifest written by `fontlock lock`. Defaults to `assets/fonts.json`.

`api_key` (`str | None`)
: Catalog listing credential, required by `search` and `import`. Falls back to
  the `FONTLOCK_API_KEY` environment variable.

`cache_ttl` (`int`)
: Seconds a catalog listing stays cached in memory.

`template_dirs` (`list[Path]`)
: Directories scanned for declarations. Defaults to whichever of `templates/`
  and `views/` exist in the project.

`template_suffixes` (`list[str]`)
: File suffixes treated as templates.

`keyword` (`str`)
: Name of the template function declaring a font.

`public_prefix` (`str`)
: URL prefix prepended to manifest CSS paths when rendering local links.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
import yaml

from fontlock.core.exceptions import ConfigurationError


API_KEY_ENV = "FONTLOCK_API_KEY"
CONFIG_FILENAMES = ("fontlock.yml", "fontlock.yaml")
DEFAULT_TEMPLATE_SUFFIXES = (".html", ".j2", ".jinja", ".jinja2", ".twig")
DEFAULT_TEMPLATE_DIRS = ("templates", "views")


class FontDefaults(BaseModel):
    """Defaults applied to declarations that omit optional arguments."""

    model_config = ConfigDict(extra="forbid")

    display: str = Field(default="swap", description="Default font-display value")
    preconnect: bool = Field(default=True, description="Emit preconnect hints")


class FontLockConfig(BaseModel):
    """Settings shared by the CLI commands and the render-time selector."""

    model_config = ConfigDict(extra="forbid")

    project_dir: Path = Field(default_factory=Path.cwd)
    use_locked_fonts: bool = False
    fonts_dir: Path = Path("assets/fonts")
    manifest_file: Path = Path("assets/fonts.json")
    api_key: str | None = None
    cache_ttl: int = Field(default=3600, ge=0)
    template_dirs: list[Path] = Field(default_factory=list)
    template_suffixes: list[str] = Field(default_factory=lambda: list(DEFAULT_TEMPLATE_SUFFIXES))
    keyword: str = "gfonts"
    public_prefix: str = "/"
    defaults: FontDefaults = Field(default_factory=FontDefaults)

    @model_validator(mode="after")
    def resolve_paths(self) -> FontLockConfig:
        """Anchor relative paths on the project directory."""
        self.project_dir = self.project_dir.expanduser()
        self.fonts_dir = self._anchor(self.fonts_dir)
        self.manifest_file = self._anchor(self.manifest_file)
        if self.template_dirs:
            self.template_dirs = [self._anchor(entry) for entry in self.template_dirs]
        else:
            candidates = (self.project_dir / name for name in DEFAULT_TEMPLATE_DIRS)
            self.template_dirs = [entry for entry in candidates if entry.is_dir()]
        self.template_suffixes = [
            suffix if suffix.startswith(".") else f".{suffix}" for suffix in self.template_suffixes
        ]
        return self

    def _anchor(self, path: Path) -> Path:
        path = path.expanduser()
        return path if path.is_absolute() else self.project_dir / path


def _find_config_file(project_dir: Path) -> Path | None:
    for name in CONFIG_FILENAMES:
        candidate = project_dir / name
        if candidate.is_file():
            return candidate
    return None


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigurationError(f"Unable to read configuration file '{path}': {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in configuration file '{path}': {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ConfigurationError(f"Configuration file '{path}' must contain a mapping.")
    return payload


def load_config(
    path: Path | None = None,
    *,
    project_dir: Path | None = None,
    **overrides: Any,
) -> FontLockConfig:
    """Load settings from YAML, the environment, and explicit overrides.

    Without ``path`` the project directory is searched for ``fontlock.yml`` or
    ``fontlock.yaml``; a missing file simply yields the defaults.
    """
    base_dir = (project_dir or Path.cwd()).expanduser()
    config_path = path or _find_config_file(base_dir)
    data: dict[str, Any] = _read_yaml(config_path) if config_path is not None else {}

    if project_dir is not None:
        data["project_dir"] = project_dir
    elif "project_dir" in data:
        declared = Path(str(data["project_dir"])).expanduser()
        anchor = config_path.parent if config_path is not None else base_dir
        data["project_dir"] = declared if declared.is_absolute() else anchor / declared
    elif config_path is not None:
        data["project_dir"] = config_path.parent
    else:
        data["project_dir"] = base_dir

    if not data.get("api_key"):
        env_key = os.environ.get(API_KEY_ENV)
        if env_key:
            data["api_key"] = env_key

    data.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return FontLockConfig.model_validate(data)
    except ValidationError as exc:
        source = f" in '{config_path}'" if config_path is not None else ""
        raise ConfigurationError(f"Invalid configuration{source}: {exc}") from exc


__all__ = [
    "API_KEY_ENV",
    "CONFIG_FILENAMES",
    "DEFAULT_TEMPLATE_SUFFIXES",
    "FontDefaults",
    "FontLockConfig",
    "load_config",
]
