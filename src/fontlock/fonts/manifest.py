"""Build, persist and prune the font lock manifest."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from contextlib import suppress
from dataclasses import dataclass, field
from datetime import datetime
import json
import logging
from pathlib import Path
from typing import Any

from fontlock.core.exceptions import FetchError, ManifestError
from fontlock.fonts.fetcher import AssetFetcher
from fontlock.fonts.logging import FontPipelineLogger
from fontlock.fonts.scanner import DEFAULT_STYLES, DEFAULT_WEIGHTS, FontDeclaration
from fontlock.fonts.variants import sanitize_family


logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]


@dataclass(slots=True)
class FontManifestEntry:
    weights: list[int]
    styles: list[str]
    files: list[str]
    css: str
    monospace: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "weights": list(self.weights),
            "styles": list(self.styles),
            "files": list(self.files),
            "css": self.css,
            "monospace": self.monospace,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> FontManifestEntry:
        return cls(
            weights=[int(weight) for weight in payload.get("weights") or []],
            styles=[str(style) for style in payload.get("styles") or []],
            files=[str(name) for name in payload.get("files") or []],
            css=str(payload.get("css", "")),
            monospace=bool(payload.get("monospace", False)),
        )


@dataclass(slots=True)
class Manifest:
    """The persisted lock state, keyed by family name as declared."""

    fonts: dict[str, FontManifestEntry] = field(default_factory=dict)
    generated_at: str = ""
    locked: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "locked": self.locked,
            "generated_at": self.generated_at,
            "fonts": {name: entry.to_dict() for name, entry in self.fonts.items()},
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Manifest:
        fonts = payload.get("fonts", {})
        if not isinstance(fonts, Mapping):
            raise ManifestError("Manifest 'fonts' must be an object.")
        entries: dict[str, FontManifestEntry] = {}
        for name, entry in fonts.items():
            if not isinstance(entry, Mapping):
                raise ManifestError(f"Manifest entry for '{name}' must be an object.")
            entries[str(name)] = FontManifestEntry.from_dict(entry)
        return cls(
            fonts=entries,
            generated_at=str(payload.get("generated_at", "")),
            locked=bool(payload.get("locked", True)),
        )


@dataclass(slots=True)
class PruneResult:
    removed: list[str] = field(default_factory=list)
    kept: list[str] = field(default_factory=list)
    deleted_files: list[Path] = field(default_factory=list)


def _now() -> datetime:
    return datetime.now().astimezone()


def relative_css_path(css_path: Path, project_dir: Path) -> str:
    """Return ``css_path`` relative to the project, or absolute outside it."""
    try:
        return css_path.resolve().relative_to(project_dir.resolve()).as_posix()
    except ValueError:
        return css_path.resolve().as_posix()


def _declaration_fields(
    name: str, declaration: FontDeclaration | Mapping[str, Any]
) -> tuple[list[int], list[str], str | None, bool]:
    if isinstance(declaration, FontDeclaration):
        weights: Iterable[Any] = declaration.weights
        styles: Iterable[Any] = declaration.styles
        display = declaration.display
        monospace = declaration.monospace
    else:
        weights = declaration.get("weights") or DEFAULT_WEIGHTS
        styles = declaration.get("styles") or DEFAULT_STYLES
        display = declaration.get("display")
        monospace = bool(declaration.get("monospace", False))
    try:
        weight_values = [int(weight) for weight in weights]
    except (TypeError, ValueError) as exc:
        raise FetchError(f'Invalid weights declared for font "{name}": {exc}', family=name) from exc
    return (
        weight_values or [int(weight) for weight in DEFAULT_WEIGHTS],
        [str(style) for style in styles] or list(DEFAULT_STYLES),
        display,
        monospace,
    )


def _check_naming_collisions(names: Iterable[str]) -> None:
    seen: dict[str, str] = {}
    for name in names:
        key = sanitize_family(name)
        other = seen.setdefault(key, name)
        if other != name:
            raise ManifestError(
                f'Fonts "{other}" and "{name}" would both be stored as "{key}"; '
                "declare the family under a single name."
            )


class ManifestBuilder:
    """Resolve every declared family and persist the resulting manifest.

    A lock run is all-or-nothing: the first failing family aborts the build
    and the manifest on disk is left untouched.

    Families sharing a sanitized name are rejected before anything is
    downloaded, since they would overwrite each other's files.
    """

    def __init__(
        self,
        fetcher: AssetFetcher,
        manifest_file: Path,
        project_dir: Path,
        *,
        clock: Callable[[], datetime] | None = None,
        default_display: str = "swap",
        logger: FontPipelineLogger | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.manifest_file = Path(manifest_file)
        self.project_dir = Path(project_dir)
        self.clock = clock or _now
        self.default_display = default_display
        self.logger = logger or fetcher.logger

    def build(
        self,
        declarations: Mapping[str, FontDeclaration | Mapping[str, Any]],
        progress: ProgressCallback | None = None,
    ) -> Manifest:
        _check_naming_collisions(declarations)
        total = len(declarations)
        fonts: dict[str, FontManifestEntry] = {}
        for index, (name, declaration) in enumerate(declarations.items(), start=1):
            if progress is not None:
                progress(index, total, name)
            weights, styles, display, monospace = _declaration_fields(name, declaration)
            try:
                resolution = self.fetcher.resolve(
                    name,
                    weights,
                    styles,
                    display or self.default_display,
                    monospace,
                )
            except FetchError as exc:
                raise FetchError(
                    f'Failed to download font "{name}": {exc}', url=exc.url, family=name
                ) from exc

            locked_weights = resolution.downloaded_weights
            if not locked_weights and resolution.files:
                locked_weights = sorted(set(weights))
            fonts[name] = FontManifestEntry(
                weights=locked_weights,
                styles=styles,
                files=list(resolution.files),
                css=relative_css_path(resolution.css_path, self.project_dir),
                monospace=monospace,
            )
            self.logger.debug(
                "Locked %s (%d files, weights %s)", name, len(resolution.files), locked_weights
            )

        manifest = Manifest(
            fonts=fonts,
            generated_at=self.clock().isoformat(timespec="seconds"),
        )
        save_manifest(manifest, self.manifest_file)
        return manifest


def dump_manifest(manifest: Manifest) -> str:
    """Serialize the manifest as indented JSON with literal slashes."""
    try:
        return json.dumps(manifest.to_dict(), indent=4, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise ManifestError(f"Failed to serialize font manifest: {exc}") from exc


def save_manifest(manifest: Manifest, path: Path) -> None:
    """Atomically replace ``path`` with the serialized manifest."""
    path = Path(path)
    payload = dump_manifest(manifest)
    tmp_path = path.with_name(f"{path.name}.tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path.write_text(payload + "\n", encoding="utf-8")
        tmp_path.replace(path)
    except OSError as exc:
        with suppress(OSError):
            tmp_path.unlink()
        raise ManifestError(f"Failed to write font manifest '{path}': {exc}") from exc


def load_manifest(path: Path) -> Manifest:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ManifestError(f"Font manifest '{path}' does not exist.") from exc
    except OSError as exc:
        raise ManifestError(f"Unable to read font manifest '{path}': {exc}") from exc
    try:
        payload = json.loads(text)
    except ValueError as exc:
        raise ManifestError(f"Font manifest '{path}' is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ManifestError(f"Font manifest '{path}' must contain a JSON object.")
    return Manifest.from_dict(payload)


def _entry_paths(name: str, entry: FontManifestEntry, fonts_dir: Path, project_dir: Path) -> list[Path]:
    paths = [fonts_dir / filename for filename in entry.files]
    if entry.css:
        css = Path(entry.css)
        paths.append(css if css.is_absolute() else project_dir / css)
    else:
        paths.append(fonts_dir / f"{sanitize_family(name)}.css")
    return paths


def prune_manifest(
    manifest_file: Path,
    fonts_dir: Path,
    project_dir: Path,
    used_fonts: Iterable[str],
    *,
    dry_run: bool = False,
) -> PruneResult:
    """Drop manifest entries whose family no longer appears in any template."""
    manifest = load_manifest(manifest_file)
    fonts_dir = Path(fonts_dir)
    project_dir = Path(project_dir)
    used = {name.lower() for name in used_fonts}
    result = PruneResult()

    for name in manifest.fonts:
        if name.lower() in used:
            result.kept.append(name)
        else:
            result.removed.append(name)
    # Files still listed by a kept family survive even if a removed one lists them too.
    protected = {
        path.resolve()
        for name in result.kept
        for path in _entry_paths(name, manifest.fonts[name], fonts_dir, project_dir)
    }

    for name in result.removed:
        entry = manifest.fonts[name]
        for path in _entry_paths(name, entry, fonts_dir, project_dir):
            if not path.is_file() or path.resolve() in protected:
                continue
            result.deleted_files.append(path)
            if dry_run:
                continue
            try:
                path.unlink()
            except OSError as exc:
                logger.warning("Unable to delete %s: %s", path, exc)
        if not dry_run:
            del manifest.fonts[name]

    if result.removed and not dry_run:
        save_manifest(manifest, manifest_file)
    return result


__all__ = [
    "FontManifestEntry",
    "Manifest",
    "ManifestBuilder",
    "PruneResult",
    "dump_manifest",
    "load_manifest",
    "prune_manifest",
    "relative_css_path",
    "save_manifest",
]
