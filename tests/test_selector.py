from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from fontlock.core.config import FontDefaults, FontLockConfig
from fontlock.fonts.selector import CacheSelector, SelectorCache


def _write_manifest(path: Path, fonts: dict[str, str], mtime_ns: int | None = None) -> Path:
    payload = {
        "locked": True,
        "generated_at": "2026-01-02T03:04:05+00:00",
        "fonts": {
            name: {
                "weights": [400],
                "styles": ["normal"],
                "files": [],
                "css": css,
                "monospace": False,
            }
            for name, css in fonts.items()
        },
    }
    path.write_text(json.dumps(payload), encoding="utf-8")
    if mtime_ns is not None:
        os.utime(path, ns=(mtime_ns, mtime_ns))
    return path


@pytest.fixture
def manifest_file(tmp_path: Path) -> Path:
    return _write_manifest(
        tmp_path / "fonts.json",
        {"Roboto": "assets/fonts/roboto.css"},
        mtime_ns=1_700_000_000_000_000_000,
    )


def test_lookup_is_case_insensitive(manifest_file: Path) -> None:
    selector = CacheSelector(manifest_file)

    assert selector.should_use_local("roboto")
    assert selector.should_use_local("ROBOTO")
    assert not selector.should_use_local("Lora")


def test_index_is_reused_while_mtime_is_unchanged(manifest_file: Path, monkeypatch) -> None:
    cache = SelectorCache()
    selector = CacheSelector(manifest_file, cache)
    assert selector.should_use_local("Roboto")

    reads: list[Path] = []
    real_read_text = Path.read_text

    def counting_read_text(self, *args, **kwargs):
        reads.append(self)
        return real_read_text(self, *args, **kwargs)

    monkeypatch.setattr(Path, "read_text", counting_read_text)
    assert selector.should_use_local("Roboto")
    assert reads == []


def test_index_rebuilds_when_mtime_changes(manifest_file: Path) -> None:
    selector = CacheSelector(manifest_file)
    assert selector.should_use_local("Roboto")

    _write_manifest(manifest_file, {"Lora": "assets/fonts/lora.css"}, mtime_ns=1_800_000_000_000_000_000)

    assert not selector.should_use_local("Roboto")
    assert selector.should_use_local("lora")
    assert selector.cache.mtime == 1_800_000_000_000_000_000


def test_missing_or_corrupt_manifest_means_remote(tmp_path: Path) -> None:
    missing = CacheSelector(tmp_path / "absent.json")
    assert not missing.should_use_local("Roboto")

    corrupt = tmp_path / "corrupt.json"
    corrupt.write_text("{oops", encoding="utf-8")
    assert not CacheSelector(corrupt).should_use_local("Roboto")

    wrong_shape = tmp_path / "shape.json"
    wrong_shape.write_text('["Roboto"]', encoding="utf-8")
    assert not CacheSelector(wrong_shape).should_use_local("Roboto")


def test_deleted_manifest_falls_back(manifest_file: Path) -> None:
    selector = CacheSelector(manifest_file)
    assert selector.should_use_local("Roboto")

    manifest_file.unlink()

    assert not selector.should_use_local("Roboto")
    assert selector.cache.index == {}


def test_disabled_selector_never_uses_local(manifest_file: Path) -> None:
    assert not CacheSelector(manifest_file, enabled=False).should_use_local("Roboto")


def test_asset_path_joins_public_prefix(manifest_file: Path) -> None:
    assert CacheSelector(manifest_file).asset_path("roboto") == "/assets/fonts/roboto.css"
    assert (
        CacheSelector(manifest_file, public_prefix="https://cdn.test/static/").asset_path("Roboto")
        == "https://cdn.test/static/assets/fonts/roboto.css"
    )
    assert CacheSelector(manifest_file).asset_path("Lora") is None


def test_select_local_and_remote(manifest_file: Path) -> None:
    selector = CacheSelector(manifest_file)

    local = selector.select("Roboto", [400], ["normal"])
    remote = selector.select("Open Sans", [400, 700], ["normal"], "optional")

    assert local.local is True
    assert local.href == "/assets/fonts/roboto.css"
    assert remote.local is False
    assert remote.href == (
        "https://fonts.googleapis.com/css2?family=Open+Sans:wght@400;wght@700&display=optional"
    )


def test_selectors_sharing_a_cache_share_the_index(manifest_file: Path) -> None:
    cache = SelectorCache()
    first = CacheSelector(manifest_file, cache)
    second = CacheSelector(manifest_file, cache)

    assert first.should_use_local("Roboto")
    assert second.cache.index == {"roboto": "assets/fonts/roboto.css"}
    assert CacheSelector(manifest_file).cache is not cache


def test_from_config_respects_use_locked_fonts(manifest_file: Path, tmp_path: Path) -> None:
    config = FontLockConfig(project_dir=tmp_path, manifest_file=manifest_file)

    selector = CacheSelector.from_config(config)
    selection = selector.select("Roboto", [400], ["normal"])

    assert config.use_locked_fonts is False
    assert not selector.should_use_local("Roboto")
    assert selection.local is False
    assert selection.href.startswith("https://fonts.googleapis.com/css2?family=Roboto")
    assert selection.preconnect is True


def test_from_config_applies_url_settings(manifest_file: Path, tmp_path: Path) -> None:
    config = FontLockConfig(
        project_dir=tmp_path,
        manifest_file=manifest_file,
        use_locked_fonts=True,
        public_prefix="/static/",
        defaults=FontDefaults(display="block", preconnect=False),
    )
    selector = CacheSelector.from_config(config)

    local = selector.select("roboto", [400], ["normal"])
    remote = selector.select("Lora", [400], ["normal"])

    assert local.local is True
    assert local.href == "/static/assets/fonts/roboto.css"
    assert local.preconnect is False
    assert remote.href.endswith("&display=block")
    assert remote.preconnect is False
