from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from charship.platform.files import (
    atomic_write_text,
    remove_path,
    replace_tree,
    reset_dir,
    secret_dir,
    write_secret,
)


@pytest.fixture
def private_tmp(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    import tempfile

    base = tmp_path / "tmp"
    base.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(base))
    return base


def test_atomic_write_text_creates_parent_dirs(tmp_path: Path) -> None:
    path = tmp_path / "build" / "release-entitlements.plist"
    atomic_write_text(path, "<plist/>\n")

    assert path.read_text(encoding="utf-8") == "<plist/>\n"


def test_atomic_write_text_cleans_temp_file_on_replace_failure(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    path = tmp_path / "state.json"

    def fail_replace(_src: Path, _dst: Path) -> None:
        raise OSError("replace failed")

    monkeypatch.setattr(os, "replace", fail_replace)

    with pytest.raises(OSError, match="replace failed"):
        atomic_write_text(path, "payload", encoding="utf-8")

    assert list(path.parent.glob(f".{path.name}.*.tmp")) == []


def test_remove_path_handles_files_dirs_and_missing(tmp_path: Path) -> None:
    file = tmp_path / "char.zip"
    file.write_bytes(b"PK")
    tree = tmp_path / "char.app" / "Contents"
    tree.mkdir(parents=True)

    remove_path(file)
    remove_path(tmp_path / "char.app")
    remove_path(tmp_path / "missing")

    assert list(tmp_path.iterdir()) == []


def test_remove_path_leaves_symlink_target(tmp_path: Path) -> None:
    target = tmp_path / "target"
    target.mkdir()
    (target / "keep").write_text("x", encoding="utf-8")
    link = tmp_path / "link"
    link.symlink_to(target)

    remove_path(link)

    assert not link.exists()
    assert (target / "keep").exists()


def test_replace_tree_drops_stale_content(tmp_path: Path) -> None:
    src = tmp_path / "src.app"
    (src / "Contents").mkdir(parents=True)
    (src / "Contents" / "Info.plist").write_text("new", encoding="utf-8")
    dst = tmp_path / "out" / "char.app"
    dst.mkdir(parents=True)
    (dst / "stale").write_text("old", encoding="utf-8")

    replace_tree(src, dst)

    assert (dst / "Contents" / "Info.plist").read_text(encoding="utf-8") == "new"
    assert not (dst / "stale").exists()


def test_replace_tree_preserves_symlinks(tmp_path: Path) -> None:
    src = tmp_path / "Sparkle.framework"
    (src / "Versions" / "B").mkdir(parents=True)
    (src / "Versions" / "Current").symlink_to("B")

    dst = tmp_path / "copy.framework"
    replace_tree(src, dst)

    assert (dst / "Versions" / "Current").is_symlink()


def test_reset_dir_empties(tmp_path: Path) -> None:
    staging = tmp_path / "build" / "dmg"
    staging.mkdir(parents=True)
    (staging / "old.app").mkdir()

    reset_dir(staging)

    assert staging.is_dir()
    assert list(staging.iterdir()) == []


def test_write_secret_is_owner_only(tmp_path: Path) -> None:
    path = tmp_path / "AuthKey.p8"

    write_secret(path, "key")

    assert path.read_text(encoding="utf-8") == "key"
    assert stat.S_IMODE(path.stat().st_mode) == 0o600


class TestSecretDir:
    def test_removed_on_exit(self, private_tmp: Path) -> None:
        with secret_dir("notary") as path:
            write_secret(path / "AuthKey.p8", "key")
            assert path.parent == private_tmp
            assert path.name.startswith("notary-")

        assert not path.exists()
        assert list(private_tmp.iterdir()) == []

    def test_removed_when_body_raises(self, private_tmp: Path) -> None:
        with pytest.raises(RuntimeError, match="boom"):
            with secret_dir("sparkle") as path:
                write_secret(path / "sparkle_ed_key", "key")
                raise RuntimeError("boom")

        assert list(private_tmp.iterdir()) == []

    def test_unique_per_use(self, private_tmp: Path) -> None:
        with secret_dir("notary") as first, secret_dir("notary") as second:
            assert first != second
        assert list(private_tmp.iterdir()) == []
