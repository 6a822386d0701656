import os
from pathlib import Path

from docsidecar.state import build_candidates


def _touch(path: Path, mtime: float) -> str:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("{}", encoding="utf-8")
    os.utime(path, (mtime, mtime))
    return str(path)


def test_most_recent_candidate_comes_first(tmp_path: Path):
    older = _touch(tmp_path / "a.lua", 1_000)
    newer = _touch(tmp_path / "b.lua", 2_000)

    candidates = build_candidates([older, newer])

    assert [c.path for c in candidates] == [newer, older]
    assert [c.priority for c in candidates] == [1, 0]


def test_missing_and_empty_entries_are_dropped(tmp_path: Path):
    present = _touch(tmp_path / "present.lua", 1_000)
    (tmp_path / "a_directory.lua").mkdir()

    candidates = build_candidates(["", str(tmp_path / "missing.lua"), str(tmp_path / "a_directory.lua"), present])

    assert [(c.path, c.priority) for c in candidates] == [(present, 3)]


def test_equal_mtimes_fall_back_to_priority(tmp_path: Path):
    first = _touch(tmp_path / "first.lua", 1_000)
    second = _touch(tmp_path / "second.lua", 1_000)

    candidates = build_candidates([second, first])

    assert [c.path for c in candidates] == [second, first]


def test_newer_backup_never_outranks_its_primary(tmp_path: Path):
    primary = _touch(tmp_path / "metadata.epub.lua", 1_000)
    backup = _touch(tmp_path / "metadata.epub.lua.old", 1_500)
    other = _touch(tmp_path / "history.lua", 1_200)

    candidates = build_candidates([primary, backup, other])

    assert [c.path for c in candidates] == [primary, backup, other]
    assert candidates[0].mtime == candidates[1].mtime == 1_500


def test_older_backup_ranks_right_after_its_primary(tmp_path: Path):
    primary = _touch(tmp_path / "metadata.epub.lua", 2_000)
    backup = _touch(tmp_path / "metadata.epub.lua.old", 1_000)
    other = _touch(tmp_path / "centralized.lua", 1_500)

    candidates = build_candidates([primary, backup, other])

    assert [(c.path, c.mtime) for c in candidates] == [(primary, 2_000), (backup, 2_000), (other, 1_500)]


def test_backup_without_primary_is_not_clamped(tmp_path: Path):
    backup = _touch(tmp_path / "metadata.epub.lua.old", 3_000)
    other = _touch(tmp_path / "history.lua", 2_000)

    candidates = build_candidates(["", str(tmp_path / "missing.lua"), backup, other])

    assert [(c.path, c.mtime) for c in candidates] == [(backup, 3_000), (other, 2_000)]
