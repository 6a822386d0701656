import json
from pathlib import Path

from typer.testing import CliRunner

from docsidecar.cli.runner import app
from docsidecar.config import Settings
from docsidecar.state import exists, open_document


def _invoke(tmp_path: Path, *args: str):
    runner = CliRunner()
    return runner.invoke(app, ["--data-dir", str(tmp_path / "koreader"), "--metadata-folder", "doc", *args])


def _settings(tmp_path: Path) -> Settings:
    return Settings(data_dir=str(tmp_path / "koreader"))


def test_set_then_show(tmp_path: Path):
    doc = str(tmp_path / "novel.epub")

    result = _invoke(tmp_path, "set", doc, "page", "42", "--json")
    assert result.exit_code == 0, result.output
    result = _invoke(tmp_path, "set", doc, "title", "Dune")
    assert result.exit_code == 0, result.output

    result = _invoke(tmp_path, "show", doc)
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"doc_path": doc, "page": 42, "title": "Dune"}

    result = _invoke(tmp_path, "show", doc, "--key", "page")
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "42"


def test_show_unknown_key_fails(tmp_path: Path):
    result = _invoke(tmp_path, "show", str(tmp_path / "novel.epub"), "--key", "page")
    assert result.exit_code == 1


def test_set_rejects_invalid_json(tmp_path: Path):
    result = _invoke(tmp_path, "set", str(tmp_path / "novel.epub"), "page", "{oops", "--json")
    assert result.exit_code != 0
    assert not exists(str(tmp_path / "novel.epub"), _settings(tmp_path))


def test_candidates_and_purge(tmp_path: Path):
    doc = str(tmp_path / "novel.epub")
    assert _invoke(tmp_path, "set", doc, "page", "1").exit_code == 0

    result = _invoke(tmp_path, "candidates", doc)
    assert result.exit_code == 0, result.output
    assert "metadata.epub.lua" in result.output

    result = _invoke(tmp_path, "purge", doc)
    assert result.exit_code == 0, result.output
    assert not exists(doc, _settings(tmp_path))
    assert "No sidecar files found." in _invoke(tmp_path, "candidates", doc).output


def test_migrate_command(tmp_path: Path):
    old = str(tmp_path / "draft.pdf")
    new = str(tmp_path / "final.pdf")
    assert _invoke(tmp_path, "set", old, "page", "9", "--json").exit_code == 0

    result = _invoke(tmp_path, "migrate", old, new)
    assert result.exit_code == 0, result.output

    assert open_document(new, _settings(tmp_path)).get("page") == 9
    assert not exists(old, _settings(tmp_path))


def test_migrate_copy_needs_destination(tmp_path: Path):
    result = _invoke(tmp_path, "migrate", str(tmp_path / "draft.pdf"), "--copy")
    assert result.exit_code != 0


def test_history_name_round_trip():
    runner = CliRunner()
    result = runner.invoke(app, ["history-name", "/books/novel.epub"])
    assert result.exit_code == 0, result.output
    name = result.output.strip()
    assert name == "[#books#] novel.epub.lua"

    result = runner.invoke(app, ["from-history", name])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "/books/novel.epub"

    result = runner.invoke(app, ["from-history", name + ".old"])
    assert result.exit_code == 1


def test_invalid_metadata_folder(tmp_path: Path):
    runner = CliRunner()
    result = runner.invoke(app, ["--metadata-folder", "cloud", "show", str(tmp_path / "novel.epub")])
    assert result.exit_code != 0
