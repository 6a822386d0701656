"""CLI entry point for inspecting and maintaining document sidecars."""
from __future__ import annotations

import dataclasses
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

import typer

from ..config import STORAGE_MODES, Settings, load_settings
from ..paths import doc_id_from_history_name, history_name_for
from ..state import edit, migrate as migrate_settings, open_document, resolve
from ..utils.logging_utils import setup_logging

app = typer.Typer(help="Inspect and maintain per-document sidecar settings")


@dataclasses.dataclass
class _CliState:
    settings: Optional[Settings] = None


_state = _CliState()


@app.callback()
def main(
    metadata_folder: Optional[str] = typer.Option(
        None, help="Where sidecars are written: 'doc' (beside the document) or 'dir' (centralized)"
    ),
    data_dir: Optional[Path] = typer.Option(None, help="Root holding the docsettings and history directories"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Configure settings shared by every command."""

    setup_logging(verbose)
    if metadata_folder is not None and metadata_folder not in STORAGE_MODES:
        raise typer.BadParameter(f"metadata-folder must be one of {', '.join(STORAGE_MODES)}")

    settings = load_settings()
    overrides: Dict[str, Any] = {}
    if metadata_folder is not None:
        overrides["metadata_folder"] = metadata_folder
    if data_dir is not None:
        overrides.update(
            data_dir=str(data_dir),
            docsettings_dir=str(data_dir / "docsettings"),
            history_dir=str(data_dir / "history"),
        )
    _state.settings = dataclasses.replace(settings, **overrides) if overrides else settings


@app.command()
def show(
    doc_path: str = typer.Argument(..., help="Path of the document"),
    key: Optional[str] = typer.Option(None, help="Print a single setting instead of the whole blob"),
) -> None:
    """Print the settings loaded for a document."""

    handle = open_document(doc_path, _state.settings)
    if key is not None:
        if not handle.has(key):
            typer.secho(f"No setting named {key!r}", fg=typer.colors.RED)
            raise typer.Exit(code=1)
        typer.echo(json.dumps(handle.get(key), indent=2, ensure_ascii=False))
        return
    typer.echo(json.dumps(handle.data, indent=2, sort_keys=True, ensure_ascii=False))


@app.command("set")
def set_value(
    doc_path: str = typer.Argument(..., help="Path of the document"),
    key: str = typer.Argument(..., help="Setting name"),
    value: str = typer.Argument(..., help="Setting value"),
    as_json: bool = typer.Option(False, "--json", help="Parse VALUE as JSON"),
) -> None:
    """Change one setting and write the sidecar."""

    if as_json:
        try:
            parsed: Any = json.loads(value)
        except json.JSONDecodeError as exc:
            raise typer.BadParameter(f"VALUE is not valid JSON: {exc}") from exc
    else:
        parsed = value

    with edit(doc_path, _state.settings, save=False) as handle:
        handle.set(key, parsed)
        if not handle.write():
            typer.secho(f"Could not write settings for {doc_path}", fg=typer.colors.RED)
            raise typer.Exit(code=1)
    typer.secho(f"Saved {key} for {doc_path}", fg=typer.colors.GREEN)


@app.command()
def candidates(doc_path: str = typer.Argument(..., help="Path of the document")) -> None:
    """List existing sidecar files, most recent first."""

    found = resolve(doc_path, _state.settings).scan()
    if not found:
        typer.echo("No sidecar files found.")
        return
    for candidate in found:
        stamp = datetime.fromtimestamp(candidate.mtime).strftime("%Y-%m-%d %H:%M:%S")
        typer.echo(f"{candidate.priority} {stamp} {candidate.path}")


@app.command()
def purge(doc_path: str = typer.Argument(..., help="Path of the document")) -> None:
    """Delete every sidecar file of a document."""

    with edit(doc_path, _state.settings, save=False) as handle:
        handle.purge()
    typer.echo(f"Purged sidecar files of {doc_path}")


@app.command()
def migrate(
    doc_path: str = typer.Argument(..., help="Current path of the document"),
    new_doc_path: Optional[str] = typer.Argument(None, help="New path; omit when the document was deleted"),
    copy: bool = typer.Option(False, "--copy", help="Keep the settings of the original document"),
) -> None:
    """Carry settings over to a renamed, moved or copied document."""

    if copy and not new_doc_path:
        raise typer.BadParameter("--copy needs a NEW_DOC_PATH")
    if not migrate_settings(doc_path, new_doc_path, copy=copy, settings=_state.settings):
        typer.secho(f"Could not migrate settings of {doc_path}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    typer.echo("Done.")


@app.command("history-name")
def history_name(doc_path: str = typer.Argument(..., help="Path of the document")) -> None:
    """Print the legacy history file name of a document."""

    typer.echo(history_name_for(doc_path))


@app.command("from-history")
def from_history(name: str = typer.Argument(..., help="Legacy history file name")) -> None:
    """Print the document path a legacy history file was named after."""

    doc_path = doc_id_from_history_name(name)
    if not doc_path:
        typer.secho(f"Not a history file name: {name}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    typer.echo(doc_path)


if __name__ == "__main__":
    app()
