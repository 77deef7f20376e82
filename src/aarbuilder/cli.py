"""Typer-based command line interface.

Commands
--------
``export``    render a record file as txt, pdf, docx, doc or html
``validate``  list validation errors for a record file
``text``      print the canonical plain text
``draft``     save, load, list or remove records in a draft store

Exit codes
----------
0 success
2 validation errors (``validate``) or export blocked by them (``export``)
3 I/O error (unreadable record, unknown format, write failure)
4 configuration error
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import NoReturn, Optional

import typer
import yaml
from pydantic import ValidationError

from .builder import build
from .config import ConfigModel, load_config
from .io import available_formats, export_record, write_artifact
from .io.writers.txt_writer import render_text, write_text
from .model.record import ReportRecord, load_record
from .storage import DraftStore
from .utils.errors import ConfigurationError, ExportBlockedError, ResourceError, UnsupportedFormatError
from .utils.logging import configure_logging
from .utils.text import format_phone_number
from .validate import validate as validate_record

if not sys.stdout.isatty():  # pragma: no cover - CLI test context
    os.environ.setdefault("NO_COLOR", "1")

app = typer.Typer(
    name="aarbuilder",
    help="Generate after action reports in naval letter format.",
)
draft_app = typer.Typer(help="Manage saved report drafts.")
app.add_typer(draft_app, name="draft")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _safe_exit(code: int, msg: str | None = None) -> NoReturn:
    """Exit the CLI with ``code`` emitting ``msg`` to stderr if provided."""

    if msg:
        typer.echo(msg, err=True)
    raise typer.Exit(code)


def _load_config(config_path: Path | None) -> ConfigModel:
    try:
        return load_config(config_path)
    except (ValidationError, yaml.YAMLError, OSError, ValueError) as exc:
        _safe_exit(4, str(exc).splitlines()[0])


def _load_record(in_path: Path, *, normalize_phone: bool = False) -> ReportRecord:
    try:
        record = load_record(in_path)
    except (yaml.YAMLError, OSError, ValueError) as exc:
        _safe_exit(3, str(exc).splitlines()[0])
    if normalize_phone and record.poc_phone.strip():
        record = record.model_copy(update={"poc_phone": format_phone_number(record.poc_phone)})
    return record


@app.callback()
def main() -> None:
    """Entry point for the aarbuilder command group."""
    pass


@app.command()
def export(
    in_path: Path = typer.Option(..., "--in", "--input", help="Record file (.yml/.yaml/.json)"),  # noqa: B008
    fmt: str = typer.Option("pdf", "--format", "-f", help="Output format"),  # noqa: B008
    out_dir: Path = typer.Option(Path("."), "--out-dir", help="Directory for the artifact"),  # noqa: B008
    config_path: Optional[Path] = typer.Option(  # noqa: B008
        None, "--config", help="YAML config to override defaults"
    ),
    force: bool = typer.Option(  # noqa: B008
        False, "--force", help="Export document formats even when validation fails"
    ),
    normalize_phone: bool = typer.Option(  # noqa: B008
        False, "--normalize-phone", help="Reformat the POC phone digits as (XXX) XXX-XXXX"
    ),
    verbose: bool = typer.Option(  # noqa: B008
        False, "--verbose", "-v", help="Emit progress messages to stderr"
    ),
) -> None:
    """Render ``--in`` as ``--format`` into ``--out-dir``."""

    configure_logging(verbose)
    cfg = _load_config(config_path)
    record = _load_record(in_path, normalize_phone=normalize_phone)
    if verbose:
        typer.echo(f"Loaded record from {in_path}", err=True)

    try:
        artifact = export_record(record, fmt, cfg, force=force)
    except UnsupportedFormatError as exc:
        _safe_exit(3, f"{exc} (choose from {', '.join(available_formats())})")
    except ExportBlockedError as exc:
        for err in exc.errors:
            typer.echo(f"- {err}", err=True)
        _safe_exit(2, str(exc))
    except ConfigurationError as exc:
        _safe_exit(4, str(exc))
    except ResourceError as exc:
        _safe_exit(3, str(exc))

    try:
        path = write_artifact(artifact, out_dir)
    except ResourceError as exc:
        _safe_exit(3, str(exc))
    if verbose:
        typer.echo(f"Wrote {len(artifact.data)} bytes", err=True)
    typer.echo(str(path))


@app.command()
def validate(
    in_path: Path = typer.Option(..., "--in", "--input", help="Record file"),  # noqa: B008
    config_path: Optional[Path] = typer.Option(None, "--config"),  # noqa: B008
    normalize_phone: bool = typer.Option(  # noqa: B008
        False, "--normalize-phone", help="Reformat the POC phone digits before checking"
    ),
) -> None:
    """Print validation errors; exit 2 when there are any."""

    cfg = _load_config(config_path)
    record = _load_record(in_path, normalize_phone=normalize_phone)
    result = validate_record(record, topic_title_max=cfg.validation.topic_title_max)
    if result.valid:
        typer.echo("OK")
        return
    for err in result.errors:
        typer.echo(err)
    raise typer.Exit(2)


@app.command()
def text(
    in_path: Path = typer.Option(..., "--in", "--input", help="Record file"),  # noqa: B008
    out_path: Optional[Path] = typer.Option(  # noqa: B008
        None, "--out", help="Write the text to this file instead of stdout"
    ),
) -> None:
    """Print the plain-text report."""

    record = _load_record(in_path)
    rendered = render_text(build(record))
    if out_path is None:
        typer.echo(rendered)
        return
    try:
        write_text(out_path, rendered + "\n")
    except OSError as exc:
        _safe_exit(3, str(exc))
    typer.echo(str(out_path))


@draft_app.command("save")
def draft_save(
    key: str = typer.Argument(..., help="Draft name"),
    in_path: Path = typer.Option(..., "--in", "--input", help="Record file"),  # noqa: B008
    store_dir: Path = typer.Option(Path(".aar-drafts"), "--store", help="Draft directory"),  # noqa: B008
) -> None:
    record = _load_record(in_path)
    try:
        path = DraftStore(store_dir).save(key, record)
    except (OSError, ValueError) as exc:
        _safe_exit(3, str(exc))
    typer.echo(str(path))


@draft_app.command("load")
def draft_load(
    key: str = typer.Argument(..., help="Draft name"),
    store_dir: Path = typer.Option(Path(".aar-drafts"), "--store", help="Draft directory"),  # noqa: B008
) -> None:
    """Print the stored draft as JSON."""

    try:
        record = DraftStore(store_dir).load_record(key)
    except (ValueError, ValidationError) as exc:
        _safe_exit(3, str(exc).splitlines()[0])
    if record is None:
        _safe_exit(3, f"no draft named {key!r}")
    typer.echo(record.model_dump_json(indent=2))


@draft_app.command("remove")
def draft_remove(
    key: str = typer.Argument(..., help="Draft name"),
    store_dir: Path = typer.Option(Path(".aar-drafts"), "--store", help="Draft directory"),  # noqa: B008
) -> None:
    try:
        removed = DraftStore(store_dir).remove(key)
    except (OSError, ValueError) as exc:
        _safe_exit(3, str(exc))
    if not removed:
        _safe_exit(3, f"no draft named {key!r}")


@draft_app.command("list")
def draft_list(
    store_dir: Path = typer.Option(Path(".aar-drafts"), "--store", help="Draft directory"),  # noqa: B008
) -> None:
    """Print the names of saved drafts, one per line."""

    for key in DraftStore(store_dir).keys():
        typer.echo(key)
