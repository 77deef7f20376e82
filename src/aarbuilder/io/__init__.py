"""Format registry and export entry points.

Each export format is registered under a short name (``txt``, ``pdf``,
``docx``, ``doc``, ``html``) together with its file extension, media type and
a render function taking a record and configuration.  :func:`export_record`
runs validation, renders the artifact and names it; :func:`write_artifact`
stores it.

Document formats (``pdf``, ``docx``, ``doc``) are blocked by validation errors
unless ``force`` is set.  The plain-text and print formats are always
available so a preview can be produced from an incomplete record.

Failures inside a renderer are re-raised as
:class:`~aarbuilder.utils.errors.ResourceError`.  ``UnsupportedFormatError``
is raised for unknown format names.
"""

from __future__ import annotations

import os
import tempfile
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from ..builder import build, build_subject_line
from ..config import ConfigModel, load_config
from ..layout.engine import LayoutEngine
from ..layout.geometry import geometry_from_config
from ..model.record import ReportRecord
from ..utils import datefmt
from ..utils.errors import ConfigurationError, ExportBlockedError, ResourceError, UnsupportedFormatError
from ..utils.logging import get_logger
from ..utils.text import sanitize_filename_part
from ..validate import validate
from .writers.docx_writer import render_docx
from .writers.html_writer import render_print_html, render_word_html
from .writers.pdf_writer import render_pdf
from .writers.txt_writer import render_text

log = get_logger(__name__)

RenderFunc = Callable[[ReportRecord, ConfigModel], bytes]


@dataclass(slots=True, frozen=True)
class ExportFormat:
    name: str
    extension: str
    media_type: str
    render: RenderFunc
    requires_valid: bool


@dataclass(slots=True, frozen=True)
class ExportArtifact:
    """A generated file ready to be written or offered for download."""

    filename: str
    media_type: str
    data: bytes


_FORMATS: dict[str, ExportFormat] = {}


def register_format(fmt: ExportFormat) -> None:
    """Register ``fmt`` under its lower-cased name."""

    _FORMATS[fmt.name.lower()] = fmt


def get_format(name: str) -> ExportFormat:
    """Return the registered format called ``name``.

    Raises
    ------
    UnsupportedFormatError
        If no format is registered under ``name``.
    """

    fmt = _FORMATS.get(name.lower().lstrip("."))
    if fmt is None:
        raise UnsupportedFormatError(f"Unsupported export format: '{name}'") from None
    return fmt


def available_formats() -> list[str]:
    return sorted(_FORMATS)


def export_filename(record: ReportRecord, extension: str, *, today: date | None = None) -> str:
    """Return ``AAR_<event>_<YYYYMMDD>.<ext>``.

    The event name is sanitized to alphanumerics and underscores and cut to 30
    characters; the document date falls back to ``today``.
    """

    when = record.document_date or today or date.today()
    event = sanitize_filename_part(record.event_name.strip() or "AAR")
    return f"AAR_{event}_{datefmt.format_numeric(when)}.{extension.lstrip('.')}"


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------


def _render_txt(record: ReportRecord, cfg: ConfigModel) -> bytes:
    return render_text(build(record)).encode("utf-8")


def _render_html(record: ReportRecord, cfg: ConfigModel) -> bytes:
    return render_print_html(render_text(build(record))).encode("utf-8")


def _render_doc(record: ReportRecord, cfg: ConfigModel) -> bytes:
    return render_word_html(render_text(build(record))).encode("utf-8")


def _render_pdf(record: ReportRecord, cfg: ConfigModel) -> bytes:
    engine = LayoutEngine(geometry_from_config(cfg))
    result = engine.layout(build(record))
    log.info("PDF laid out on %d page(s)", result.page_count)
    return render_pdf(result, title=build_subject_line(record))


def _render_docx(record: ReportRecord, cfg: ConfigModel) -> bytes:
    return render_docx(build(record), geometry_from_config(cfg), title=build_subject_line(record))


register_format(ExportFormat("txt", "txt", "text/plain; charset=utf-8", _render_txt, False))
register_format(ExportFormat("html", "html", "text/html; charset=utf-8", _render_html, False))
register_format(ExportFormat("pdf", "pdf", "application/pdf", _render_pdf, True))
register_format(
    ExportFormat(
        "docx",
        "docx",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        _render_docx,
        True,
    )
)
register_format(ExportFormat("doc", "doc", "application/msword", _render_doc, True))


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


def export_record(
    record: ReportRecord,
    fmt: str,
    cfg: ConfigModel | None = None,
    *,
    force: bool = False,
    today: date | None = None,
) -> ExportArtifact:
    """Render ``record`` as ``fmt`` and return the named artifact.

    Raises
    ------
    UnsupportedFormatError
        Unknown ``fmt``.
    ExportBlockedError
        ``fmt`` is a document format, the record is invalid and ``force`` is off.
    ConfigurationError
        The page geometry cannot be laid out.
    ResourceError
        The renderer failed.
    """

    export_format = get_format(fmt)
    cfg = cfg if cfg is not None else load_config()
    if export_format.requires_valid and not force:
        result = validate(record, topic_title_max=cfg.validation.topic_title_max)
        if not result.valid:
            raise ExportBlockedError(list(result.errors))

    try:
        data = export_format.render(record, cfg)
    except (ConfigurationError, ExportBlockedError):
        raise
    except Exception as exc:
        raise ResourceError(f"failed to generate {export_format.name}: {exc}") from exc

    filename = export_filename(record, export_format.extension, today=today)
    log.debug("rendered %s (%d bytes)", filename, len(data))
    return ExportArtifact(filename, export_format.media_type, data)


def write_artifact(artifact: ExportArtifact, out_dir: str | os.PathLike[str]) -> Path:
    """Write ``artifact`` into ``out_dir`` and return its path.

    The bytes go to a temporary file in the same directory that then replaces
    the target, so an existing file is left untouched when writing fails.
    """

    directory = Path(out_dir)
    target = directory / artifact.filename
    tmp_name: str | None = None
    try:
        directory.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile("wb", dir=directory, delete=False, suffix=".part") as f:
            tmp_name = f.name
            f.write(artifact.data)
        os.replace(tmp_name, target)
    except OSError as exc:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise ResourceError(f"failed to write {target}: {exc}") from exc
    return target


__all__ = [
    "ExportArtifact",
    "ExportFormat",
    "RenderFunc",
    "available_formats",
    "export_filename",
    "export_record",
    "get_format",
    "register_format",
    "write_artifact",
]
