"""After action report generator.

A report record flows through a pure pipeline::

    ReportRecord -> build() -> blocks -> layout() -> positioned text -> PDF

Plain text, printable HTML and DOCX are rendered straight from the blocks.
:func:`export_record` is the single entry point for producing a named
artifact; the command line interface lives in :mod:`aarbuilder.cli`.
"""

from .builder import build, build_subject_line
from .io import ExportArtifact, export_filename, export_record, write_artifact
from .layout import LayoutEngine, PageGeometry, layout
from .model import ReportRecord, Topic, load_record
from .validate import ValidationResult, validate

__all__ = [
    "build",
    "build_subject_line",
    "ExportArtifact",
    "export_filename",
    "export_record",
    "write_artifact",
    "LayoutEngine",
    "PageGeometry",
    "layout",
    "ReportRecord",
    "Topic",
    "load_record",
    "ValidationResult",
    "validate",
]
