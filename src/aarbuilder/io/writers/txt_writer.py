"""Plain-text rendering and writing.

:func:`render_text` joins the block sequence into newline separated lines
without wrapping or pagination.  The result is the canonical text of a report;
clipboard copy, print and the legacy word-markup export are derived from it.

:func:`write_text` persists Unicode strings to disk without altering existing
newline sequences.  Directories required to store the file are created
automatically.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path

from ...model.blocks import (
    DISCUSSION_LABEL,
    RECOMMENDATION_LABEL,
    SIGNATURE_GAP_LINES,
    BlankLine,
    Block,
    LabeledField,
    LetteredTopic,
    LetterheadLine,
    NumberedParagraph,
    RightAlignedLine,
    Signature,
)
from ...utils.text import ensure_double_spaces

PathLikeStr = os.PathLike[str]

SENDER_COLUMN = 56
LABEL_COLUMN = 7
SUBPARAGRAPH_INDENT = 4
SUBSUBPARAGRAPH_INDENT = 8
SIGNATURE_COLUMN = 40


def block_lines(block: Block) -> list[str]:
    """Return the plain-text lines of a single block."""

    if isinstance(block, LetterheadLine):
        return [block.text]
    if isinstance(block, BlankLine):
        return [""]
    if isinstance(block, RightAlignedLine):
        return [" " * SENDER_COLUMN + block.text]
    if isinstance(block, LabeledField):
        lines = [f"{block.label:<{LABEL_COLUMN}}{block.text}"]
        lines.extend(" " * LABEL_COLUMN + extra for extra in block.continuation)
        return lines
    if isinstance(block, NumberedParagraph):
        intro = ensure_double_spaces(block.intro)
        if block.caption is None:
            return [f"{block.label}  {intro}"]
        return [f"{block.label}  {block.caption}  {intro}"]
    if isinstance(block, LetteredTopic):
        pad = " " * SUBPARAGRAPH_INDENT
        lines = [f"{pad}{block.label}  {ensure_double_spaces(block.topic)}"]
        subpad = " " * SUBSUBPARAGRAPH_INDENT
        if block.discussion is not None:
            lines.append(f"{subpad}(1) {DISCUSSION_LABEL}  {ensure_double_spaces(block.discussion)}")
        if block.recommendation is not None:
            lines.append("")
            lines.append(
                f"{subpad}(2) {RECOMMENDATION_LABEL}  {ensure_double_spaces(block.recommendation)}"
            )
        return lines
    if isinstance(block, Signature):
        return [""] * SIGNATURE_GAP_LINES + [" " * SIGNATURE_COLUMN + block.name]
    raise TypeError(f"unsupported block: {block!r}")


def render_text(blocks: Sequence[Block]) -> str:
    """Join ``blocks`` into the canonical newline separated report text."""

    lines: list[str] = []
    for block in blocks:
        lines.extend(block_lines(block))
    return "\n".join(lines).replace("\r\n", "\n")


def write_text(
    path: str | PathLikeStr,
    text: str,
    *,
    encoding: str = "utf-8",
    newline: str | None = "",
) -> None:
    """Write ``text`` to ``path`` exactly as provided.

    Parameters
    ----------
    path:
        Destination file path.
    text:
        The Unicode string to be written.
    encoding:
        Output encoding.  Defaults to UTF-8 without a byte-order mark.
    newline:
        ``newline`` parameter forwarded to :func:`open`.  The default of ``""``
        ensures newline characters in ``text`` are emitted verbatim.
    """

    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, "w", encoding=encoding, newline=newline) as f:
        f.write(text)


__all__ = ["block_lines", "render_text", "write_text"]
