"""Greedy word wrap over text with an optional bold prefix.

Text is split on single spaces, so the empty tokens left behind by runs of
spaces survive and re-join into the same runs.  This keeps the two spaces
after a sentence intact within a line.  Empty tokens are dropped at the start
and end of a wrapped line.

Widths are additive: a line's width is the sum of its token widths plus one
regular space between tokens.  A token wider than the available width is
placed alone on its own line rather than split.
"""

from __future__ import annotations

from dataclasses import dataclass

from .geometry import TextMeasurer

__all__ = ["Fragment", "WrappedLine", "wrap_text"]


@dataclass(slots=True, frozen=True)
class Fragment:
    """A same-weight run within a line, ``offset`` points from the line start."""

    offset: float
    text: str
    bold: bool = False


@dataclass(slots=True, frozen=True)
class WrappedLine:
    fragments: tuple[Fragment, ...]
    width: float

    @property
    def text(self) -> str:
        return " ".join(f.text for f in self.fragments)


@dataclass(slots=True)
class _Token:
    text: str
    bold: bool
    width: float


def _tokenize(text: str, bold_prefix: int, measure: TextMeasurer) -> list[_Token]:
    tokens: list[_Token] = []
    pos = 0
    for word in text.split(" "):
        bold = pos < bold_prefix and word != ""
        tokens.append(_Token(word, bold, measure.width(word, bold) if word else 0.0))
        pos += len(word) + 1
    return tokens


def _finish(tokens: list[_Token], space: float) -> WrappedLine:
    while tokens and not tokens[-1].text:
        tokens.pop()
    fragments: list[Fragment] = []
    x = 0.0
    group: list[_Token] = []
    group_start = 0.0
    for i, tok in enumerate(tokens):
        if group and tok.bold != group[-1].bold:
            fragments.append(Fragment(group_start, " ".join(t.text for t in group), group[-1].bold))
            group = []
        if i:
            x += space
        if not group:
            group_start = x
        group.append(tok)
        x += tok.width
    if group:
        fragments.append(Fragment(group_start, " ".join(t.text for t in group), group[-1].bold))
    return WrappedLine(tuple(fragments), x)


def wrap_text(
    text: str,
    first_width: float,
    rest_width: float,
    measure: TextMeasurer,
    *,
    bold_prefix: int = 0,
) -> list[WrappedLine]:
    """Wrap ``text`` greedily.

    Parameters
    ----------
    text:
        Text to wrap.  Callers normalize sentence spacing beforehand.
    first_width, rest_width:
        Available width of the first line and of every following line.
    measure:
        Text measurer for the body font.
    bold_prefix:
        Number of leading characters drawn in bold.

    Returns
    -------
    list[WrappedLine]
        At least one line; an empty ``text`` yields a single empty line.
    """

    space = measure.width(" ")
    lines: list[WrappedLine] = []
    current: list[_Token] = []
    current_width = 0.0
    avail = first_width
    for tok in _tokenize(text, bold_prefix, measure):
        if not current:
            if not tok.text and lines:
                continue
            current = [tok]
            current_width = tok.width
            continue
        trial = current_width + space + tok.width
        if trial <= avail or not tok.text:
            current.append(tok)
            current_width = trial
            continue
        lines.append(_finish(current, space))
        avail = rest_width
        current = [tok]
        current_width = tok.width
    lines.append(_finish(current, space))
    return lines
