"""HTML wrappers around the canonical plain text.

Two documents are produced from the same escaped text:

* :func:`render_print_html` is a printable page in a monospace font with
  letter-size page rules.
* :func:`render_word_html` is the legacy word-processor export: an HTML page
  carrying Office namespaces, saved with a ``.doc`` extension so that word
  processors open it directly.

Both keep the text in a ``pre-wrap`` container so line content and order match
the plain-text export exactly.
"""

from __future__ import annotations

import html

__all__ = ["escape_text", "render_print_html", "render_word_html"]

_PRINT_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <title>{title}</title>
  <style>
    body {{
      font-family: "Courier New", Courier, monospace;
      font-size: 12pt;
      line-height: 1.5;
      padding: 1in;
      white-space: pre-wrap;
      word-wrap: break-word;
    }}
    @page {{
      size: letter;
      margin: 1in;
    }}
    @media print {{
      body {{
        padding: 0;
      }}
    }}
  </style>
</head>
<body>{body}</body>
</html>
"""

_WORD_TEMPLATE = """<!DOCTYPE html>
<html xmlns:o="urn:schemas-microsoft-com:office:office"
      xmlns:w="urn:schemas-microsoft-com:office:word"
      xmlns="http://www.w3.org/TR/REC-html40">
<head>
  <meta charset="UTF-8">
  <title>{title}</title>
  <!--[if gte mso 9]>
  <xml>
    <w:WordDocument>
      <w:View>Print</w:View>
      <w:Zoom>100</w:Zoom>
      <w:DoNotOptimizeForBrowser/>
    </w:WordDocument>
  </xml>
  <![endif]-->
  <style>
    @page {{
      size: 8.5in 11in;
      margin: 1in;
    }}
    body {{
      font-family: "Times New Roman", Times, serif;
      font-size: 12pt;
      line-height: 1.15;
    }}
    pre {{
      font-family: "Courier New", Courier, monospace;
      font-size: 12pt;
      white-space: pre-wrap;
      word-wrap: break-word;
      margin: 0;
    }}
  </style>
</head>
<body>
<pre>{body}</pre>
</body>
</html>
"""


def escape_text(text: str) -> str:
    return html.escape(text, quote=True)


def render_print_html(text: str, *, title: str = "After Action Report") -> str:
    """Return a printable HTML page containing ``text``."""

    return _PRINT_TEMPLATE.format(title=escape_text(title), body=escape_text(text))


def render_word_html(text: str, *, title: str = "After Action Report") -> str:
    """Return the legacy word-markup document containing ``text``."""

    return _WORD_TEMPLATE.format(title=escape_text(title), body=escape_text(text))
