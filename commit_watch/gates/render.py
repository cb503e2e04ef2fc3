from __future__ import annotations

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import DiffLexer, TextLexer


def render_diff_html(diff_text: str, style: str = "solarized-light", title: str = "") -> str:
    if not diff_text:
        return ""
    return highlight(diff_text, DiffLexer(), HtmlFormatter(full=True, style=style, title=title))


def render_text_html(text: str, style: str = "solarized-light", title: str = "") -> str:
    return highlight(text or "(no output)", TextLexer(), HtmlFormatter(full=True, style=style, title=title))
