"""Inline markup for pmap text: **bold** and [text](url)."""

import re

BOLD_RE = re.compile(r"\*\*([^*]+)\*\*")
LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")


def process_inline_markup(text: str) -> str:
    """Replace inline pmap syntax with HTML.

    Bold spans are substituted first, then links. Text without either
    pattern is returned unchanged.

    Examples:
        >>> process_inline_markup("**hi** [go](http://x)")
        '<strong>hi</strong> <a href="http://x" target="_blank">go</a>'
    """
    text = BOLD_RE.sub(r"<strong>\1</strong>", text)
    text = LINK_RE.sub(r'<a href="\2" target="_blank">\1</a>', text)
    return text
