"""Utility functions for pmap."""

import re
import unicodedata

_DASHES = str.maketrans({"–": "-", "—": "-", "−": "-"})


def slugify(text: str) -> str:
    """
    Turn heading text into an HTML id.

    Inline markup characters are dropped along with other punctuation, so
    "**Getting** started" and "Getting started" share a slug.

    Examples:
        >>> slugify("Getting started")
        'getting-started'
        >>> slugify("Café — menu")
        'cafe-menu'
    """
    text = unicodedata.normalize("NFKD", text.lower().translate(_DASHES))
    text = "".join(c for c in text if not unicodedata.combining(c))
    text = re.sub(r"[^\w\s-]", "", text)
    text = re.sub(r"[\s_]+", "-", text)
    return re.sub(r"-+", "-", text).strip("-")


class SlugRegistry:
    """Hands out unique slugs within one rendered document."""

    def __init__(self) -> None:
        self._seen: dict[str, int] = {}

    def unique(self, text: str) -> str:
        base = slugify(text) or "section"
        count = self._seen.get(base, 0)
        self._seen[base] = count + 1
        return base if count == 0 else f"{base}-{count}"
