import html
import json
import logging
from pathlib import Path

from ..core.library import Library
from ..core.model import (
    DocumentId,
    HeadingSection,
    ImageSection,
    LinkSection,
    ListSection,
    PmapData,
    Section,
    TextSection,
)
from ..core.ports import ExportAdapter, Renderer
from ..core.utils import SlugRegistry
from ..format.inline import process_inline_markup

logger = logging.getLogger(__name__)

# HTML only has h1..h6; deeper pmap headings render as h6
MAX_HTML_HEADING = 6

PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{title}</title>
{head_extra}</head>
<body>
{body}
</body>
</html>
"""


class HtmlRenderer(Renderer):
    def __init__(self, escape: bool = True, stylesheet: str | None = None):
        self.escape = escape
        self.stylesheet = stylesheet
        self._slugs = SlugRegistry()

    def _inline(self, text: str) -> str:
        if self.escape:
            text = html.escape(text)
        return process_inline_markup(text)

    def _attr(self, value: str) -> str:
        return html.escape(value, quote=True)

    def render_section(self, section: Section) -> str:
        if isinstance(section, TextSection):
            return f"<p>{self._inline(section.content)}</p>"
        if isinstance(section, HeadingSection):
            n = min(section.level, MAX_HTML_HEADING)
            slug = self._slugs.unique(section.content)
            return f'<h{n} id="{slug}">{self._inline(section.content)}</h{n}>'
        if isinstance(section, ListSection):
            items = "".join(f"<li>{self._inline(item)}</li>" for item in section.items)
            return f"<ul>{items}</ul>"
        if isinstance(section, ImageSection):
            return f'<img src="{self._attr(section.url)}" alt="{self._attr(section.alt)}">'
        if isinstance(section, LinkSection):
            label = html.escape(section.content or section.url, quote=False)
            return f'<a href="{self._attr(section.url)}" target="_blank">{label}</a>'
        raise TypeError(f"Unsupported section: {section!r}")

    def render_body(self, doc: PmapData) -> str:
        self._slugs = SlugRegistry()
        return "\n".join(self.render_section(s) for s in doc.sections)

    def render_document(self, doc: PmapData) -> str:
        head: list[str] = []
        if doc.description is not None:
            head.append(f'<meta name="description" content="{self._attr(doc.description)}">\n')
        if self.stylesheet:
            head.append(f'<link rel="stylesheet" href="{self._attr(self.stylesheet)}">\n')
        return PAGE_TEMPLATE.format(
            title=html.escape(doc.title or "", quote=False),
            head_extra="".join(head),
            body=self.render_body(doc),
        )


class HtmlExporter(ExportAdapter):
    def __init__(self, library: Library, renderer: HtmlRenderer, out: Path):
        self.library = library
        self.renderer = renderer
        self.out = out

    def _path(self, id: DocumentId) -> Path:
        return self.out / f"{id}.html"

    def export_one(self, id: DocumentId) -> PmapData | None:
        doc = self.library.get(id)
        if doc is None:
            return None
        self.out.mkdir(parents=True, exist_ok=True)
        self._path(id).write_text(self.renderer.render_document(doc), encoding="utf-8")
        logger.debug("Exported %s", id)
        return doc

    def remove_one(self, id: DocumentId) -> None:
        p = self._path(id)
        if p.exists():
            p.unlink()

    def write_index(self) -> None:
        entries = []
        for nid in self.library.list_ids():
            doc = self.library.get(nid)
            if doc is None:
                continue
            entries.append({"id": nid, "title": doc.title, "description": doc.description})
        self.out.mkdir(parents=True, exist_ok=True)
        (self.out / "index.json").write_text(
            json.dumps(entries, indent=2, ensure_ascii=False), encoding="utf-8"
        )

    def export_all(self) -> list[DocumentId]:
        exported = []
        for nid in self.library.list_ids():
            if self.export_one(nid) is not None:
                exported.append(nid)
        self.write_index()
        logger.info("Exported %d documents to %s", len(exported), self.out)
        return exported
