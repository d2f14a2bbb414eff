import io
import json
from typing import Any

import yaml

from ..core.model import (
    HeadingSection,
    ImageSection,
    LinkSection,
    ListSection,
    PmapData,
    Section,
    TextSection,
)


def section_to_dict(section: Section) -> dict[str, Any]:
    # Each kind only carries its own fields
    if isinstance(section, TextSection):
        return {"type": "text", "content": section.content}
    if isinstance(section, HeadingSection):
        return {"type": "heading", "content": section.content, "level": section.level}
    if isinstance(section, ListSection):
        return {"type": "list", "items": list(section.items)}
    if isinstance(section, ImageSection):
        return {"type": "image", "url": section.url, "alt": section.alt}
    return {"type": "link", "url": section.url, "content": section.content}


def section_from_dict(data: dict[str, Any]) -> Section:
    kind = data.get("type")
    if kind == "text":
        return TextSection(content=data.get("content", ""))
    if kind == "heading":
        return HeadingSection(content=data.get("content", ""), level=int(data.get("level", 1)))
    if kind == "list":
        return ListSection(items=tuple(data.get("items") or ()))
    if kind == "image":
        return ImageSection(url=data.get("url", ""), alt=data.get("alt") or "")
    if kind == "link":
        return LinkSection(url=data.get("url", ""), content=data.get("content", ""))
    raise ValueError(f"Unknown section type: {kind!r}")


def document_to_dict(doc: PmapData) -> dict[str, Any]:
    out: dict[str, Any] = {}
    if doc.title is not None:
        out["title"] = doc.title
    if doc.description is not None:
        out["description"] = doc.description
    out["sections"] = [section_to_dict(s) for s in doc.sections]
    return out


def document_from_dict(data: dict[str, Any]) -> PmapData:
    return PmapData(
        title=data.get("title"),
        description=data.get("description"),
        sections=tuple(section_from_dict(s) for s in data.get("sections") or ()),
    )


def dump_json(doc: PmapData, indent: int | None = 2) -> str:
    return json.dumps(document_to_dict(doc), indent=indent, ensure_ascii=False)


def dump_yaml(doc: PmapData) -> str:
    buf = io.StringIO()
    yaml.safe_dump(document_to_dict(doc), buf, sort_keys=False, allow_unicode=True)
    return buf.getvalue()
