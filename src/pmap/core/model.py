from __future__ import annotations
from dataclasses import dataclass, field
from typing import Literal, Union

DocumentId = str
SectionKind = Literal["text", "heading", "list", "image", "link"]


@dataclass(frozen=True)
class TextSection:
    content: str
    kind: SectionKind = field(default="text", init=False)


@dataclass(frozen=True)
class HeadingSection:
    content: str
    level: int  # number of leading '#', no upper bound
    kind: SectionKind = field(default="heading", init=False)


@dataclass(frozen=True)
class ListSection:
    items: tuple[str, ...]  # never empty
    kind: SectionKind = field(default="list", init=False)


@dataclass(frozen=True)
class ImageSection:
    url: str
    alt: str = ""
    kind: SectionKind = field(default="image", init=False)


@dataclass(frozen=True)
class LinkSection:
    # Reserved: the block parser never emits this, inline links become markup.
    url: str
    content: str = ""
    kind: SectionKind = field(default="link", init=False)


Section = Union[TextSection, HeadingSection, ListSection, ImageSection, LinkSection]


@dataclass(frozen=True)
class PmapData:
    title: str | None = None
    description: str | None = None
    sections: tuple[Section, ...] = ()
