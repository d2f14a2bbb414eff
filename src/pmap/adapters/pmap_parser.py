import logging
import re
from dataclasses import dataclass, field

from ..core.model import (
    HeadingSection,
    ImageSection,
    ListSection,
    PmapData,
    Section,
    TextSection,
)
from ..core.ports import ParserStrategy

logger = logging.getLogger(__name__)

METADATA_DELIM = "---"
HEADING_RE = re.compile(r"^#+")
IMAGE_RE = re.compile(r"\[image:\s*([^|]+)\s*(?:\|\s*(.+))?\]")
IMAGE_PREFIX = "[image:"
TITLE_KEY = "title:"
DESCRIPTION_KEY = "description:"
# Whitespace plus U+FEFF (byte order mark)
TRIM_RE = re.compile(r"^[\s\ufeff]+|[\s\ufeff]+$")


@dataclass
class _ScanState:
    """Accumulator owned by a single parse call."""
    sections: list[Section] = field(default_factory=list)
    title: str | None = None
    description: str | None = None
    pending_list: list[str] | None = None
    in_metadata: bool = False

    def flush_list(self) -> None:
        if self.pending_list:
            self.sections.append(ListSection(items=tuple(self.pending_list)))
        self.pending_list = None

    def emit(self, section: Section) -> None:
        self.flush_list()
        self.sections.append(section)

    def result(self) -> PmapData:
        return PmapData(
            title=self.title,
            description=self.description,
            sections=tuple(self.sections),
        )


def parse_image(line: str) -> ImageSection | None:
    """Extract `[image: url | alt]`; alt is optional. None when the shape doesn't match."""
    m = IMAGE_RE.search(line)
    if not m:
        return None
    url = trim_line(m.group(1))
    alt = trim_line(m.group(2) or "")
    return ImageSection(url=url, alt=alt)


def trim_line(line: str) -> str:
    return TRIM_RE.sub("", line)


def heading_level(line: str) -> int:
    m = HEADING_RE.match(line)
    return len(m.group(0)) if m else 1


class PmapParser(ParserStrategy):
    def parse(self, text: str) -> PmapData:
        state = _ScanState()

        for i, ln in enumerate(text.split("\n")):
            line = trim_line(ln)

            # Blank line closes an open list and nothing else
            if not line:
                state.flush_list()
                continue

            # Metadata block is only opened by the very first line
            if line == METADATA_DELIM and i == 0:
                state.in_metadata = True
                continue
            if line == METADATA_DELIM and state.in_metadata:
                state.in_metadata = False
                continue

            if state.in_metadata:
                if line.startswith(TITLE_KEY):
                    state.title = trim_line(line[len(TITLE_KEY):])
                elif line.startswith(DESCRIPTION_KEY):
                    state.description = trim_line(line[len(DESCRIPTION_KEY):])
                continue

            if line.startswith("#"):
                level = heading_level(line)
                state.emit(HeadingSection(content=trim_line(line[level:]), level=level))
                continue

            if line.startswith(IMAGE_PREFIX):
                state.flush_list()
                image = parse_image(line)
                if image is not None:
                    state.sections.append(image)
                else:
                    logger.debug("Dropping malformed image line %d: %r", i + 1, line)
                continue

            if line.startswith("-"):
                if state.pending_list is None:
                    state.pending_list = []
                state.pending_list.append(trim_line(line[1:]))
                continue

            state.emit(TextSection(content=line))

        state.flush_list()

        if state.in_metadata:
            logger.debug("Metadata block was never closed; rest of document ignored")
        logger.debug("Parsed %d sections", len(state.sections))
        return state.result()


def parse_pmap(content: str) -> PmapData:
    """Parse .pmap text into a document.

    Never raises: unrecognised lines degrade to paragraphs and malformed
    image declarations are dropped.
    """
    return PmapParser().parse(content)
