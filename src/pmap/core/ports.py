from typing import Iterable, Protocol

from .model import DocumentId, PmapData, Section


class StorageStrategy(Protocol):
    """
    Flat store: one directory, files named <id>.pmap
    """

    def read_raw(self, id: DocumentId) -> str | None:
        pass

    def write_raw(self, id: DocumentId, contents: str) -> None:
        pass

    def list_all_ids(self) -> Iterable[DocumentId]:
        pass


class ParserStrategy(Protocol):
    """
    Turn raw pmap text into a document. MUST NOT raise on any input.
    """

    def parse(self, text: str) -> PmapData:
        pass


class Renderer(Protocol):
    def render_section(self, section: Section) -> str:
        pass

    def render_document(self, doc: PmapData) -> str:
        pass


class ExportAdapter(Protocol):
    def export_all(self) -> list[DocumentId]:
        pass
