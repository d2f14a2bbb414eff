import logging
from collections.abc import Iterable

from .model import DocumentId, PmapData
from .ports import ParserStrategy, StorageStrategy

logger = logging.getLogger(__name__)


class Library:
    def __init__(self, storage: StorageStrategy, parser: ParserStrategy):
        self.storage = storage
        self.parser = parser

    def get_raw(self, id: DocumentId) -> str | None:
        return self.storage.read_raw(id)

    def get(self, id: DocumentId) -> PmapData | None:
        raw = self.storage.read_raw(id)
        if raw is None:
            logger.debug("Document %s not found", id)
            return None
        return self.parser.parse(raw)

    def put_raw(self, id: DocumentId, contents: str) -> None:
        self.storage.write_raw(id, contents)

    def list_ids(self) -> Iterable[DocumentId]:
        return self.storage.list_all_ids()
