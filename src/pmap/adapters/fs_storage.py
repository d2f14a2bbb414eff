from pathlib import Path
from typing import Iterable

from ..core.ports import StorageStrategy

EXTENSION = ".pmap"
# utf-8-sig drops a leading byte order mark on read
READ_ENCODING = "utf-8-sig"


class FsStorage(StorageStrategy):
    """Documents are <root>/<id>.pmap; the id is the file stem."""

    def __init__(self, root: Path):
        self.root = root

    def path_for(self, id: str) -> Path:
        return self.root / f"{id}{EXTENSION}"

    def read_raw(self, id: str) -> str | None:
        path = self.path_for(id)
        if not path.is_file():
            return None
        return path.read_text(encoding=READ_ENCODING)

    def write_raw(self, id: str, contents: str) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        self.path_for(id).write_text(contents, encoding="utf-8")

    def list_all_ids(self) -> Iterable[str]:
        if not self.root.is_dir():
            return []
        return sorted(p.stem for p in self.root.glob(f"*{EXTENSION}") if p.is_file())
