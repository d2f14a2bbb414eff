"""Runtime wiring helper for CLI and API."""

from dataclasses import dataclass
from pathlib import Path

from .adapters.fs_storage import FsStorage
from .adapters.pmap_parser import PmapParser
from .config import PmapConfig, load_config
from .core.library import Library
from .export.html import HtmlExporter, HtmlRenderer


@dataclass
class Runtime:
    """Container for all wired components."""
    library: Library
    renderer: HtmlRenderer
    config: PmapConfig

    def exporter(self, out: Path | None = None) -> HtmlExporter:
        return HtmlExporter(self.library, self.renderer, out or self.config.export.out)


def build_runtime(
    root: Path | None = None,
    config_path: Path | None = None,
) -> Runtime:
    """Build and wire all components for a document library."""
    config = load_config(config_path=config_path, root=root)

    # CLI argument wins over config
    if root is None:
        root = config.library.root

    library = Library(FsStorage(root), PmapParser())
    renderer = HtmlRenderer(
        escape=config.export.escape_html,
        stylesheet=config.export.stylesheet,
    )
    return Runtime(library=library, renderer=renderer, config=config)
