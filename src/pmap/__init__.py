"""pmap: a small markup dialect for non-coders, parsed into a document model."""

__version__ = "0.1.0"

from .adapters.pmap_parser import PmapParser, parse_pmap  # noqa: E402
from .core.model import PmapData  # noqa: E402
from .format.inline import process_inline_markup  # noqa: E402

__all__ = [
    "__version__",
    "PmapData",
    "PmapParser",
    "parse_pmap",
    "process_inline_markup",
]
