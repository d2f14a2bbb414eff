"""Configuration loader for pmap.toml."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

CONFIG_NAME = "pmap.toml"


@dataclass
class LibraryConfig:
    """Where .pmap documents live."""
    root: Path


@dataclass
class ExportConfig:
    """HTML export configuration."""
    out: Path
    escape_html: bool = True
    stylesheet: str | None = None


@dataclass
class LogConfig:
    """Logging configuration."""
    level: str = "WARNING"


@dataclass
class PmapConfig:
    """Complete pmap configuration."""
    library: LibraryConfig
    export: ExportConfig
    log: LogConfig


def load_config(config_path: Path | None = None, root: Path | None = None) -> PmapConfig:
    """
    Load configuration from pmap.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/pmap.toml
    3. root/pmap.toml

    Args:
        config_path: Explicit path to config file
        root: Library root used for the fallback search

    Returns:
        PmapConfig with resolved settings

    Raises:
        FileNotFoundError: If config_path is given but does not exist
    """
    toml_data: dict[str, Any] = {}

    search_paths = []
    if config_path:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / CONFIG_NAME)
    if root:
        search_paths.append(root / CONFIG_NAME)

    for path in search_paths:
        if path.exists():
            with open(path, "rb") as f:
                toml_data = tomllib.load(f)
            break

    library_data = toml_data.get("library", {})
    library_root = Path(library_data.get("root", root or Path("./docs")))

    export_data = toml_data.get("export", {})
    export_config = ExportConfig(
        out=Path(export_data.get("out", "site")),
        escape_html=export_data.get("escape_html", True),
        stylesheet=export_data.get("stylesheet"),
    )

    log_data = toml_data.get("log", {})
    log_config = LogConfig(level=str(log_data.get("level", "WARNING")).upper())

    return PmapConfig(
        library=LibraryConfig(root=library_root),
        export=export_config,
        log=log_config,
    )
