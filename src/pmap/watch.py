"""Watch mode for pmap - re-export documents when their files change."""

import json
import logging
import signal
import sys
import threading
import time
from pathlib import Path
from typing import Any, Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .adapters.fs_storage import EXTENSION
from .export.html import HtmlExporter

logger = logging.getLogger(__name__)


class DebounceHandler(FileSystemEventHandler):
    """File system event handler with debouncing."""

    def __init__(
        self,
        root: Path,
        on_batch: Callable[[set[str], set[str]], None] | None,
        debounce_ms: int = 150,
    ):
        super().__init__()
        self.root = root
        self.on_batch = on_batch
        self.debounce_ms = debounce_ms

        # Observer thread records, main loop flushes
        self._lock = threading.Lock()
        self.changed: set[str] = set()
        self.deleted: set[str] = set()
        self.last_event_time = 0.0

    def _extract_id(self, path: Path) -> str | None:
        name = path.name
        if name.startswith(".") or name.endswith("~") or name.endswith(".swp"):
            return None
        if not name.endswith(EXTENSION):
            return None
        return path.stem

    def _record(self, event: FileSystemEvent, deleted: bool) -> None:
        if event.is_directory:
            return
        doc_id = self._extract_id(Path(str(event.src_path)))
        if not doc_id:
            return
        with self._lock:
            if deleted:
                self.changed.discard(doc_id)
                self.deleted.add(doc_id)
            else:
                self.deleted.discard(doc_id)
                self.changed.add(doc_id)
            self.last_event_time = time.time()

    def on_created(self, event: FileSystemEvent) -> None:
        self._record(event, deleted=False)

    def on_modified(self, event: FileSystemEvent) -> None:
        self._record(event, deleted=False)

    def on_deleted(self, event: FileSystemEvent) -> None:
        self._record(event, deleted=True)

    def check_and_flush(self) -> None:
        """Flush if the debounce period has elapsed since the last event."""
        if not (self.changed or self.deleted):
            return
        elapsed = (time.time() - self.last_event_time) * 1000
        if elapsed >= self.debounce_ms:
            self.flush()

    def flush(self) -> None:
        """Process accumulated events."""
        with self._lock:
            if not (self.changed or self.deleted):
                return
            changed, self.changed = self.changed, set()
            deleted, self.deleted = self.deleted, set()
        if self.on_batch:
            self.on_batch(changed, deleted)


def make_batch_handler(
    exporter: HtmlExporter,
    quiet: bool = False,
    json_output: bool = False,
) -> Callable[[set[str], set[str]], None]:
    """Build the callback that re-exports changed ids and removes deleted ones."""

    def handle_batch(changed: set[str], deleted: set[str]) -> None:
        start_time = time.time()
        try:
            exported = [i for i in sorted(changed) if exporter.export_one(i) is not None]
            for doc_id in sorted(deleted):
                exporter.remove_one(doc_id)
            exporter.write_index()
        except Exception as e:
            logger.exception("Export batch failed")
            if json_output:
                print(json.dumps({"type": "error", "message": str(e)}), flush=True)
            else:
                print(f"Error: {e}", file=sys.stderr, flush=True)
            return

        duration_ms = int((time.time() - start_time) * 1000)
        if json_output:
            event = {
                "type": "batch",
                "exported": exported,
                "deleted": sorted(deleted),
                "duration_ms": duration_ms,
            }
            print(json.dumps(event), flush=True)
        elif not quiet:
            print(f"Exported: +{len(exported)} -{len(deleted)} ({duration_ms}ms)", flush=True)

    return handle_batch


def watch_library(
    root: Path,
    exporter: HtmlExporter,
    debounce_ms: int = 150,
    quiet: bool = False,
    json_output: bool = False,
) -> int:
    """
    Watch a library directory and keep the HTML export in sync.

    Args:
        root: Directory holding .pmap files
        exporter: Exporter writing the HTML site
        debounce_ms: Debounce window in milliseconds
        quiet: Suppress output
        json_output: Output JSON events instead of human-readable

    Returns:
        Exit code
    """
    if not root.exists():
        print(f"Error: Library not found: {root}", file=sys.stderr)
        return 1

    exporter.export_all()

    running = True

    def signal_handler(signum: int, frame: Any) -> None:
        nonlocal running
        running = False
        if not quiet and not json_output:
            print("\nShutting down...", flush=True)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    handler = DebounceHandler(root, make_batch_handler(exporter, quiet, json_output), debounce_ms)
    observer = Observer()
    observer.schedule(handler, str(root), recursive=False)

    if not quiet and not json_output:
        print(f"Watching {root} (debounce: {debounce_ms}ms)", flush=True)
        print("Press Ctrl+C to stop", flush=True)

    observer.start()
    try:
        while running:
            time.sleep(0.1)
            handler.check_and_flush()
    finally:
        handler.flush()
        observer.stop()
        observer.join()

    if not quiet and not json_output:
        print("Watch stopped", flush=True)
    return 0
