"""Tests for watch mode functionality."""

import json
import tempfile
from pathlib import Path
from threading import Thread
from types import SimpleNamespace

import pytest

pytest.importorskip("watchdog")

from pmap.adapters.fs_storage import FsStorage  # noqa: E402
from pmap.adapters.pmap_parser import PmapParser  # noqa: E402
from pmap.core.library import Library  # noqa: E402
from pmap.export.html import HtmlExporter, HtmlRenderer  # noqa: E402
from pmap.watch import DebounceHandler, make_batch_handler  # noqa: E402


def event(path: str, is_directory: bool = False) -> SimpleNamespace:
    return SimpleNamespace(src_path=path, is_directory=is_directory)


def test_debounce_collects_pmap_events():
    """Test only .pmap files are tracked, and delete overrides change."""
    batches = []
    handler = DebounceHandler(Path("."), lambda c, d: batches.append((c, d)), debounce_ms=0)

    handler.on_created(event("docs/a.pmap"))
    handler.on_modified(event("docs/b.pmap"))
    handler.on_modified(event("docs/notes.md"))
    handler.on_modified(event("docs/.c.pmap"))
    handler.on_modified(event("docs/a.pmap.swp"))
    handler.on_created(event("docs/sub", is_directory=True))
    handler.on_deleted(event("docs/b.pmap"))

    handler.check_and_flush()

    assert batches == [({"a"}, {"b"})]
    assert not handler.changed and not handler.deleted


def test_flush_without_events_is_noop():
    """Test nothing is reported when no events arrived."""
    batches = []
    handler = DebounceHandler(Path("."), lambda c, d: batches.append((c, d)))
    handler.flush()
    assert batches == []


def test_check_and_flush_waits_for_debounce():
    """Test events inside the debounce window are held back."""
    batches = []
    handler = DebounceHandler(Path("."), lambda c, d: batches.append((c, d)), debounce_ms=60_000)
    handler.on_modified(event("x.pmap"))
    handler.check_and_flush()
    assert batches == []


def test_batch_handler_exports_and_removes(capsys):
    """Test a batch re-exports changed documents and removes deleted pages."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir) / "docs"
        out = Path(tmpdir) / "site"
        library = Library(FsStorage(root), PmapParser())
        exporter = HtmlExporter(library, HtmlRenderer(), out)

        library.put_raw("keep", "# Keep")
        out.mkdir()
        (out / "gone.html").write_text("old")

        handle = make_batch_handler(exporter, json_output=True)
        handle({"keep"}, {"gone"})

        assert (out / "keep.html").exists()
        assert not (out / "gone.html").exists()
        line = json.loads(capsys.readouterr().out.strip())
        assert line["type"] == "batch"
        assert line["exported"] == ["keep"]
        assert line["deleted"] == ["gone"]


def test_events_during_flush_are_not_lost():
    """Test events recorded from the observer thread while flushing all reach a batch."""
    seen: set[str] = set()
    handler = DebounceHandler(Path("."), lambda c, d: seen.update(c), debounce_ms=0)
    ids = [f"doc{i}" for i in range(2000)]

    def record_all():
        for doc_id in ids:
            handler.on_modified(event(f"{doc_id}.pmap"))

    worker = Thread(target=record_all)
    worker.start()
    while worker.is_alive():
        handler.flush()
    worker.join()
    handler.flush()

    assert seen == set(ids)


def test_flushed_batch_is_detached_from_pending_events():
    """Test later events go to the next batch, not the one already handed out."""
    batches = []
    handler = DebounceHandler(Path("."), lambda c, d: batches.append(c), debounce_ms=0)

    handler.on_modified(event("a.pmap"))
    handler.flush()
    handler.on_modified(event("b.pmap"))
    handler.flush()

    assert batches == [{"a"}, {"b"}]
