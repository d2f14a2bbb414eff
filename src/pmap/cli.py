"""CLI for pmap - parse, lint and render .pmap documents."""

import argparse
import json
import logging
import platform
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .adapters.fs_storage import READ_ENCODING
from .adapters.pmap_parser import parse_pmap
from .adapters.yaml_codec import document_to_dict, dump_json, dump_yaml
from .format.inline import process_inline_markup
from .lint import Finding, lint_text
from .runtime import build_runtime

logger = logging.getLogger(__name__)


def _read_source(ref: str, rt: Any) -> str | None:
    """Read a document given a file path or a library id."""
    path = Path(ref)
    if path.is_file():
        return path.read_text(encoding=READ_ENCODING)
    return rt.library.get_raw(ref)


def _not_found(ref: str) -> int:
    print(f"Document {ref} not found", file=sys.stderr)
    return 1


def cmd_parse(args: argparse.Namespace, rt: Any) -> int:
    """Print the parsed document model."""
    text = _read_source(args.ref, rt)
    if text is None:
        return _not_found(args.ref)
    doc = parse_pmap(text)
    if args.format == "yaml":
        print(dump_yaml(doc), end="")
    else:
        print(dump_json(doc))
    return 0


def cmd_inline(args: argparse.Namespace, rt: Any) -> int:
    """Print text with inline markup applied."""
    print(process_inline_markup(args.text))
    return 0


def cmd_render(args: argparse.Namespace, rt: Any) -> int:
    """Print a document as HTML."""
    text = _read_source(args.ref, rt)
    if text is None:
        return _not_found(args.ref)
    doc = parse_pmap(text)
    if args.body_only:
        print(rt.renderer.render_body(doc))
    else:
        print(rt.renderer.render_document(doc), end="")
    return 0


def cmd_ls(args: argparse.Namespace, rt: Any) -> int:
    """List documents in the library."""
    ids = list(rt.library.list_ids())
    if args.json:
        out = []
        for doc_id in ids:
            doc = rt.library.get(doc_id)
            out.append({
                "id": doc_id,
                "title": doc.title if doc else None,
                "description": doc.description if doc else None,
            })
        print(json.dumps(out, indent=2, ensure_ascii=False))
    else:
        for doc_id in ids:
            print(doc_id)
    return 0


def cmd_lint(args: argparse.Namespace, rt: Any) -> int:
    """Report markup the parser silently tolerates."""
    refs = args.refs or list(rt.library.list_ids())

    all_findings: list[tuple[str, Finding]] = []
    for ref in refs:
        text = _read_source(ref, rt)
        if text is None:
            all_findings.append((ref, Finding("error", "Document not found")))
            continue
        for f in lint_text(text):
            all_findings.append((ref, f))

    if args.json:
        output = [
            {"document": ref, "severity": f.severity, "message": f.message, "line": f.line}
            for ref, f in all_findings
        ]
        print(json.dumps(output, indent=2))
    elif not args.quiet:
        for ref, f in all_findings:
            loc = f"{ref}:{f.line}" if f.line else ref
            print(f"{loc}: [{f.severity}] {f.message}")

    return 1 if any(f.severity == "error" for _, f in all_findings) else 0


def cmd_export(args: argparse.Namespace, rt: Any) -> int:
    """Export the library as an HTML site."""
    exporter = rt.exporter(args.out)
    exported = exporter.export_all()
    if args.json:
        print(json.dumps({"out": str(exporter.out), "exported": exported}))
    elif not args.quiet:
        print(f"Exported {len(exported)} documents to {exporter.out}")
    return 0


def cmd_show(args: argparse.Namespace, rt: Any) -> int:
    """Print a library document's metadata."""
    doc = rt.library.get(args.id)
    if doc is None:
        return _not_found(args.id)
    data = document_to_dict(doc)
    data.pop("sections")
    data["sections"] = len(doc.sections)
    print(json.dumps(data, indent=2, ensure_ascii=False))
    return 0


def cmd_watch(args: argparse.Namespace, rt: Any) -> int:
    """Watch the library and re-export on change."""
    try:
        from .watch import watch_library
    except ImportError as e:
        print(
            "Error: watchdog library not installed. Install with: pip install pmap[watch]",
            file=sys.stderr,
        )
        print(f"Details: {e}", file=sys.stderr)
        return 1

    return watch_library(
        root=rt.library.storage.root,
        exporter=rt.exporter(args.out),
        debounce_ms=args.debounce_ms,
        quiet=args.quiet,
        json_output=args.json,
    )


def cmd_serve(args: argparse.Namespace, rt: Any) -> int:
    """Start local JSON API server."""
    try:
        import uvicorn

        from .api.app import create_app, generate_token
    except ImportError as e:
        print(
            "Error: API dependencies not installed. Install with: pip install pmap[api]",
            file=sys.stderr,
        )
        print(f"Details: {e}", file=sys.stderr)
        return 1

    if args.token == "auto":
        token = generate_token()
        print(f"Generated bearer token: {token}")
        print(f"Use in requests: Authorization: Bearer {token}")
    elif args.token == "none":
        print("Warning: Running without authentication. Only use in trusted environments.")
        token = None
    else:
        token = args.token

    app = create_app(rt, token=token)
    uvicorn.run(app, host=args.host, port=args.port, log_level="warning")
    return 0


def _version_string() -> str:
    return (
        f"pmap {__version__}\n"
        f"python {platform.python_version()}\n"
        f"platform {platform.platform()}"
    )


def _setup_logging(verbose: int, config_level: str) -> None:
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = getattr(logging, config_level, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pmap", description="Parse and render .pmap documents"
    )
    parser.add_argument(
        "--version", action="version", version=_version_string()
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: search cwd/pmap.toml, root/pmap.toml)",
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=None,
        help="Directory holding .pmap documents (overrides config)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Minimize output"
    )
    parser.add_argument(
        "--json", action="store_true", help="Machine-readable output"
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="More logging (-vv for debug)"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    parser_parse = subparsers.add_parser("parse", help="Print the parsed document model")
    parser_parse.add_argument("ref", help="Document id or path to a .pmap file")
    parser_parse.add_argument(
        "--format", choices=["json", "yaml"], default="json",
        help="Output format (default: json)"
    )

    parser_inline = subparsers.add_parser("inline", help="Apply inline markup to text")
    parser_inline.add_argument("text")

    parser_render = subparsers.add_parser("render", help="Render a document as HTML")
    parser_render.add_argument("ref", help="Document id or path to a .pmap file")
    parser_render.add_argument(
        "--body-only", action="store_true", help="Print only the section markup"
    )

    subparsers.add_parser("ls", help="List documents")

    parser_show = subparsers.add_parser("show", help="Print document metadata")
    parser_show.add_argument("id")

    parser_lint = subparsers.add_parser("lint", help="Check documents for markup problems")
    parser_lint.add_argument(
        "refs", nargs="*", help="Document ids or paths (default: whole library)"
    )

    parser_export = subparsers.add_parser("export", help="Export library as HTML")
    parser_export.add_argument(
        "--out", type=Path, default=None, help="Output directory (overrides config)"
    )

    parser_watch = subparsers.add_parser("watch", help="Re-export documents on change")
    parser_watch.add_argument(
        "--out", type=Path, default=None, help="Output directory (overrides config)"
    )
    parser_watch.add_argument(
        "--debounce-ms", type=int, default=150, help="Debounce window (default: 150)"
    )

    parser_serve = subparsers.add_parser("serve", help="Start local JSON API server")
    parser_serve.add_argument("--host", default="127.0.0.1")
    parser_serve.add_argument("--port", type=int, default=8765)
    parser_serve.add_argument(
        "--token", default="auto",
        help="Bearer token: 'auto' (generate), 'none' (disable) or a literal token"
    )

    return parser


HANDLERS = {
    "parse": cmd_parse,
    "inline": cmd_inline,
    "render": cmd_render,
    "ls": cmd_ls,
    "show": cmd_show,
    "lint": cmd_lint,
    "export": cmd_export,
    "watch": cmd_watch,
    "serve": cmd_serve,
}


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    try:
        rt = build_runtime(root=args.root, config_path=args.config)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    _setup_logging(args.verbose, rt.config.log.level)

    handler = HANDLERS.get(args.cmd)
    if handler is None:
        print(f"Unknown command: {args.cmd}", file=sys.stderr)
        sys.exit(1)

    try:
        exit_code = handler(args, rt)
    except Exception as e:
        logger.debug("Command %s failed", args.cmd, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
