"""CLI entrypoints for codecontext commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .logging import configure_logging
from .orchestrator import Orchestrator
from .render import render_outline
from .stores import IndexStoreError


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the repository root (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="codecontext",
        description="Maintain an incremental index of functions, classes and call graphs.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser(
        "build",
        help="Synchronise the index with the working tree.",
    )
    _add_verbose_option(build_parser, suppress_default=True)
    _add_path_argument(build_parser)
    build_parser.add_argument(
        "--force",
        action="store_true",
        help="Ignore stored state and rebuild the index from scratch.",
    )

    show_parser = subparsers.add_parser(
        "show",
        help="Show every indexed symbol with the given name.",
    )
    _add_verbose_option(show_parser, suppress_default=True)
    show_parser.add_argument("name", help="Symbol name to look up.")
    _add_path_argument(show_parser)
    show_parser.add_argument(
        "--json",
        action="store_true",
        help="Print symbol records as JSON.",
    )

    outline_parser = subparsers.add_parser(
        "outline",
        help="Print a markdown outline of the indexed symbols.",
    )
    _add_verbose_option(outline_parser, suppress_default=True)
    _add_path_argument(outline_parser)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for codecontext commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    if args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
        return

    orchestrator = Orchestrator()
    try:
        config = load_config(Path(args.path))
        outcome = orchestrator.run(
            args.path,
            force=bool(getattr(args, "force", False)),
            config=config,
        )
    except (FileNotFoundError, NotADirectoryError, ConfigError) as exc:
        parser.exit(1, f"{exc}\n")
    except IndexStoreError as exc:
        parser.exit(1, f"codecontext {args.command} failed: {exc}\n")

    index = outcome.index
    if args.command == "build":
        print(
            f"Index {outcome.mode}: {len(index.files)} files, {len(index.symbols)} symbols "
            f"({len(outcome.delta.reextract)} re-extracted, {len(outcome.delta.removed)} removed)"
        )
    elif args.command == "show":
        matches = index.symbols_named(args.name)
        if not matches:
            parser.exit(1, f"No symbol named {args.name!r}\n")
        if args.json:
            print(json.dumps([symbol.to_dict() for symbol in matches], indent=2))
            return
        for symbol in matches:
            print(f"{symbol.kind} {symbol.signature}")
            print(f"  {symbol.file}:{symbol.line_start}-{symbol.line_end}")
            if symbol.doc:
                print(f"  {symbol.doc.splitlines()[0]}")
            print(f"  calls: {', '.join(symbol.internal_calls) or '-'}")
            print(f"  external: {', '.join(symbol.external_calls) or '-'}")
            print(f"  called by: {', '.join(symbol.called_by) or '-'}")
    elif args.command == "outline":
        repo_path = Path(args.path).expanduser().resolve()
        print(
            render_outline(
                index,
                project_name=repo_path.name or "Repository",
                templates_dir=config.outline.templates_dir,
            ),
            end="",
        )
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])
