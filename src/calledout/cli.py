"""CLI for calledout - jump to and link named callouts in a Markdown vault."""

import argparse
import json
import logging
import platform
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .adapters.surfaces import DocumentSurface, EditorSurface, StreamSurface
from .core.indexer import collect_callouts
from .core.matcher import rank
from .core.model import Cursor
from .core.session import Action, CalloutSession, SessionState
from .render import callout_to_dict, match_to_dict, suggestion_text
from .runtime import build_runtime


def cmd_ls(args: argparse.Namespace, rt: Any) -> int:
    """List every named callout in the vault."""
    callouts = collect_callouts(rt.vault)

    if args.type:
        wanted = args.type.lower()
        callouts = [c for c in callouts if c.type.lower() == wanted]

    if args.json:
        print(json.dumps([callout_to_dict(c) for c in callouts], indent=2))
    else:
        for c in callouts:
            print(f"{c.key}\t{suggestion_text(c)}")

    return 0


def cmd_find(args: argparse.Namespace, rt: Any) -> int:
    """Fuzzy search callout titles."""
    limit = args.limit if args.limit is not None else rt.config.search.limit
    results = rank(collect_callouts(rt.vault), args.query)[:limit]

    if args.json:
        print(json.dumps([match_to_dict(r) for r in results], indent=2))
    else:
        for r in results:
            print(f"{suggestion_text(r.callout)}\t{r.callout.key}")

    if not results:
        if not args.quiet:
            print(f"No callout matches '{args.query}'", file=sys.stderr)
        return 1
    return 0


def _run_session(args: argparse.Namespace, rt: Any, action: Action, surface: Any) -> Any:
    limit = args.limit if args.limit is not None else rt.config.search.limit
    session = CalloutSession(action, rt.vault, rt.linker, surface, limit=limit)
    session.start()
    results = session.update_query(args.query)
    if not results:
        print(f"No callout matches '{args.query}'", file=sys.stderr)
        session.cancel()
        return None
    if not 1 <= args.pick <= len(results):
        print(f"Only {len(results)} callouts match '{args.query}'", file=sys.stderr)
        session.cancel()
        return None
    return session.choose(args.pick - 1)


def cmd_jump(args: argparse.Namespace, rt: Any) -> int:
    """Jump to a named callout: print its location or open it in an editor."""
    if args.editor:
        surface: Any = EditorSurface(rt.storage.path, command=rt.config.editor.command or None)
    else:
        fmt = "json" if args.json else args.format
        surface = StreamSurface(path_of=rt.storage.path, format_type=fmt)

    outcome = _run_session(args, rt, Action.JUMP, surface)
    if outcome is None:
        return 1
    return 0 if outcome.state is SessionState.DONE else 1


def cmd_link(args: argparse.Namespace, rt: Any) -> int:
    """Anchor a named callout (once) and deliver a link to it."""
    if args.into:
        surface: Any = DocumentSurface(rt.vault, args.into, Cursor(args.line - 1, args.col - 1))
    else:
        surface = StreamSurface()

    outcome = _run_session(args, rt, Action.LINK, surface)
    if outcome is None:
        return 1
    if outcome.state is not SessionState.DONE:
        print(f"Nothing linked: {outcome.reason}", file=sys.stderr)
        return 1

    plan = outcome.link
    if not args.quiet:
        if plan.mutation is not None:
            print(f"Added ^{plan.anchor_id} to {outcome.callout.doc_id}", file=sys.stderr)
        if args.into:
            print(f"Linked {plan.link_text} into {args.into}", file=sys.stderr)
    return 0


def cmd_serve(args: argparse.Namespace, rt: Any) -> int:
    """Start local JSON API server."""
    try:
        import uvicorn

        from .api.app import create_app, generate_token
    except ImportError as e:
        print(
            "Error: API dependencies not installed. "
            "Install with: pip install calledout[api]",
            file=sys.stderr
        )
        print(f"Details: {e}", file=sys.stderr)
        return 1

    token_arg = getattr(args, 'token', 'auto')
    token = None

    if token_arg == 'auto':
        token = generate_token()
        print(f"Generated bearer token: {token}")
        print(f"Use in requests: Authorization: Bearer {token}")
    elif token_arg == 'none':
        print("Warning: Running without authentication. Only use in trusted environments.")
        token = None
    else:
        token = token_arg

    app = create_app(rt, token=token, enable_cors=getattr(args, 'cors', False))

    host = getattr(args, 'host', '127.0.0.1')
    port = getattr(args, 'port', 8766)

    print(f"Starting server on http://{host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level="info")

    return 0


def positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return n


def version_text() -> str:
    return (
        f"calledout {__version__}\n"
        f"python {platform.python_version()}\n"
        f"platform {platform.platform()}"
    )


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="calledout", description="Jump to and link named callouts"
    )
    parser.add_argument(
        "--version", action="version", version=version_text()
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: search cwd/calledout.toml, vault/calledout.toml)",
    )
    parser.add_argument(
        "--vault",
        type=Path,
        default=None,
        help="Path to vault directory (overrides config)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Minimize output"
    )
    parser.add_argument(
        "--json", action="store_true", help="Machine-readable output"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Debug logging on stderr"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    # ls command
    parser_ls = subparsers.add_parser("ls", help="List named callouts")
    parser_ls.add_argument("--type", help="Only callouts of this type (e.g. note, warning)")

    # find command
    parser_find = subparsers.add_parser("find", help="Fuzzy search callout titles")
    parser_find.add_argument("query", help="Search query")
    parser_find.add_argument(
        "--limit", type=positive_int, default=None,
        help="Maximum number of results (default: from config, 10)"
    )

    # jump and link share the selection arguments
    for name, help_text in (
        ("jump", "Jump to a named callout"),
        ("link", "Link to a named callout"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("query", help="Search query")
        sub.add_argument(
            "--pick", type=int, default=1,
            help="Which result to choose, 1-based (default: 1)"
        )
        sub.add_argument(
            "--limit", type=positive_int, default=None,
            help="Maximum number of results (default: from config, 10)"
        )
        if name == "jump":
            sub.add_argument(
                "--format", choices=["json", "tsv"], default="json",
                help="Location output format (default: json)"
            )
            sub.add_argument(
                "--editor", action="store_true",
                help="Open the callout in $EDITOR instead of printing its location"
            )
        else:
            sub.add_argument(
                "--into", help="Insert the link into this document instead of printing it"
            )
            sub.add_argument(
                "--line", type=int, default=1, help="1-based line for --into (default: 1)"
            )
            sub.add_argument(
                "--col", type=int, default=1, help="1-based column for --into (default: 1)"
            )

    # serve command
    parser_serve = subparsers.add_parser("serve", help="Start local JSON API server")
    parser_serve.add_argument(
        "--host", default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)"
    )
    parser_serve.add_argument(
        "--port", type=int, default=8766,
        help="Port to bind to (default: 8766)"
    )
    parser_serve.add_argument(
        "--token", default="auto",
        help="Bearer token (auto|<string>|none, default: auto)"
    )
    parser_serve.add_argument(
        "--cors", action="store_true",
        help="Enable CORS (default: false)"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        rt = build_runtime(vault_path=args.vault, config_path=args.config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    handlers = {
        "ls": cmd_ls,
        "find": cmd_find,
        "jump": cmd_jump,
        "link": cmd_link,
        "serve": cmd_serve,
    }

    handler = handlers.get(args.cmd)
    if handler:
        try:
            exit_code = handler(args, rt)
            sys.exit(exit_code)
        except Exception as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        print(f"Unknown command: {args.cmd}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
