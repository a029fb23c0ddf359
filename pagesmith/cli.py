from __future__ import annotations

import argparse
import functools
import http.server
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config import SiteConfig, load_config
from .errors import PagesmithError
from .log import configure_logging, get_logger
from .pipeline import build_site

DEFAULT_PORT = 3000

logger = get_logger("cli")


def run_build(config: SiteConfig) -> None:
    result = build_site(config)
    print(f"Build completed in {result.elapsed:.2f}s.")
    print(f"Site generated in: {config.dest_dir}")


def serve(config: SiteConfig, host: str, port: int) -> None:
    dest_dir = config.dest_dir
    if not dest_dir.is_dir():
        print(f"Output directory not found: {dest_dir}. Run the build command first.", file=sys.stderr)
        sys.exit(1)
    handler = functools.partial(http.server.SimpleHTTPRequestHandler, directory=str(dest_dir))
    with http.server.ThreadingHTTPServer((host, port), handler) as httpd:
        print(f"Serving {dest_dir} at http://{host}:{port}/")
        print("Press Ctrl+C to stop")
        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            print("\nServer stopped.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pagesmith", description="Static site builder for markdown entries.")
    parser.add_argument(
        "--config",
        "-c",
        default=None,
        help="Path to site config file (YAML/TOML/JSON). Defaults to pagesmith.yaml.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("build", help="Render every page and entry into the output directory.")

    serve_parser = subparsers.add_parser("serve", help="Serve the output directory over HTTP.")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", default=DEFAULT_PORT, type=int, help="Port to listen on.")
    serve_parser.add_argument(
        "--build",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Build the site before serving.",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose)
    config_path = Path(args.config) if args.config else None
    try:
        config = load_config(config_path)
        if args.command == "build":
            run_build(config)
        elif args.command == "serve":
            if args.build:
                run_build(config)
            serve(config, args.host, args.port)
    except PagesmithError as exc:
        logger.debug("Build failed", exc_info=True)
        print(f"Build failed: {exc}", file=sys.stderr)
        return 1
    return 0
