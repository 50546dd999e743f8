#!/usr/bin/env python3
"""
Cluttarex - distraction-free reading from the command line.

Fetch a page (or read a saved one), strip the clutter, and print the
article as JSON, plain text, Markdown or HTML.
"""
import sys
import argparse
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Optional

from markdownify import markdownify as md
from rich.console import Console
from rich.markup import escape

from cluttarex.config import OUTPUT_FORMATS, get_config, init_config
from cluttarex.errors import CluttarexError, MissingInput
from cluttarex.extractor import create_extractor
from cluttarex.models import ArticleDocument

logger = logging.getLogger(__name__)


console = Console(stderr=True)


def format_article(article: ArticleDocument, format: str = "json") -> str:
    """Format an article for output."""
    if format == "json":
        return json.dumps(article.to_dict(), indent=2, ensure_ascii=False)
    elif format == "html":
        return article.content
    elif format == "markdown":
        body = md(article.content, heading_style="ATX", bullets="-").strip()
        return f"# {article.title}\n\n{body}"
    else:  # text
        minutes = article.reading_time
        header = f"{article.title}\n{article.word_count} words, {minutes} min read"
        return f"{header}\n\n{article.text_content}"


def cmd_read(args):
    """Fetch a URL and print its article."""
    extractor = create_extractor(get_config())
    article = extractor.read(args.url)
    print(format_article(article, args.format))


def cmd_extract(args):
    """Extract the article from a saved page or stdin."""
    markup = _read_markup(args.file)
    extractor = create_extractor(get_config())
    article = extractor.extract(markup, base_url=args.base_url, encoding=args.encoding)
    print(format_article(article, args.format))


def _read_markup(file: str) -> bytes:
    if file == "-":
        return sys.stdin.buffer.read()
    path = Path(file)
    if not path.is_file():
        raise MissingInput(f"File not found: {file}")
    return path.read_bytes()


def cmd_serve(args):
    """Start the Cluttarex REST API server."""
    from cluttarex.serve import run_server

    config = get_config()
    run_server(extractor=create_extractor(config), host=config.host, port=config.port)


def cmd_config(args):
    """Manage configuration."""
    config = get_config()

    if args.action == "show":
        if args.key:
            if not hasattr(config, args.key):
                console.print(f"[red]Unknown config key: {escape(args.key)}[/red]")
                sys.exit(1)
            print(getattr(config, args.key))
        else:
            print(json.dumps(asdict(config), indent=2))

    elif args.action == "set":
        if not args.key or args.value is None:
            console.print("[red]Usage: cluttarex config set KEY VALUE[/red]")
            sys.exit(1)
        try:
            config.set_from_string(args.key, args.value)
        except KeyError:
            console.print(f"[red]Unknown config key: {escape(args.key)}[/red]")
            sys.exit(1)
        config.save(Path(args.config) if args.config else None)
        if not args.quiet:
            console.print(f"[green]Set {escape(args.key)} = {escape(args.value)}[/green]")

    elif args.action == "init":
        config_path = Path(args.config) if args.config else Path.home() / ".config" / "cluttarex" / "config.toml"
        config.save(config_path)
        console.print(f"[green]Created config at {config_path}[/green]")


def configure_logging(level: str):
    logging.basicConfig(level=getattr(logging, level.upper(), logging.WARNING),
                        format='%(levelname)s: %(message)s')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cluttarex",
        description="Cluttarex - extract the readable article from any web page",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  cluttarex read https://example.com/post
  cluttarex read https://example.com/post --format markdown
  cluttarex extract saved.html --base-url https://example.com/post --format text
  curl -s https://example.com/post | cluttarex extract - --base-url https://example.com/post
  cluttarex serve --port 3000
  cluttarex config set timeout 20

Configuration:
  Config file: ~/.config/cluttarex/config.toml or ./cluttarex.toml
  Environment: CLUTTAREX_TIMEOUT, CLUTTAREX_USER_AGENT, CLUTTAREX_EXTRA_CLUTTER_SELECTORS
        """
    )

    # Global options
    parser.add_argument("--config", help="Config file path")
    parser.add_argument("-q", "--quiet", action="store_true", help="Minimal output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True, help="Commands")

    read_parser = subparsers.add_parser("read", help="Fetch a URL and extract its article")
    read_parser.add_argument("url", help="Page URL")
    read_parser.add_argument("-f", "--format", choices=OUTPUT_FORMATS, help="Output format")
    read_parser.set_defaults(func=cmd_read)

    extract_parser = subparsers.add_parser("extract", help="Extract the article from a saved page")
    extract_parser.add_argument("file", help="HTML file, or - for stdin")
    extract_parser.add_argument("--base-url", help="URL the page was loaded from")
    extract_parser.add_argument("--encoding", help="Charset of the saved page (detected when omitted)")
    extract_parser.add_argument("-f", "--format", choices=OUTPUT_FORMATS, help="Output format")
    extract_parser.set_defaults(func=cmd_extract)

    serve_parser = subparsers.add_parser("serve", help="Start the REST API server")
    serve_parser.add_argument("--port", "-p", type=int, help="Port to listen on (default: 8000)")
    serve_parser.add_argument("--host", "-H", help="Host to bind to (default: 127.0.0.1)")
    serve_parser.set_defaults(func=cmd_serve)

    config_parser = subparsers.add_parser("config", help="Manage configuration")
    config_parser.add_argument("action", choices=["show", "set", "init"], help="Config action")
    config_parser.add_argument("key", nargs="?", help="Config key")
    config_parser.add_argument("value", nargs="?", help="Config value (for set)")
    config_parser.set_defaults(func=cmd_config)

    return parser


def main(argv: Optional[list] = None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Initialize configuration with CLI overrides
    config = init_config(
        config_file=Path(args.config) if args.config else None,
        output_format=getattr(args, "format", None),
        host=getattr(args, "host", None),
        port=getattr(args, "port", None),
    )

    if getattr(args, "format", None) is None:
        args.format = config.output_format

    if args.verbose:
        configure_logging("DEBUG")
    elif args.quiet:
        configure_logging("ERROR")
    else:
        configure_logging(config.log_level)

    # Execute command
    try:
        args.func(args)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)
    except CluttarexError as e:
        console.print(f"[red]Error: {escape(e.message)}[/red]")
        if e.details:
            console.print(f"[dim]{escape(e.details)}[/dim]")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
