"""
websurf — Entry Point

Usage:
    websurf open <url> [--links] [--images] [--headers]   # Fetch one page
    websurf download <url> -o <file>                      # Save a resource
    websurf shell [url]                                   # Interactive shell
    websurf --verbose ...                                 # Debug logging
"""

import argparse
import asyncio
import sys

from rich.console import Console
from rich.markup import escape

from websurf import __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="websurf",
        description="websurf: scripted web browsing from the terminal",
        epilog="Examples:\n"
               "  websurf open http://example.com/ --links\n"
               "  websurf download http://example.com/logo.png -o logo.png\n"
               "  websurf shell http://example.com/\n",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"websurf {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command")

    # Subcommand: open <url>
    open_parser = subparsers.add_parser("open", help="Fetch a page and print a summary")
    open_parser.add_argument("url", help="URL to open")
    open_parser.add_argument("--links", action="store_true", help="List links")
    open_parser.add_argument("--images", action="store_true", help="List images")
    open_parser.add_argument("--stylesheets", action="store_true", help="List stylesheets")
    open_parser.add_argument("--scripts", action="store_true", help="List scripts")
    open_parser.add_argument("--headers", action="store_true", help="Show response headers")
    open_parser.add_argument("--no-redirects", action="store_true", help="Fail on redirects instead of following")
    open_parser.add_argument("--no-referer", action="store_true", help="Never send the Referer header")
    open_parser.add_argument("--verbose", "-v", action="store_true", default=argparse.SUPPRESS, help="Enable verbose logging")

    # Subcommand: download <url> -o <file>
    dl_parser = subparsers.add_parser("download", help="Save a resource to a file")
    dl_parser.add_argument("url", help="URL to download")
    dl_parser.add_argument("-o", "--output", required=True, help="Destination file")
    dl_parser.add_argument("--verbose", "-v", action="store_true", default=argparse.SUPPRESS, help="Enable verbose logging")

    # Subcommand: shell [url]
    shell_parser = subparsers.add_parser("shell", help="Interactive browsing shell")
    shell_parser.add_argument("url", nargs="?", help="Page to open first")
    shell_parser.add_argument("--verbose", "-v", action="store_true", default=argparse.SUPPRESS, help="Enable verbose logging")

    return parser


async def run_open(args, console: Console) -> int:
    from websurf.browser import new_browser
    from websurf.cli import asset_table, headers_table, print_page
    from websurf.config import load_settings

    overrides = {}
    if args.no_redirects:
        overrides["follow_redirects"] = False
    if args.no_referer:
        overrides["send_referer"] = False

    async with new_browser(load_settings(**overrides)) as bow:
        await bow.open(args.url)
        print_page(console, bow)
        if args.headers:
            console.print(headers_table(bow))
        if args.links:
            console.print(asset_table("Links", bow.links()))
        if args.images:
            console.print(asset_table("Images", bow.images()))
        if args.stylesheets:
            console.print(asset_table("Stylesheets", bow.stylesheets()))
        if args.scripts:
            console.print(asset_table("Scripts", bow.scripts()))
    return 0


async def run_download(args, console: Console) -> int:
    from websurf.assets import DownloadableAsset
    from websurf.config import load_settings
    from websurf.downloads import Downloader

    settings = load_settings()
    downloader = Downloader(timeout=settings.timeout, proxy=settings.proxy, user_agent=settings.user_agent)
    try:
        with open(args.output, "wb") as f:
            size = await downloader.download(DownloadableAsset(url=args.url), f)
    finally:
        await downloader.aclose()
    console.print(f"Saved {size:,} bytes to {args.output}", markup=False)
    return 0


async def run_shell(args, console: Console) -> int:
    from websurf.browser import new_browser
    from websurf.cli import BrowserShell
    from websurf.config import BOOKMARKS_FILE
    from websurf.jar import FileBookmarks

    async with new_browser(bookmarks=FileBookmarks(BOOKMARKS_FILE)) as bow:
        await BrowserShell(bow, console).run(args.url)
    return 0


async def async_main(argv: list[str] | None = None) -> int:
    """Async main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 2

    from websurf.errors import WebSurfError
    from websurf.logging_config import setup_logging
    from websurf.theme import WEBSURF_THEME

    logger = setup_logging(verbose=args.verbose)
    logger.info(f"websurf {args.command}", extra={"command": args.command})
    console = Console(theme=WEBSURF_THEME)

    handlers = {"open": run_open, "download": run_download, "shell": run_shell}
    try:
        return await handlers[args.command](args, console)
    except WebSurfError as e:
        logger.warning(f"{args.command} failed: {e}")
        console.print(f"[error]Error:[/] {escape(str(e))}", highlight=False)
        return 1
    except OSError as e:
        logger.error(f"{args.command} failed: {e}", exc_info=True)
        console.print(f"[error]Error:[/] {escape(str(e))}", highlight=False)
        return 1


def main():
    """Sync entry point for console_scripts (pyproject.toml)."""
    try:
        sys.exit(asyncio.run(async_main()))
    except KeyboardInterrupt:
        print("\nInterrupted.")
        sys.exit(130)


if __name__ == "__main__":
    main()
