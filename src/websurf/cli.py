"""
websurf — CLI

Interactive shell over one Browser session, plus the table renderers
shared with the one-shot `websurf open` command.

    websurf shell http://example.com/
    websurf> links
    websurf> click a#next
    websurf> back
"""

from __future__ import annotations

import asyncio
import logging
import shlex
from typing import Iterable

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import HTML
from rich.console import Console
from rich.table import Table
from rich.text import Text

from websurf.assets import Asset, Image, Link, Script, Stylesheet
from websurf.browser import Browser
from websurf.errors import WebSurfError
from websurf.theme import (
    ACCENT_CYAN,
    ERROR_RED,
    GHOST_GRAY,
    LINK_BLUE,
    OK_GREEN,
    WEBSURF_THEME,
    status_style,
)

logger = logging.getLogger("websurf.cli")


# ═══════════════════════════════════════════════════════════════════════════
# Renderers
# ═══════════════════════════════════════════════════════════════════════════


def print_page(console: Console, browser: Browser) -> None:
    """One-line summary of the current page."""
    line = Text()
    line.append(f"{browser.status_code} ", style=f"bold {status_style(browser.status_code)}")
    line.append(browser.url or "(no page)", style=LINK_BLUE)
    if browser.title:
        line.append(f"  {browser.title.strip()}", style=GHOST_GRAY)
    console.print(line)


def asset_table(title: str, items: Iterable[Asset]) -> Table:
    """Table of page assets; columns depend on the asset kind."""
    table = Table(title=title, title_style=f"bold {ACCENT_CYAN}", show_lines=False)
    table.add_column("#", style=GHOST_GRAY, justify="right")
    table.add_column("URL", style=LINK_BLUE, overflow="fold")
    table.add_column("Details")

    for i, item in enumerate(items, 1):
        if isinstance(item, Link):
            details = item.text.strip()
        elif isinstance(item, Image):
            details = item.alt
        elif isinstance(item, Stylesheet):
            details = item.media
        elif isinstance(item, Script):
            details = item.type
        else:
            details = ""
        table.add_row(str(i), item.url, details)
    return table


def headers_table(browser: Browser) -> Table:
    table = Table(title="Response headers", title_style=f"bold {ACCENT_CYAN}")
    table.add_column("Name", style=OK_GREEN)
    table.add_column("Value", overflow="fold")
    for name, value in browser.response_headers.multi_items():
        table.add_row(name, value)
    return table


# ═══════════════════════════════════════════════════════════════════════════
# Shell
# ═══════════════════════════════════════════════════════════════════════════


HELP = [
    ("open <url>",        "load a page"),
    ("back",              "previous page (no request)"),
    ("reload",            "re-issue the current request"),
    ("click <selector>",  "follow the anchor matching a CSS selector"),
    ("links",             "list links"),
    ("images",            "list images"),
    ("stylesheets",       "list stylesheets"),
    ("scripts",           "list scripts"),
    ("title",             "page title"),
    ("status",            "status code and URL"),
    ("headers",           "response headers"),
    ("bookmark <name>",   "bookmark the current page"),
    ("goto <name>",       "open a bookmark"),
    ("history",           "pages in the history stack"),
    ("help",              "this list"),
    ("quit",              "exit"),
]


class BrowserShell:
    """Line-oriented command shell over one Browser."""

    def __init__(self, browser: Browser, console: Console | None = None):
        self.browser = browser
        self.console = console or Console(theme=WEBSURF_THEME)
        self.session: PromptSession | None = None

    # ──────────────────────────────────────────────────────────
    # Main loop
    # ──────────────────────────────────────────────────────────

    async def run(self, start_url: str | None = None):
        """Prompt for commands until quit or EOF."""
        if start_url:
            await self.execute(f"open {shlex.quote(start_url)}")

        self.session = PromptSession()
        self.console.print(f"[{GHOST_GRAY}]Type help for commands[/]")

        while True:
            try:
                line = await self.session.prompt_async(
                    HTML("<ansibrightcyan>websurf</ansibrightcyan><ansibrightblack>&gt;</ansibrightblack> ")
                )
                if not await self.execute(line):
                    break
            except (KeyboardInterrupt, asyncio.CancelledError):
                self.console.print(f"[{GHOST_GRAY}]Use quit to exit[/]")
            except EOFError:
                break

        self.console.print(f"[{GHOST_GRAY}]Bye.[/]")

    # ──────────────────────────────────────────────────────────
    # Commands
    # ──────────────────────────────────────────────────────────

    async def execute(self, line: str) -> bool:
        """Run one command line. Returns False when the shell should exit."""
        try:
            parts = shlex.split(line)
        except ValueError as e:
            self.console.print(f"[{ERROR_RED}]{e}[/]")
            return True
        if not parts:
            return True

        base, args = parts[0].lower(), parts[1:]
        logger.debug(f"Shell command: {line.strip()}")

        if base in ("quit", "exit", "q"):
            return False

        try:
            await self._dispatch(base, args, line.strip().partition(" ")[2].strip())
        except WebSurfError as e:
            logger.info(f"Command '{base}' failed: {e}")
            self.console.print(Text(str(e), style=ERROR_RED))
        return True

    async def _dispatch(self, base: str, args: list[str], rest: str):
        bow = self.browser

        if base == "help":
            self._print_help()

        elif base == "open":
            if not self._require(args, "open <url>"):
                return
            await bow.open(args[0])
            print_page(self.console, bow)

        elif base == "back":
            if bow.back():
                print_page(self.console, bow)
            else:
                self.console.print(f"[{GHOST_GRAY}]No previous page[/]")

        elif base == "reload":
            await bow.reload()
            print_page(self.console, bow)

        elif base == "click":
            if not self._require(args, "click <selector>"):
                return
            await bow.click(rest)
            print_page(self.console, bow)

        elif base == "links":
            self.console.print(asset_table("Links", bow.links()))

        elif base == "images":
            self.console.print(asset_table("Images", bow.images()))

        elif base == "stylesheets":
            self.console.print(asset_table("Stylesheets", bow.stylesheets()))

        elif base == "scripts":
            self.console.print(asset_table("Scripts", bow.scripts()))

        elif base == "title":
            self.console.print(Text(bow.title) if bow.title else Text("(no title)", style=GHOST_GRAY))

        elif base == "status":
            print_page(self.console, bow)

        elif base == "headers":
            self.console.print(headers_table(bow))

        elif base == "bookmark":
            if not self._require(args, "bookmark <name>"):
                return
            bow.bookmark(args[0])
            self.console.print(f"[{OK_GREEN}]Saved bookmark '{args[0]}'[/]")

        elif base == "goto":
            if not self._require(args, "goto <name>"):
                return
            await bow.open_bookmark(args[0])
            print_page(self.console, bow)

        elif base == "history":
            self._print_history()

        else:
            self.console.print(f"[{ERROR_RED}]Unknown command: {base}[/]")
            self.console.print(f"[{GHOST_GRAY}]Type help for commands[/]")

    def _require(self, args: list[str], usage: str) -> bool:
        if args:
            return True
        self.console.print(f"[{ERROR_RED}]Usage: {usage}[/]")
        return False

    # ──────────────────────────────────────────────────────────
    # Display
    # ──────────────────────────────────────────────────────────

    def _print_help(self):
        self.console.print()
        for cmd_name, desc in HELP:
            c = Text()
            c.append(f"  {cmd_name:<18}", style=OK_GREEN)
            c.append(desc, style=GHOST_GRAY)
            self.console.print(c)
        self.console.print()

    def _print_history(self):
        states = list(self.browser.history)
        if not states:
            self.console.print(f"[{GHOST_GRAY}]History is empty[/]")
            return
        table = Table(title="History", title_style=f"bold {ACCENT_CYAN}")
        table.add_column("#", style=GHOST_GRAY, justify="right")
        table.add_column("Status")
        table.add_column("URL", style=LINK_BLUE, overflow="fold")
        for i, state in enumerate(states, 1):
            if state.response is None:
                table.add_row(str(i), "", "(blank)")
            else:
                table.add_row(str(i), str(state.response.status_code), str(state.response.url))
        self.console.print(table)
