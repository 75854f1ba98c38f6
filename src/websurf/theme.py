"""
Terminal palette for the websurf CLI.
"""

from rich.theme import Theme

# ═══════════════════════════════════════════════════════════════════════════
# Palette
# ═══════════════════════════════════════════════════════════════════════════

LINK_BLUE = "#5fafff"
OK_GREEN = "#5fd75f"
WARN_GOLD = "#ffd700"
ERROR_RED = "#ff5f5f"
ACCENT_CYAN = "#00d7d7"
GHOST_GRAY = "#888888"


def status_style(status: int) -> str:
    """Colour for an HTTP status code."""
    if status >= 500 or status == 0:
        return ERROR_RED
    if status >= 400:
        return WARN_GOLD
    if status >= 300:
        return ACCENT_CYAN
    return OK_GREEN


WEBSURF_THEME = Theme({
    "info": f"bold {OK_GREEN}",
    "warning": f"bold {WARN_GOLD}",
    "error": f"bold {ERROR_RED}",
    "url": LINK_BLUE,
    "muted": GHOST_GRAY,
    "heading": f"bold {ACCENT_CYAN}",
})
