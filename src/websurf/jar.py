"""
websurf - Jars

Storage contracts the browser consumes, plus in-memory and file-backed
implementations:

- State: immutable request / response / document snapshot
- History: bounded stack of previous States
- Bookmarks: name -> URL store
- Cookies and headers: stdlib CookieJar and httpx.Headers
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from http.cookiejar import CookieJar
from pathlib import Path
from typing import Iterator, Protocol, runtime_checkable

import httpx

from websurf.document import Document
from websurf.errors import BookmarkNotFound

logger = logging.getLogger("websurf.jar")


# ═══════════════════════════════════════════════════════════════════════════
# State
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class State:
    """One request / response / document triple.

    A blank State() is the idle state of a browser that never navigated.
    """
    request: httpx.Request | None = None
    response: httpx.Response | None = None
    document: Document | None = None


# ═══════════════════════════════════════════════════════════════════════════
# History
# ═══════════════════════════════════════════════════════════════════════════


@runtime_checkable
class History(Protocol):
    def push(self, state: State) -> None: ...

    def pop(self) -> State: ...

    def top(self) -> State: ...

    def set_max(self, n: int) -> None: ...

    def __len__(self) -> int: ...

    def __iter__(self) -> Iterator[State]: ...


class MemoryHistory:
    """In-memory history stack, most recent state on top.

    max_len = 0 means unbounded; otherwise the oldest entries are evicted
    on push.
    """

    def __init__(self, max_len: int = 0):
        self._states: list[State] = []
        self.max_len = 0
        self.set_max(max_len)

    def set_max(self, n: int) -> None:
        if n < 0:
            raise ValueError(f"history max must be >= 0, got {n}")
        self.max_len = n
        self._evict()

    def push(self, state: State) -> None:
        self._states.append(state)
        self._evict()

    def pop(self) -> State:
        if not self._states:
            raise IndexError("pop from empty history")
        return self._states.pop()

    def top(self) -> State:
        if not self._states:
            raise IndexError("history is empty")
        return self._states[-1]

    def _evict(self) -> None:
        if self.max_len and len(self._states) > self.max_len:
            dropped = len(self._states) - self.max_len
            del self._states[:dropped]
            logger.debug(f"History evicted {dropped} oldest state(s)")

    def __len__(self) -> int:
        return len(self._states)

    def __iter__(self):
        """Oldest first."""
        return iter(list(self._states))


# ═══════════════════════════════════════════════════════════════════════════
# Bookmarks
# ═══════════════════════════════════════════════════════════════════════════


@runtime_checkable
class BookmarksJar(Protocol):
    def save(self, name: str, url: str) -> None: ...

    def read(self, name: str) -> str: ...

    def remove(self, name: str) -> bool: ...

    def has(self, name: str) -> bool: ...

    def all(self) -> dict[str, str]: ...


class MemoryBookmarks:
    """Bookmarks kept in a dict. Saving an existing name overwrites it."""

    def __init__(self):
        self.bookmarks: dict[str, str] = {}

    def save(self, name: str, url: str) -> None:
        self.bookmarks[name] = url

    def read(self, name: str) -> str:
        try:
            return self.bookmarks[name]
        except KeyError:
            raise BookmarkNotFound(name) from None

    def remove(self, name: str) -> bool:
        return self.bookmarks.pop(name, None) is not None

    def has(self, name: str) -> bool:
        return name in self.bookmarks

    def all(self) -> dict[str, str]:
        return dict(self.bookmarks)


class FileBookmarks(MemoryBookmarks):
    """Bookmarks persisted as a JSON object in a file.

    The file is read once at construction and rewritten on every change.
    """

    def __init__(self, path: str | Path):
        super().__init__()
        self.path = Path(path)
        if self.path.exists():
            raw = self.path.read_text(encoding="utf-8").strip()
            if raw:
                data = json.loads(raw)
                if not isinstance(data, dict):
                    raise ValueError(f"Bookmarks file {self.path} must hold a JSON object")
                self.bookmarks = {str(k): str(v) for k, v in data.items()}

    def save(self, name: str, url: str) -> None:
        super().save(name, url)
        self._write()

    def remove(self, name: str) -> bool:
        removed = super().remove(name)
        if removed:
            self._write()
        return removed

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self.bookmarks, indent=2, sort_keys=True), encoding="utf-8")


# ═══════════════════════════════════════════════════════════════════════════
# Cookies & Headers
# ═══════════════════════════════════════════════════════════════════════════


def memory_cookies() -> CookieJar:
    """An empty in-memory cookie jar, shared by reference with the transport."""
    return CookieJar()


def memory_headers(initial: dict[str, str] | None = None) -> httpx.Headers:
    return httpx.Headers(initial or {})
