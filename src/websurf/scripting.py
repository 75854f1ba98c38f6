"""
websurf - Scripting Hook

websurf never executes scripts. It only exposes the document query layer
to an embedded sandbox through a registration interface: any object with
register(name, func) can be injected into the Browser, and after each page
load the browser registers a QueryBridge for the new document into it.

    host = CallableRegistry()
    bow = Browser(script_host=host)
    await bow.open("http://example.com/")
    host.call("find", "a", "href", "links")
    host.call("results")  # {"links": [...]}
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Protocol, runtime_checkable

from websurf.document import Document, parse
from websurf.errors import ElementNotFound

logger = logging.getLogger("websurf.scripting")


@runtime_checkable
class ScriptHost(Protocol):
    """Anything a sandbox exposes for registering host callables."""

    def register(self, name: str, func: Callable[..., Any]) -> None: ...


class CallableRegistry:
    """Minimal in-process ScriptHost: a name -> callable table."""

    def __init__(self):
        self.functions: dict[str, Callable[..., Any]] = {}

    def register(self, name: str, func: Callable[..., Any]) -> None:
        self.functions[name] = func

    def call(self, name: str, *args: Any) -> Any:
        try:
            func = self.functions[name]
        except KeyError:
            raise KeyError(f"No callable registered as '{name}'") from None
        return func(*args)

    def __contains__(self, name: str) -> bool:
        return name in self.functions


class QueryBridge:
    """Document queries in a shape a script sandbox can call.

    find(selector, attr, key) appends the `attr` value of every element
    matching `selector` to results()[key].
    """

    def __init__(self, document: Document | None):
        self.document = document
        self._results: dict[str, list[str]] = {}

    def find(self, selector: Any, attr: Any, key: Any) -> bool:
        if not all(isinstance(a, str) for a in (selector, attr, key)):
            return False
        if self.document is None:
            return False
        try:
            elements = self.document.query(selector)
        except ElementNotFound:
            return False
        for element in elements:
            value = element.attr(attr)
            if value is not None:
                self._results.setdefault(key, []).append(value)
        return True

    def results(self) -> dict[str, list[str]]:
        return {k: list(v) for k, v in self._results.items()}

    def new_document(self, html: str) -> Document:
        return parse(html)

    def install(self, host: ScriptHost) -> None:
        """Register this bridge's callables into host."""
        host.register("find", self.find)
        host.register("results", self.results)
        host.register("newDocument", self.new_document)
        logger.debug(f"Query bridge installed for {getattr(self.document, 'url', None)}")
