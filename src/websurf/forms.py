"""
websurf - Forms

Read an HTML <form>, edit its values, and submit it through the browser
that loaded it.

    form = bow.form("form#login")
    form.input("user", "alice")
    form.input("pass", "secret")
    await form.submit()
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, IO

from websurf.document import Element
from websurf.errors import ElementNotFound

if TYPE_CHECKING:
    from websurf.browser import Browser, FormFile

logger = logging.getLogger("websurf.forms")

MULTIPART = "multipart/form-data"
URLENCODED = "application/x-www-form-urlencoded"

# Input types that never contribute a value on plain submit
_SKIPPED_TYPES = frozenset({"submit", "button", "image", "reset", "file"})
_BUTTON_TYPES = frozenset({"submit", "image"})


class Form:
    """A form on the current page, bound to the browser that loaded it."""

    def __init__(self, browser: Browser, element: Element):
        self.browser = browser
        self.element = element
        self.method = element.attr_or("method", "GET").strip().upper() or "GET"
        self.enctype = element.attr_or("enctype", URLENCODED).strip().lower() or URLENCODED
        self.action = self._resolve_action(element.attr("action"))
        self.fields: dict[str, list[str]] = {}
        self.buttons: dict[str, str] = {}
        self.files: dict[str, FormFile] = {}
        self._file_fields: set[str] = set()
        self._collect()

    def _resolve_action(self, action: str | None) -> str:
        if action is None or not action.strip():
            return self.browser.url or ""
        return self.browser.resolve_url(action)

    def _collect(self) -> None:
        for el in self.element.query("input[name], textarea[name], select[name], button[name]"):
            name = el.attr("name") or ""
            if el.attr("disabled") is not None:
                continue

            if el.is_("button"):
                if el.attr_or("type", "submit").lower() == "submit":
                    self.buttons[name] = el.attr_or("value", "")
                continue

            if el.is_("textarea"):
                self.fields.setdefault(name, []).append(el.text())
                continue

            if el.is_("select"):
                options = el.query("option")
                chosen = [o for o in options if o.attr("selected") is not None]
                if el.attr("multiple") is None:
                    chosen = chosen[:1] or options[:1]
                for option in chosen:
                    value = option.attr("value")
                    self.fields.setdefault(name, []).append(value if value is not None else option.text().strip())
                continue

            kind = el.attr_or("type", "text").lower()
            if kind in _BUTTON_TYPES:
                self.buttons[name] = el.attr_or("value", "")
                continue
            if kind == "file":
                self._file_fields.add(name)
                continue
            if kind in _SKIPPED_TYPES:
                continue
            if kind in ("checkbox", "radio"):
                if el.attr("checked") is None:
                    continue
                self.fields.setdefault(name, []).append(el.attr_or("value", "on"))
                continue
            self.fields.setdefault(name, []).append(el.attr_or("value", ""))

    # ── Editing ──────────────────────────────────────────────────

    def has(self, name: str) -> bool:
        return name in self.fields or name in self._file_fields

    def value(self, name: str) -> str | None:
        values = self.fields.get(name)
        return values[0] if values else None

    def input(self, name: str, value: str) -> None:
        """Set the value of an existing field.

        Raises:
            ElementNotFound: the form has no field called name.
        """
        if name not in self.fields:
            raise ElementNotFound(name, f"No input found with name '{name}'.")
        self.fields[name] = [value]

    def set(self, name: str, value: str | list[str]) -> None:
        """Set a field, adding it when the form does not have one."""
        self.fields[name] = [value] if isinstance(value, str) else list(value)

    def file(self, name: str, filename: str, data: bytes | IO[bytes]) -> None:
        """Attach a file; the form is then sent as multipart/form-data."""
        from websurf.browser import FormFile

        self.files[name] = FormFile(filename=filename, data=data)

    # ── Submission ───────────────────────────────────────────────

    async def submit(self) -> None:
        await self._send(dict(self.fields))

    async def click(self, button: str) -> None:
        """Submit as if the named submit button was pressed.

        Raises:
            ElementNotFound: the form has no such button.
        """
        if button not in self.buttons:
            raise ElementNotFound(button, f"No button found with name '{button}'.")
        values = dict(self.fields)
        values[button] = [self.buttons[button]]
        await self._send(values)

    async def _send(self, values: dict[str, list[str]]) -> None:
        logger.debug(f"Submitting form {self.method} {self.action}")
        if self.method == "GET":
            await self.browser.open_form(self.action, values)
        elif self.enctype == MULTIPART or self.files:
            await self.browser.post_multipart(self.action, values, self.files)
        else:
            await self.browser.post_form(self.action, values)

    def __repr__(self) -> str:
        return f"<Form {self.method} {self.action}>"
