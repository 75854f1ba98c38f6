"""
websurf Config Management

Browser defaults live in a BrowserSettings model passed to the Browser
constructor. Settings can be loaded from multiple sources:
1. ~/.websurf/config.yaml (persistent)
2. .env file (project-local)
3. WEBSURF_* environment variables (override)

Priority: ENV > .env > config.yaml > model defaults
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import httpx
import yaml
from dotenv import dotenv_values
from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator

from websurf import useragent

logger = logging.getLogger("websurf.config")

# ═══════════════════════════════════════════════════════════════════════════
# Config Paths
# ═══════════════════════════════════════════════════════════════════════════

WEBSURF_HOME = Path.home() / ".websurf"
CONFIG_FILE = WEBSURF_HOME / "config.yaml"
BOOKMARKS_FILE = WEBSURF_HOME / "bookmarks.json"

# Environment variable -> BrowserSettings field
ENV_KEYS = {
    "WEBSURF_USER_AGENT": "user_agent",
    "WEBSURF_SEND_REFERER": "send_referer",
    "WEBSURF_META_REFRESH": "meta_refresh",
    "WEBSURF_FOLLOW_REDIRECTS": "follow_redirects",
    "WEBSURF_MAX_HISTORY": "max_history",
    "WEBSURF_MAX_REDIRECTS": "max_redirects",
    "WEBSURF_TIMEOUT": "timeout",
    "WEBSURF_PROXY": "proxy",
    "WEBSURF_DEBUG_HEADERS": "debug_headers",
}

PROXY_SCHEMES = ("http", "https", "socks5", "socks5h")


def check_proxy_url(url: str) -> str:
    """Return url unchanged when it is a usable proxy URL, else raise ValueError."""
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise ValueError(f"invalid proxy URL '{url}': {e}") from e
    if parsed.scheme not in PROXY_SCHEMES:
        raise ValueError(
            f"unsupported proxy scheme '{parsed.scheme}' (use one of {', '.join(PROXY_SCHEMES)})"
        )
    if not parsed.host:
        raise ValueError(f"proxy URL '{url}' has no host")
    return url


_BOOL = TypeAdapter(bool)


def env_flag(name: str) -> bool:
    """Boolean env var parsed like a BrowserSettings bool. Unset or unparsable is off."""
    raw = os.environ.get(name, "").strip()
    if not raw:
        return False
    try:
        return _BOOL.validate_python(raw)
    except ValidationError:
        logger.warning(f"Ignoring {name}={raw!r}: not a boolean")
        return False


# ═══════════════════════════════════════════════════════════════════════════
# Browser Settings
# ═══════════════════════════════════════════════════════════════════════════


class BrowserSettings(BaseModel):
    """Defaults for a new Browser.

    Attributes:
        user_agent: User-Agent header value.
        send_referer: Send the Referer header on follow-up requests.
        meta_refresh: Honour <meta http-equiv="refresh"> by reloading.
        follow_redirects: Follow Location headers; off raises RedirectBlocked.
        max_history: History depth, 0 for unbounded.
        max_redirects: Hops allowed for one request.
        timeout: Per-request timeout in seconds, None for no timeout.
        proxy: Proxy URL (http, https, socks5, socks5h).
        headers: Extra headers sent with every request.
        debug_headers: Dump outgoing request headers to stderr.
    """
    user_agent: str = Field(default_factory=useragent.create)
    send_referer: bool = True
    meta_refresh: bool = True
    follow_redirects: bool = True
    max_history: int = Field(0, ge=0)
    max_redirects: int = Field(20, ge=0)
    timeout: float | None = Field(None, gt=0)
    proxy: str | None = None
    headers: dict[str, str] = Field(default_factory=dict)
    debug_headers: bool = False

    @field_validator("proxy")
    @classmethod
    def validate_proxy(cls, v: str | None) -> str | None:
        if v is None or v == "":
            return None
        return check_proxy_url(v)


# ═══════════════════════════════════════════════════════════════════════════
# Config Loader
# ═══════════════════════════════════════════════════════════════════════════


class Config:
    """Unified configuration management."""

    def __init__(self, config_file: Path | None = None, cwd: Path | None = None):
        self.config_file = config_file or CONFIG_FILE
        self.cwd = cwd or Path.cwd()
        self.data: dict[str, Any] = {}
        self._load()

    def _load(self):
        """Load config from all sources (priority: ENV > .env > config.yaml)."""
        # 1. Load from ~/.websurf/config.yaml
        if self.config_file.exists():
            with open(self.config_file) as f:
                self.data = yaml.safe_load(f) or {}

        # 2. Load from .env file (project-local)
        self._load_dotenv()

        # 3. Environment variables override everything
        self._apply_env_overrides()

    def _load_dotenv(self):
        """Load WEBSURF_* keys from a .env file in cwd or parent directories."""
        check = self.cwd
        for _ in range(5):  # Check up to 5 parent directories
            env_file = check / ".env"
            if env_file.exists():
                for key, value in dotenv_values(env_file).items():
                    if key in ENV_KEYS and key not in os.environ and value is not None:
                        self.data[ENV_KEYS[key]] = value
                return
            check = check.parent

    def _apply_env_overrides(self):
        """Environment variables override config file."""
        for env_key, field_name in ENV_KEYS.items():
            if env_key in os.environ:
                self.data[field_name] = os.environ[env_key]

    def get(self, key: str, default: Any = None) -> Any:
        """Get config value."""
        return self.data.get(key, default)

    def set(self, key: str, value: Any):
        """Set config value (in-memory only)."""
        self.data[key] = value

    def save(self):
        """Save config to ~/.websurf/config.yaml."""
        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)

            with open(self.config_file, "w") as f:
                yaml.dump(self.data, f, default_flow_style=False)
        except (OSError, PermissionError) as e:
            # Config stays in-memory for this process
            logger.warning(f"Could not save config to {self.config_file}: {e}")

    def to_settings(self, **overrides: Any) -> BrowserSettings:
        """Build BrowserSettings from the loaded values.

        Unknown keys are ignored; empty strings count as unset.
        """
        values = {
            k: v for k, v in self.data.items()
            if k in BrowserSettings.model_fields and v != ""
        }
        values.update(overrides)
        return BrowserSettings(**values)


# ═══════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════


def load_config() -> Config:
    """Load config from all sources."""
    return Config()


def load_settings(**overrides: Any) -> BrowserSettings:
    """BrowserSettings from all config sources, with explicit overrides on top."""
    return load_config().to_settings(**overrides)
