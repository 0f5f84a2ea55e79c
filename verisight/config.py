# verisight/config.py
"""
Runtime settings read from the environment (and a local .env file).
"""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from dotenv import load_dotenv

DEFAULT_MODEL = "gemini-2.5-flash"
PLACEHOLDER_API_KEY = "PLACEHOLDER_API_KEY"


def _parse_timeout(raw: Optional[str]) -> Optional[float]:
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError as e:
        raise ValueError(f"VERISIGHT_TIMEOUT must be a number of seconds, got {raw!r}") from e
    return value if value > 0 else None


@dataclass(frozen=True)
class Settings:
    """Resolved configuration.

    Attributes:
        api_key: Gemini API key, or None when analysis should use the stub.
        model: Remote model name.
        timeout: Remote call timeout in seconds; None disables it.
        home: Directory holding the history store.
    """

    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    timeout: Optional[float] = None
    home: str = os.path.join("~", ".verisight")

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key) and self.api_key != PLACEHOLDER_API_KEY

    @property
    def history_dir(self) -> str:
        return os.path.expanduser(self.home)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, *, dotenv: bool = True) -> "Settings":
        """Build settings from environment variables.

        GEMINI_API_KEY takes precedence over API_KEY.
        """
        if environ is None:
            if dotenv:
                load_dotenv()
            environ = os.environ
        return cls(
            api_key=environ.get("GEMINI_API_KEY") or environ.get("API_KEY") or None,
            model=environ.get("VERISIGHT_MODEL") or DEFAULT_MODEL,
            timeout=_parse_timeout(environ.get("VERISIGHT_TIMEOUT")),
            home=environ.get("VERISIGHT_HOME") or cls.home,
        )

    def override(self, **changes) -> "Settings":
        """Return a copy with the non-None values in `changes` applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
