"""Centralised settings for the link checker.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

_DESKTOP_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:128.0) "
    "Gecko/20100101 Firefox/128.0"
)


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_path_or_none(name: str) -> Optional[Path]:
    value = os.environ.get(name)
    return Path(value) if value else None


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # HTTP probing
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "10.0"))
    )
    max_redirects: int = field(
        default_factory=lambda: int(os.environ.get("MAX_REDIRECTS", "5"))
    )
    redirect_mode: str = field(
        default_factory=lambda: os.environ.get("REDIRECT_MODE", "native")
    )
    max_body_bytes: int = field(
        default_factory=lambda: int(os.environ.get("MAX_BODY_BYTES", "1048576"))
    )
    # Certificates of linked sites are not verified unless VERIFY_TLS is set.
    verify_tls: bool = field(default_factory=lambda: _env_bool("VERIFY_TLS", "false"))
    user_agent: str = field(
        default_factory=lambda: os.environ.get("USER_AGENT", _DESKTOP_USER_AGENT)
    )

    # ------------------------------------------------------------------
    # Document checking
    # ------------------------------------------------------------------
    check_concurrency: int = field(
        default_factory=lambda: int(os.environ.get("CHECK_CONCURRENCY", "8"))
    )
    document_timeout: float = field(
        default_factory=lambda: float(os.environ.get("DOCUMENT_TIMEOUT", "120.0"))
    )

    # ------------------------------------------------------------------
    # Posts source
    # ------------------------------------------------------------------
    posts_db: Optional[Path] = field(
        default_factory=lambda: _env_path_or_none("POSTS_DB")
    )
    table_prefix: str = field(
        default_factory=lambda: os.environ.get("TABLE_PREFIX", "wp_")
    )

    @property
    def document_deadline(self) -> Optional[float]:
        """Per-document deadline in seconds, or ``None`` when disabled."""
        return self.document_timeout if self.document_timeout > 0 else None


# Module-level singleton; import this everywhere:
#   from linkcheck.config import settings
settings = Settings()
