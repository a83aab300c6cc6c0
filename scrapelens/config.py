"""Centralised settings for ScrapeLens.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Workspace / cache storage
    # ------------------------------------------------------------------
    workspace_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("SCRAPELENS_WORKSPACE", Path.home() / ".scrapelens")
        )
    )

    @property
    def cache_path(self) -> Path:
        """Absolute path to the SQLite cache file."""
        return self.workspace_dir / "cache.db"

    @property
    def schema_path(self) -> Path:
        """Absolute path to the cache schema SQL file bundled with the package."""
        return Path(__file__).resolve().parent / "cache" / "schema.sql"

    # ------------------------------------------------------------------
    # Fetcher
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )
    render_js: bool = field(default_factory=lambda: _env_bool("RENDER_JS", "true"))

    # ------------------------------------------------------------------
    # Extraction service
    # ------------------------------------------------------------------
    extraction_provider: str = field(
        default_factory=lambda: os.environ.get("EXTRACTION_PROVIDER", "service")
    )
    extraction_service_url: str = field(
        default_factory=lambda: os.environ.get(
            "EXTRACTION_SERVICE_URL", "http://localhost:11400"
        )
    )
    # LLM inference on a full page can take minutes.
    extraction_timeout: float = field(
        default_factory=lambda: float(os.environ.get("EXTRACTION_TIMEOUT", "300.0"))
    )
    ollama_base_url: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_BASE_URL", "http://localhost:11434")
    )
    default_model: str = field(
        default_factory=lambda: os.environ.get("DEFAULT_MODEL", "llama3.1")
    )
    max_content_chars: int = field(
        default_factory=lambda: int(os.environ.get("MAX_CONTENT_CHARS", "20000"))
    )

    # ------------------------------------------------------------------
    # Model catalog
    # ------------------------------------------------------------------
    model_catalog_url: str = field(
        default_factory=lambda: os.environ.get(
            "MODEL_CATALOG_URL", "https://ollama.com/library"
        )
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO").upper()
    )

    def ensure_workspace(self) -> None:
        """Create the workspace directory if it does not exist."""
        self.workspace_dir.mkdir(parents=True, exist_ok=True)


# Module-level singleton, import this everywhere:
#   from scrapelens.config import settings
settings = Settings()
