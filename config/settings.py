"""Application settings — all configuration loaded from environment variables.

Usage:
    from config.settings import Settings
    settings = Settings()
    settings.validate()   # raises ValueError if ANTHROPIC_API_KEY is missing
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_DB_PATH = Path(__file__).parent.parent / "data" / "links.db"


@dataclass
class Settings:
    """Centralised application configuration.

    All values are read from environment variables at instantiation time
    so that tests can override them by patching ``os.environ``.  The
    instance is handed to every service constructor; nothing reads the
    environment after startup.
    """

    # ── API Keys ────────────────────────────────────────────────────────────
    anthropic_api_key: str = field(
        default_factory=lambda: os.environ.get("ANTHROPIC_API_KEY", "")
    )

    # ── Flask ───────────────────────────────────────────────────────────────
    debug: bool = field(
        default_factory=lambda: os.environ.get("FLASK_DEBUG", "0") == "1"
    )
    port: int = field(
        default_factory=lambda: int(os.environ.get("PORT", "5001"))
    )

    # ── Storage ─────────────────────────────────────────────────────────────
    db_path: Path = field(
        default_factory=lambda: Path(os.environ.get("DB_PATH") or DEFAULT_DB_PATH)
    )

    # ── Pipeline ────────────────────────────────────────────────────────────
    #: "ai" (structured classification call) or "keyword" (no extra call).
    classifier_policy: str = field(
        default_factory=lambda: os.environ.get("CLASSIFIER_POLICY", "ai").lower()
    )
    #: Key into ``core.pipeline.EXTRACTION_PROMPTS``.
    extraction_prompt_version: str = field(
        default_factory=lambda: os.environ.get("EXTRACTION_PROMPT_VERSION", "4")
    )
    #: Characters of extracted text sent to the classification call.
    classify_chars: int = 3000
    #: Characters of each saved link's content placed in the chat context.
    context_chars: int = 5000

    # ── AI Models ───────────────────────────────────────────────────────────
    #: Model used for the web-search extraction pass.
    extraction_model: str = field(
        default_factory=lambda: os.environ.get("EXTRACTION_MODEL", "claude-haiku-4-5")
    )
    #: Model used for category classification.
    classifier_model: str = "claude-haiku-4-5"
    #: Model used for grounded chat answers.
    chat_model: str = field(
        default_factory=lambda: os.environ.get("CHAT_MODEL", "claude-haiku-4-5")
    )

    def validate(self) -> None:
        """Raise ``ValueError`` if any required setting is missing or invalid."""
        if not self.anthropic_api_key:
            raise ValueError(
                "ANTHROPIC_API_KEY environment variable is not set. "
                "Copy .env.example to .env and add your key."
            )
        if self.classifier_policy not in ("ai", "keyword"):
            raise ValueError(
                f"CLASSIFIER_POLICY must be 'ai' or 'keyword', "
                f"got {self.classifier_policy!r}."
            )
