"""Tests for config/settings.py — environment-driven configuration."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from config.settings import DEFAULT_DB_PATH, Settings


class TestSettings:
    @patch.dict(os.environ, {}, clear=True)
    def test_defaults(self):
        settings = Settings()
        assert settings.anthropic_api_key == ""
        assert settings.db_path == DEFAULT_DB_PATH
        assert settings.classifier_policy == "ai"
        assert settings.extraction_prompt_version == "4"
        assert settings.classify_chars == 3000

    @patch.dict(
        os.environ,
        {"ANTHROPIC_API_KEY": "k", "DB_PATH": "/tmp/x.db", "CLASSIFIER_POLICY": "KEYWORD", "PORT": "8080"},
        clear=True,
    )
    def test_reads_environment(self):
        settings = Settings()
        assert settings.anthropic_api_key == "k"
        assert settings.db_path == Path("/tmp/x.db")
        assert settings.classifier_policy == "keyword"
        assert settings.port == 8080

    @patch.dict(os.environ, {}, clear=True)
    def test_validate_requires_api_key(self):
        with pytest.raises(ValueError, match="ANTHROPIC_API_KEY"):
            Settings().validate()

    def test_validate_rejects_unknown_policy(self):
        with pytest.raises(ValueError, match="CLASSIFIER_POLICY"):
            Settings(anthropic_api_key="k", classifier_policy="magic").validate()

    def test_validate_accepts_valid_settings(self):
        Settings(anthropic_api_key="k", classifier_policy="keyword").validate()
