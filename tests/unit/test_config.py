"""
Document settings tests.
"""

import pytest
from pydantic import ValidationError

from codegraph_document.config import DocumentSettings, get_settings


class TestDocumentSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("CODEGRAPH_DOCUMENT_UNIT_WIDTH", raising=False)
        monkeypatch.delenv("CODEGRAPH_DOCUMENT_LOG_FORMAT", raising=False)
        settings = DocumentSettings(_env_file=None)

        assert settings.unit_width == 2
        assert settings.source_chunk_size == 1024
        assert settings.log_format == "console"

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("CODEGRAPH_DOCUMENT_UNIT_WIDTH", "1")
        monkeypatch.setenv("CODEGRAPH_DOCUMENT_LOG_FORMAT", "json")

        settings = DocumentSettings(_env_file=None)

        assert settings.unit_width == 1
        assert settings.log_format == "json"

    @pytest.mark.parametrize("width", ["0", "4"])
    def test_rejects_unsupported_width(self, monkeypatch, width):
        monkeypatch.setenv("CODEGRAPH_DOCUMENT_UNIT_WIDTH", width)

        with pytest.raises(ValidationError):
            DocumentSettings(_env_file=None)

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()
