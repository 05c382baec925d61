import pytest
from pydantic import ValidationError

from docaudit.config.settings import Settings


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        s = Settings()
        assert s.app_env == "dev"

    def test_default_db_port(self) -> None:
        s = Settings()
        assert s.db_port == 5432

    def test_default_job_poll_interval(self) -> None:
        s = Settings()
        assert s.job_poll_interval_seconds == 5

    def test_default_pdf_engine(self) -> None:
        s = Settings()
        assert s.pdf_engine == "pdfplumber"

    def test_default_reasoning_provider(self) -> None:
        s = Settings()
        assert s.reasoning_provider == "openai"

    def test_default_reasoning_limits(self) -> None:
        s = Settings()
        assert s.reasoning_max_tokens == 2000
        assert s.reasoning_timeout_seconds == 60

    def test_default_excerpt_chars(self) -> None:
        s = Settings()
        assert s.cross_document_excerpt_chars == 2000


class TestSettingsFromEnv:
    def test_loads_app_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_ENV", "production")
        s = Settings()
        assert s.app_env == "production"

    def test_loads_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        s = Settings()
        assert s.log_level == "DEBUG"

    def test_loads_db_host(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_HOST", "db.example.com")
        s = Settings()
        assert s.db_host == "db.example.com"

    def test_loads_db_port(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_PORT", "5433")
        s = Settings()
        assert s.db_port == 5433

    def test_loads_reasoning_provider(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REASONING_PROVIDER", "example")
        s = Settings()
        assert s.reasoning_provider == "example"

    def test_loads_files_root(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FILES_ROOT", "/srv/uploads")
        s = Settings()
        assert s.files_root == "/srv/uploads"


class TestSettingsValidation:
    def test_invalid_db_port_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_PORT", "not_a_number")
        with pytest.raises(ValidationError):
            Settings()

    def test_invalid_timeout_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REASONING_TIMEOUT_SECONDS", "abc")
        with pytest.raises(ValidationError):
            Settings()
