from email_validation.config import Settings
from email_validation.db import build_database_url


def test_validation_link_template_joins_frontend_url(monkeypatch):
    monkeypatch.setenv("FRONTEND_URL", "https://cms.example.com/")
    monkeypatch.setenv("VALIDATION_LINK_PATH", "/account/validate/{0}")
    s = Settings()
    assert s.validation_link_template == "https://cms.example.com/account/validate/{0}"


def test_database_url_override(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
    assert build_database_url(Settings()) == "sqlite+aiosqlite:///./test.db"


def test_database_url_from_parts(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    s = Settings(database_url="", db_host="pg", db_port=5433, db_user="u", db_password="p", db_name="cms")
    assert build_database_url(s) == "postgresql+asyncpg://u:p@pg:5433/cms"
