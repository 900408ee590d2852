from docstore.config import Settings


def test_defaults(monkeypatch):
    for name in ("DATABASE_URL", "MAX_UPLOAD_BYTES", "ALLOWED_EXTENSIONS"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings()
    assert settings.database_url == "sqlite:///docstore.db"
    assert settings.max_upload_bytes == 10 * 1024 * 1024
    assert settings.allowed_extensions == [".pdf"]


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")
    monkeypatch.setenv("MAX_UPLOAD_BYTES", "1024")
    monkeypatch.setenv("ALLOWED_EXTENSIONS", '[".pdf", ".PDF"]')
    settings = Settings()
    assert settings.database_url == "sqlite:///:memory:"
    assert settings.max_upload_bytes == 1024
    assert settings.allowed_extensions == [".pdf", ".PDF"]
