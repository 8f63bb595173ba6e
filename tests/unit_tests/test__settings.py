from b2_relay.config.settings import DEFAULT_B2_AUTH_URL, Settings


def test__settings__reads_environment(monkeypatch):
    monkeypatch.setenv("B2_KEY_ID", "key-id")
    monkeypatch.setenv("B2_APP_KEY", "app-key")
    monkeypatch.setenv("B2_BUCKET_ID", "bucket-id")
    monkeypatch.setenv("B2_BUCKET_NAME", "bucket-name")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings(_env_file=None)

    assert settings.b2_key_id == "key-id"
    assert settings.b2_app_key == "app-key"
    assert settings.b2_bucket_id == "bucket-id"
    assert settings.b2_bucket_name == "bucket-name"
    assert settings.port == 8080
    assert settings.log_level == "DEBUG"


def test__settings__defaults(monkeypatch):
    for name in ("B2_AUTH_URL", "PORT", "UPLOAD_DIR", "UPSTREAM_TIMEOUT", "CORS_ALLOW_ORIGINS"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.b2_auth_url == DEFAULT_B2_AUTH_URL
    assert settings.port == 3000
    assert settings.upload_dir == "uploads"
    assert settings.upstream_timeout is None
    assert settings.cors_allow_origins == ["*"]


def test__settings__reads_env_file(tmp_path, monkeypatch):
    monkeypatch.delenv("B2_BUCKET_NAME", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("B2_BUCKET_NAME=from-dotenv\nB2_AUTH_URL=https://auth.example.com/\n")

    settings = Settings(_env_file=env_file)

    assert settings.b2_bucket_name == "from-dotenv"
    assert settings.b2_auth_url == "https://auth.example.com"


def test__as_display_dict__masks_app_key():
    settings = Settings(_env_file=None, b2_key_id="key-id", b2_app_key="secret")

    display = settings.as_display_dict()

    assert display["B2_KEY_ID"] == "key-id"
    assert display["B2_APP_KEY"] == "****"
    assert "secret" not in str(display)
