from fcm_client.config import DEFAULT_ENDPOINT, DEFAULT_TIMEOUT, Settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("FCM_API_KEY", "FCM_CREDENTIALS_PATH", "FCM_ENDPOINT", "FCM_TIMEOUT"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.endpoint == DEFAULT_ENDPOINT
        assert settings.timeout == DEFAULT_TIMEOUT
        assert settings.api_key == ""
        assert settings.credentials_path == ""
        assert settings.retry_min_backoff == 0.1
        assert settings.retry_max_backoff == 60.0

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("FCM_API_KEY", "env-key")
        monkeypatch.setenv("FCM_TIMEOUT", "12.5")
        monkeypatch.setenv("FCM_ENDPOINT", "https://push.example.com/send")

        settings = Settings(_env_file=None)

        assert settings.api_key == "env-key"
        assert settings.timeout == 12.5
        assert settings.endpoint == "https://push.example.com/send"

    def test_unprefixed_variables_are_ignored(self, monkeypatch):
        monkeypatch.delenv("FCM_API_KEY", raising=False)
        monkeypatch.setenv("API_KEY", "wrong")

        assert Settings(_env_file=None).api_key == ""
