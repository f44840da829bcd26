"""Unit tests for config/settings.py."""

from config.settings import Settings, get_settings


class TestSettingsDefaults:
    def test_catalog_defaults(self, mock_settings):
        assert mock_settings.artist_cache_ttl == 604800
        assert mock_settings.catalog_request_delay == 1.1
        assert mock_settings.discogs_rate_limit == 55
        assert mock_settings.setlistfm_rate_limit == 120
        assert mock_settings.http_timeout == 10.0

    def test_app_metadata(self, mock_settings):
        assert mock_settings.app_name == "SoundCheckd-Catalog"
        assert mock_settings.app_version == "0.1.0"

    def test_discogs_user_agent_is_descriptive(self, mock_settings):
        assert mock_settings.discogs_user_agent.startswith("SoundCheckd/")


class TestConfiguredFlags:
    def test_unconfigured(self, mock_settings):
        assert mock_settings.discogs_configured is False
        assert mock_settings.setlistfm_configured is False

    def test_discogs_requires_both_credentials(self):
        settings = Settings(discogs_consumer_key="key", discogs_consumer_secret=None)
        assert settings.discogs_configured is False

        settings = Settings(discogs_consumer_key="key", discogs_consumer_secret="secret")
        assert settings.discogs_configured is True

    def test_setlistfm_configured(self):
        assert Settings(setlistfm_api_key="abc").setlistfm_configured is True


class TestEnvironmentLoading:
    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("SETLISTFM_API_KEY", "from-env")
        monkeypatch.setenv("ARTIST_CACHE_TTL", "60")
        monkeypatch.setenv("CATALOG_REQUEST_DELAY", "0.5")

        settings = Settings()

        assert settings.setlistfm_api_key == "from-env"
        assert settings.artist_cache_ttl == 60
        assert settings.catalog_request_delay == 0.5

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()
