"""
Tests for configuration loading and repository parsing.
"""

import os
from unittest.mock import patch

import pytest

import issue_notifier.config
from issue_notifier.config import (
    MIN_POLL_INTERVAL_SECONDS,
    Settings,
    get_settings,
    parse_duration,
    parse_github_url,
)
from issue_notifier.exceptions import ConfigurationError


class TestParseGitHubURL:
    """Test repository reference parsing."""

    @pytest.mark.parametrize(
        "url",
        [
            "octo/widgets",
            "https://github.com/octo/widgets",
            "https://github.com/octo/widgets/",
            "https://github.com/octo/widgets/issues",
            "  https://github.com/octo/widgets/issues/  ",
            "https://www.github.com/octo/widgets",
            "https://github.com/octo/widgets.git",
        ],
    )
    def test_valid_references(self, url):
        """Test that supported reference formats parse to owner and repo."""
        assert parse_github_url(url) == ("octo", "widgets")

    @pytest.mark.parametrize(
        "url",
        [
            "widgets",
            "octo/widgets/extra",
            "/widgets",
            "octo/",
            "https://gitlab.com/octo/widgets",
            "https://github.com/octo",
        ],
    )
    def test_invalid_references(self, url):
        """Test that malformed references are rejected."""
        with pytest.raises(ValueError):
            parse_github_url(url)


class TestParseDuration:
    """Test poll interval parsing."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("90s", 90.0),
            ("5m", 300.0),
            ("1h30m", 5400.0),
            ("500ms", 0.5),
            ("120", 120.0),
            (45, 45.0),
            (2.5, 2.5),
        ],
    )
    def test_valid_durations(self, value, expected):
        assert parse_duration(value) == expected

    @pytest.mark.parametrize("value", ["", "5 minutes", "m5", "10d", True])
    def test_invalid_durations(self, value):
        with pytest.raises(ValueError):
            parse_duration(value)


class TestSettings:
    """Test Settings loading from the environment."""

    def test_defaults(self):
        """Test default values when only the repository is configured."""
        with patch.dict(os.environ, {"GITHUB_REPO_URL": "octo/widgets"}, clear=True):
            settings = Settings(_env_file=None)

        assert settings.repository == ("octo", "widgets")
        assert settings.repository_full_name == "octo/widgets"
        assert settings.credential is None
        assert settings.poll_interval_seconds == 300.0
        assert settings.max_retries == 3
        assert settings.retry_delay_seconds == 5.0
        assert settings.notify_delay_seconds == 0.5
        assert settings.max_notification_length == 100
        assert settings.notifier_backend == "auto"

    def test_token_from_env(self):
        with patch.dict(
            os.environ,
            {"GITHUB_REPO_URL": "octo/widgets", "GITHUB_TOKEN": "secret"},
            clear=True,
        ):
            settings = Settings(_env_file=None)

        assert settings.credential == "secret"

    def test_poll_interval_duration_from_env(self):
        with patch.dict(
            os.environ,
            {"GITHUB_REPO_URL": "octo/widgets", "POLL_INTERVAL": "10m"},
            clear=True,
        ):
            settings = Settings(_env_file=None)

        assert settings.poll_interval_seconds == 600.0

    def test_poll_interval_floor(self):
        """Test that intervals below the floor are raised to it."""
        with patch.dict(
            os.environ,
            {"GITHUB_REPO_URL": "octo/widgets", "POLL_INTERVAL": "10s"},
            clear=True,
        ):
            settings = Settings(_env_file=None)

        assert settings.poll_interval_seconds == MIN_POLL_INTERVAL_SECONDS

    def test_invalid_poll_interval(self):
        with patch.dict(
            os.environ,
            {"GITHUB_REPO_URL": "octo/widgets", "POLL_INTERVAL": "soon"},
            clear=True,
        ):
            with pytest.raises(ValueError, match="Invalid duration"):
                Settings(_env_file=None)

    def test_invalid_repository(self):
        with patch.dict(
            os.environ, {"GITHUB_REPO_URL": "not-a-repo"}, clear=True
        ):
            with pytest.raises(ValueError, match="Invalid GitHub URL format"):
                Settings(_env_file=None)

    def test_invalid_notifier_backend(self):
        with pytest.raises(ValueError, match="Invalid notifier backend"):
            Settings(
                github_repo_url="octo/widgets",
                notifier_backend="pager",
                _env_file=None,
            )

    def test_log_level_normalized(self):
        settings = Settings(
            github_repo_url="octo/widgets", log_level="debug", _env_file=None
        )
        assert settings.log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValueError, match="Invalid log level"):
            Settings(github_repo_url="octo/widgets", log_level="loud", _env_file=None)

    def test_notification_length_lower_bound(self):
        with pytest.raises(ValueError):
            Settings(
                github_repo_url="octo/widgets",
                max_notification_length=3,
                _env_file=None,
            )

    def test_polling_config(self, mock_settings):
        """Test that the grouped polling configuration mirrors the settings."""
        config = mock_settings.polling_config

        assert config.poll_interval_seconds == mock_settings.poll_interval_seconds
        assert config.rate_limit_capacity == 30
        assert config.rate_limit_window_seconds == 60.0
        assert config.http_timeout_seconds == 10.0
        assert config.notification_title == "New GitHub Issue"


class TestGetSettings:
    """Test the lazily created settings instance."""

    def setup_method(self):
        issue_notifier.config._settings_instance = None

    def teardown_method(self):
        issue_notifier.config._settings_instance = None

    def test_missing_repository(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ConfigurationError, match="GITHUB_REPO_URL"):
                get_settings()

    def test_invalid_configuration(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with patch.dict(
            os.environ,
            {"GITHUB_REPO_URL": "octo/widgets", "MAX_RETRIES": "-1"},
            clear=True,
        ):
            with pytest.raises(ConfigurationError, match="Invalid configuration"):
                get_settings()

    def test_instance_is_cached(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with patch.dict(os.environ, {"GITHUB_REPO_URL": "octo/widgets"}, clear=True):
            first = get_settings()
            second = get_settings()

        assert first is second
