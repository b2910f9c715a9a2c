"""Tests for connection settings, command-line resolution and logging setup."""

import logging

import pytest

import main
from core.config.client import (
    BACKEND_URL_ENV,
    DEFAULT_BACKEND_URL,
    POLL_INTERVAL_ENV,
    REQUEST_TIMEOUT_ENV,
    ClientSettings,
)
from core.exceptions import ConfigurationError
from viewer.logging_config import configure_logging


class TestClientSettings:
    def test_defaults(self):
        settings = ClientSettings.from_env({})

        assert settings.backend_url == DEFAULT_BACKEND_URL
        assert settings.poll_interval_ms == 100
        assert settings.poll_interval == pytest.approx(0.1)
        assert settings.request_timeout == 5.0

    def test_environment_overrides(self):
        settings = ClientSettings.from_env(
            {
                BACKEND_URL_ENV: "http://sim:9000/",
                POLL_INTERVAL_ENV: "250",
                REQUEST_TIMEOUT_ENV: "1.5",
            }
        )

        assert settings.backend_url == "http://sim:9000"
        assert settings.poll_interval_ms == 250
        assert settings.request_timeout == 1.5

    @pytest.mark.parametrize(
        "environ",
        [
            {POLL_INTERVAL_ENV: "fast"},
            {POLL_INTERVAL_ENV: "0"},
            {REQUEST_TIMEOUT_ENV: "never"},
            {REQUEST_TIMEOUT_ENV: "-1"},
        ],
    )
    def test_invalid_values_raise(self, environ):
        with pytest.raises(ConfigurationError):
            ClientSettings.from_env(environ)


class TestCommandLine:
    def test_flags_override_environment(self, monkeypatch):
        monkeypatch.setenv(BACKEND_URL_ENV, "http://from-env:8080")
        args = main.build_arg_parser().parse_args(
            ["--backend-url", "http://from-flag:8080", "--poll-interval-ms", "50"]
        )

        settings = main.resolve_settings(args)

        assert settings.backend_url == "http://from-flag:8080"
        assert settings.poll_interval_ms == 50

    def test_environment_used_without_flags(self, monkeypatch):
        monkeypatch.setenv(BACKEND_URL_ENV, "http://from-env:8080")
        args = main.build_arg_parser().parse_args(["--headless"])

        settings = main.resolve_settings(args)

        assert settings.backend_url == "http://from-env:8080"
        assert args.headless is True
        assert args.duration == 10.0

    def test_invalid_environment_exits_with_error(self, monkeypatch):
        monkeypatch.setenv(POLL_INTERVAL_ENV, "often")

        assert main.main(["--headless", "--duration", "0"]) == 2


@pytest.fixture(autouse=True)
def restore_logger_levels():
    names = ("viewer", "rendering", "core", "httpx", "httpcore")
    saved = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


class TestLogging:
    def test_http_loggers_quiet_unless_debug(self):
        configure_logging(level="INFO")
        assert logging.getLogger("httpx").level == logging.WARNING

        configure_logging(level="DEBUG")
        assert logging.getLogger("httpx").level == logging.DEBUG

    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("FLYWAY_LOG_LEVEL", "warning")

        app_logger = configure_logging()

        assert app_logger.level == logging.WARNING

    def test_extra_loggers_follow_level(self):
        configure_logging(level="ERROR", extra_loggers=("rendering", "core"))

        assert logging.getLogger("viewer").level == logging.ERROR
        assert logging.getLogger("rendering").level == logging.ERROR
        assert logging.getLogger("core").level == logging.ERROR

    def test_main_configures_every_package_logger(self, monkeypatch):
        monkeypatch.setenv(POLL_INTERVAL_ENV, "often")

        assert main.main(["--headless", "--log-level", "WARNING"]) == 2

        for name in ("viewer", "rendering", "core"):
            assert logging.getLogger(name).level == logging.WARNING
