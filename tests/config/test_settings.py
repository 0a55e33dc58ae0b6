"""Tests for application settings and credential configuration."""

import logging

import pytest
from pydantic import ValidationError

from src.config.credentials import CredentialConfig, resolve_config
from src.config.logging_config import JsonFormatter, configure_logging
from src.config.settings import Settings
from src.shared.security.password import ARGON2_HASH_METHODS, DEFAULT_HASH_METHODS, pbkdf2_verify


class TestSettings:
    """Tests for Settings validation."""

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.password_min_length == 10
        assert settings.password_max_length == 4096
        assert settings.password_hash_algorithm == "pbkdf2_sha512"

    def test_invalid_environment(self):
        with pytest.raises(ValidationError, match="Environment must be one of"):
            Settings(_env_file=None, environment="qa")

    def test_invalid_hash_algorithm(self):
        with pytest.raises(ValidationError, match="Password hash algorithm must be one of"):
            Settings(_env_file=None, password_hash_algorithm="md5")

    def test_min_length_above_max_length(self):
        with pytest.raises(ValidationError, match="exceeds password_max_length"):
            Settings(_env_file=None, password_min_length=20, password_max_length=10)

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("PASSWORD_MIN_LENGTH", "12")
        monkeypatch.setenv("PASSWORD_HASH_ALGORITHM", "ARGON2")

        settings = Settings(_env_file=None)

        assert settings.password_min_length == 12
        assert settings.password_hash_algorithm == "argon2"


class TestCredentialConfig:
    """Tests for CredentialConfig and resolve_config()"""

    def test_none_resolves_to_defaults(self):
        config = resolve_config(None)

        assert config.password_min_length == 10
        assert config.password_max_length == 4096
        assert config.password_hash_methods == DEFAULT_HASH_METHODS

    def test_mapping_ignores_unknown_keys(self):
        config = resolve_config({"password_min_length": 12, "mailer_backend": "smtp"})

        assert config.password_min_length == 12
        assert config.password_max_length == 4096

    def test_model_passes_through(self):
        config = CredentialConfig(password_min_length=8)

        assert resolve_config(config) is config

    def test_from_settings_argon2(self):
        config = CredentialConfig.from_settings(Settings(_env_file=None, password_hash_algorithm="argon2"))

        assert config.password_hash_methods == ARGON2_HASH_METHODS

    def test_from_settings_pbkdf2_rounds(self):
        config = CredentialConfig.from_settings(Settings(_env_file=None, pbkdf2_rounds=2_000))
        hash_method, verify_method = config.password_hash_methods

        password_hash = hash_method("secret123456")

        assert password_hash.startswith("$pbkdf2-sha512$2000$")
        assert verify_method is pbkdf2_verify


class TestLoggingConfig:
    """Tests for configure_logging()"""

    def test_json_formatter(self):
        record = logging.LogRecord("src.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)

        output = JsonFormatter().format(record)

        assert '"message": "hello world"' in output
        assert '"level": "INFO"' in output

    def test_configure_logging_sets_level(self):
        root = logging.getLogger()
        original_handlers, original_level = list(root.handlers), root.level

        try:
            configure_logging("debug", "text")

            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
        finally:
            for handler in list(root.handlers):
                root.removeHandler(handler)
            for handler in original_handlers:
                root.addHandler(handler)
            root.setLevel(original_level)
