"""Credential validation configuration.

Changesets accept their configuration as a ``CredentialConfig``, a plain
mapping (unknown keys are ignored) or ``None`` for the defaults:

- password_min_length: minimum password length, defaults to 10
- password_max_length: maximum password length, defaults to 4096
- password_hash_methods: (hash, verify) pair, defaults to PBKDF2-SHA512
"""

from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict

from src.config.settings import Settings, settings
from src.shared.security.password import DEFAULT_HASH_METHODS, hash_methods_for

DEFAULT_PASSWORD_MIN_LENGTH = 10
DEFAULT_PASSWORD_MAX_LENGTH = 4096


class CredentialConfig(BaseModel):
    """Length bounds and hash methods used by the credential changesets."""

    model_config = ConfigDict(frozen=True, extra="ignore", arbitrary_types_allowed=True)

    password_min_length: int = DEFAULT_PASSWORD_MIN_LENGTH
    password_max_length: int = DEFAULT_PASSWORD_MAX_LENGTH
    password_hash_methods: tuple[Callable[[str], str], Callable[[str, str], bool]] = DEFAULT_HASH_METHODS

    @classmethod
    def from_settings(cls, app_settings: Settings) -> "CredentialConfig":
        """Build the configuration from application settings."""
        return cls(
            password_min_length=app_settings.password_min_length,
            password_max_length=app_settings.password_max_length,
            password_hash_methods=hash_methods_for(
                app_settings.password_hash_algorithm, app_settings.pbkdf2_rounds
            ),
        )


ConfigInput = CredentialConfig | Mapping[str, Any] | None


def resolve_config(config: ConfigInput) -> CredentialConfig:
    """Normalize any accepted configuration input into a CredentialConfig."""
    if config is None:
        return CredentialConfig()
    if isinstance(config, CredentialConfig):
        return config
    return CredentialConfig.model_validate(dict(config))


def get_credential_config() -> CredentialConfig:
    """Get the credential configuration for the running application."""
    return CredentialConfig.from_settings(settings)
