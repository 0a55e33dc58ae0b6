"""Changesets for user credentials.

Three entry points validate one group of fields each and can be chained:

- user_id_field_changeset: the user-id field (email by default)
- password_changeset: password and confirm_password, producing password_hash
- current_password_changeset: current_password against the stored hash

Each takes a user or a prior changeset, the raw params and the credential
configuration, and always returns a changeset. Nothing here raises on bad
input; failures are collected as field errors.
"""

import logging
from collections.abc import Mapping
from typing import Any

from src.config.credentials import ConfigInput, CredentialConfig, resolve_config
from src.shared.changeset.changeset import Changeset
from src.shared.validators.email import EMAIL_FORMAT

from .models import normalize_user_id_field_value, user_id_field

logger = logging.getLogger(__name__)

CONFIRM_PASSWORD_MESSAGE = "not same as password"
CURRENT_PASSWORD_MESSAGE = "is invalid"

Params = Mapping[str, Any] | None


def user_id_field_changeset(user_or_changeset: Any, params: Params, config: ConfigInput = None) -> Changeset:
    """Validate and normalize the user-id field.

    The value is normalized before validation, email fields are checked
    against the email format, and uniqueness is declared for the commit step.
    """
    field = user_id_field(user_or_changeset)

    changeset = (
        Changeset.wrap(user_or_changeset)
        .cast(params, [field])
        .update_change(field, normalize_user_id_field_value)
    )
    changeset = _maybe_validate_email_format(changeset, field)

    return changeset.validate_required([field]).unique_constraint(field)


def password_changeset(user_or_changeset: Any, params: Params, config: ConfigInput = None) -> Changeset:
    """Validate a new password and hash it into password_hash.

    Steps run in order:
    1. Cast password and confirm_password
    2. Require password when the user has no password hash yet
    3. Validate password length against the configured bounds
    4. Require confirm_password to match password
    5. Hash the password when the changeset is still valid
    6. Require password_hash

    Steps 3-5 only run when password is being changed.
    """
    config = resolve_config(config)

    changeset = Changeset.wrap(user_or_changeset).cast(params, ["password", "confirm_password"])
    changeset = _maybe_require_password(changeset)
    changeset = _maybe_validate_password(changeset, config.password_min_length, config.password_max_length)
    changeset = _maybe_validate_confirm_password(changeset)
    changeset = _maybe_put_password_hash(changeset, config)

    return changeset.validate_required(["password_hash"])


def current_password_changeset(user_or_changeset: Any, params: Params, config: ConfigInput = None) -> Changeset:
    """Validate current_password against the stored password hash.

    Skipped entirely when the user has no password hash yet: there is nothing
    to confirm, e.g. for accounts created through an external identity
    provider. Never adds persistable changes.
    """
    changeset = Changeset.wrap(user_or_changeset).cast(params, ["current_password"])
    return _maybe_validate_current_password(changeset, config)


def user_changeset(user_or_changeset: Any, params: Params, config: ConfigInput = None) -> Changeset:
    """Run the user-id field, current password and password changesets in order."""
    changeset = user_id_field_changeset(user_or_changeset, params, config)
    changeset = current_password_changeset(changeset, params, config)
    return password_changeset(changeset, params, config)


def verify_password(user: Any, password: str, config: ConfigInput = None) -> bool:
    """Verify a plaintext password against the user's password hash.

    A user without a password hash never verifies.
    """
    password_hash = getattr(user, "password_hash", None)
    if password_hash is None:
        return False

    _, verify = resolve_config(config).password_hash_methods
    return verify(password, password_hash)


def hash_password(password: str, config: ConfigInput = None) -> str:
    """Hash a plaintext password with the configured hash method."""
    hash_method, _ = resolve_config(config).password_hash_methods
    return hash_method(password)


def _maybe_validate_email_format(changeset: Changeset, field: str) -> Changeset:
    if field != "email":
        return changeset
    return changeset.validate_format(field, EMAIL_FORMAT)


def _maybe_validate_current_password(changeset: Changeset, config: ConfigInput) -> Changeset:
    if changeset.data.password_hash is None:
        return changeset

    changeset = changeset.validate_required(["current_password"])
    if not changeset.valid:
        return changeset

    if verify_password(changeset.data, changeset.get_change("current_password"), config):
        return changeset

    logger.info("Current password verification failed")
    return changeset.add_error("current_password", CURRENT_PASSWORD_MESSAGE)


def _maybe_require_password(changeset: Changeset) -> Changeset:
    if changeset.data.password_hash is None:
        return changeset.validate_required(["password"])
    return changeset


def _maybe_validate_password(changeset: Changeset, min_length: int, max_length: int) -> Changeset:
    if changeset.get_change("password") is None:
        return changeset
    return changeset.validate_length("password", min_length=min_length, max_length=max_length)


def _maybe_validate_confirm_password(changeset: Changeset) -> Changeset:
    password = changeset.get_change("password")
    if password is None:
        return changeset

    if changeset.get_change("confirm_password") != password:
        return changeset.add_error("confirm_password", CONFIRM_PASSWORD_MESSAGE)
    return changeset


def _maybe_put_password_hash(changeset: Changeset, config: CredentialConfig) -> Changeset:
    password = changeset.get_change("password")
    if not changeset.valid or password is None:
        return changeset
    return changeset.put_change("password_hash", hash_password(password, config))
