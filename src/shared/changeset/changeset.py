"""Immutable change-tracking value used to validate input against a record.

A changeset wraps a record (an ORM instance or any plain object), the changes
proposed for it and the errors collected while validating those changes.
Every operation returns a new changeset; neither the record nor the previous
changeset is ever modified.

Usage:
    changeset = (
        Changeset.change(user)
        .cast(params, ["email"])
        .validate_required(["email"])
    )
    if changeset.valid:
        changeset.apply_to(user)
"""

import re
from collections.abc import Callable, Iterable, Mapping
from typing import Any

import regex
from pydantic import BaseModel, ConfigDict, Field

BLANK_MESSAGE = "can't be blank"
INVALID_MESSAGE = "is invalid"
FORMAT_MESSAGE = "has invalid format"
TAKEN_MESSAGE = "has already been taken"


class UniqueConstraint(BaseModel):
    """A uniqueness rule declared on a changeset and enforced at commit time."""

    model_config = ConfigDict(frozen=True)

    field: str
    name: str
    message: str = TAKEN_MESSAGE


class Changeset(BaseModel):
    """Record + proposed changes + accumulated field errors."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    data: Any
    changes: dict[str, Any] = Field(default_factory=dict)
    errors: dict[str, list[str]] = Field(default_factory=dict)
    constraints: tuple[UniqueConstraint, ...] = ()

    @classmethod
    def change(cls, data: Any, changes: Mapping[str, Any] | None = None) -> "Changeset":
        """Start a new changeset for a record."""
        return cls(data=data, changes=dict(changes or {}))

    @classmethod
    def wrap(cls, data_or_changeset: Any) -> "Changeset":
        """Return the changeset as is, or start a new one for a record."""
        if isinstance(data_or_changeset, Changeset):
            return data_or_changeset
        return cls.change(data_or_changeset)

    @property
    def valid(self) -> bool:
        """A changeset is valid when no errors have been added."""
        return not self.errors

    # Changes

    def cast(self, params: Mapping[str, Any] | None, permitted: Iterable[str]) -> "Changeset":
        """Accept the permitted fields from params as changes.

        Empty strings are treated as missing values. A value equal to the
        record's current value removes any pending change for that field.
        Non-string values are rejected with an "is invalid" error.

        Args:
            params: Raw input map, keyed by field name
            permitted: Field names to accept from params

        Returns:
            New changeset with the accepted changes

        """
        params = {str(key): value for key, value in (params or {}).items()}
        changes = dict(self.changes)
        errors = _copy_errors(self.errors)

        for field in permitted:
            if field not in params:
                continue

            value = params[field]
            if value == "":
                value = None

            if value is not None and not isinstance(value, str):
                errors.setdefault(field, []).append(INVALID_MESSAGE)
                continue

            if value == getattr(self.data, field, None):
                changes.pop(field, None)
            else:
                changes[field] = value

        return self.model_copy(update={"changes": changes, "errors": errors})

    def get_change(self, field: str, default: Any = None) -> Any:
        """Get a pending change, or default when there is none."""
        return self.changes.get(field, default)

    def get_field(self, field: str, default: Any = None) -> Any:
        """Get a pending change, falling back to the record's value."""
        if field in self.changes:
            return self.changes[field]
        return getattr(self.data, field, default)

    def put_change(self, field: str, value: Any) -> "Changeset":
        """Set a change, dropping it when it equals the record's value."""
        changes = dict(self.changes)
        if value == getattr(self.data, field, None):
            changes.pop(field, None)
        else:
            changes[field] = value
        return self.model_copy(update={"changes": changes})

    def update_change(self, field: str, function: Callable[[Any], Any]) -> "Changeset":
        """Transform a pending change. No-op when the field has no change."""
        if field not in self.changes:
            return self
        return self.put_change(field, function(self.changes[field]))

    def apply_to(self, target: Any, fields: Iterable[str] | None = None) -> Any:
        """Write the changes onto target.

        Only used by the commit step; validation never calls this.

        Args:
            target: Object receiving the changes
            fields: Restrict the written changes to these fields

        Returns:
            The target

        """
        allowed = set(fields) if fields is not None else None
        for field, value in self.changes.items():
            if allowed is None or field in allowed:
                setattr(target, field, value)
        return target

    # Errors

    def add_error(self, field: str, message: str) -> "Changeset":
        """Attach an error message to a field."""
        errors = _copy_errors(self.errors)
        errors.setdefault(field, []).append(message)
        return self.model_copy(update={"errors": errors})

    # Validations

    def validate_required(self, fields: Iterable[str], message: str = BLANK_MESSAGE) -> "Changeset":
        """Require fields to hold a non-blank value.

        Fields that already carry an error are left alone.
        """
        changeset = self
        for field in fields:
            if field in changeset.errors:
                continue
            if _is_missing(changeset.get_field(field)):
                changeset = changeset.add_error(field, message)
        return changeset

    def validate_change(self, field: str, validator: Callable[[str, Any], list[str]]) -> "Changeset":
        """Run validator on a pending, non-null change and attach its errors."""
        value = self.changes.get(field)
        if value is None:
            return self

        changeset = self
        for message in validator(field, value):
            changeset = changeset.add_error(field, message)
        return changeset

    def validate_length(
        self, field: str, min_length: int | None = None, max_length: int | None = None
    ) -> "Changeset":
        """Validate the length of a pending change, counted in graphemes.

        A base letter followed by combining marks counts as one character.
        """

        def _validate(_field: str, value: Any) -> list[str]:
            length = grapheme_length(value)
            if min_length is not None and length < min_length:
                return [f"should be at least {min_length} character(s)"]
            if max_length is not None and length > max_length:
                return [f"should be at most {max_length} character(s)"]
            return []

        return self.validate_change(field, _validate)

    def validate_format(
        self, field: str, pattern: str | re.Pattern[str], message: str = FORMAT_MESSAGE
    ) -> "Changeset":
        """Validate that a pending change matches pattern."""
        compiled = re.compile(pattern) if isinstance(pattern, str) else pattern

        def _validate(_field: str, value: Any) -> list[str]:
            return [] if compiled.search(value) else [message]

        return self.validate_change(field, _validate)

    # Constraints

    def unique_constraint(self, field: str, name: str | None = None, message: str = TAKEN_MESSAGE) -> "Changeset":
        """Declare that field must be unique in storage.

        Nothing is checked here. The commit step checks declared constraints
        and reports violations as errors on the field.
        """
        name = name or _default_constraint_name(self.data, field)
        constraint = UniqueConstraint(field=field, name=name, message=message)
        return self.model_copy(update={"constraints": (*self.constraints, constraint)})


GRAPHEME = regex.compile(r"\X")


def grapheme_length(value: str) -> int:
    """Count extended grapheme clusters in value."""
    return len(GRAPHEME.findall(value))


def _copy_errors(errors: dict[str, list[str]]) -> dict[str, list[str]]:
    return {field: list(messages) for field, messages in errors.items()}


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def _default_constraint_name(data: Any, field: str) -> str:
    table = getattr(data, "__tablename__", None) or type(data).__name__.lower()
    return f"{table}_{field}_key"
