"""
Base Models for Wire Validation

This module provides base classes that pin the wire contract of the engine.

MOTIVATION:
    Exercises cross three boundaries: they are generated as JSON by a model,
    cached/persisted as JSON, and served to clients as JSON. All three use the
    same camelCase field names (``correctAnswer``, ``multiSelect``,
    ``leftColumn`` ...). Python code works with snake_case attributes.

    - Every model generates camelCase aliases (alias_generator=to_camel)
    - populate_by_name=True lets Python code and tests use snake_case names
    - Serialize with ``by_alias=True`` to get the wire shape back

Usage:
    # For request bodies (unknown fields rejected)
    class ItemCreate(StrictRequest):
        item_name: str          # wire name: itemName

    # For records that are stored and served (frozen)
    class ItemRecord(WireRecord):
        item_id: str            # wire name: itemId
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class StrictRequest(BaseModel):
    """
    Base model for request bodies with strict validation.

    Features:
        - extra="forbid": Unknown fields raise a validation error
        - str_strip_whitespace=True: Trims whitespace from strings
        - camelCase aliases, snake_case accepted too

    Example:
        >>> class Submit(StrictRequest):
        ...     exercise_id: str
        >>>
        >>> Submit(exerciseId="abc")  # OK
        >>> Submit(exercise_id="abc")  # OK
        >>> Submit(exerciseId="abc", extra=1)  # Raises ValidationError
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class WireModel(BaseModel):
    """
    Lenient camelCase model for payloads produced by other systems.

    Generated exercise content is allowed to carry extra, type-specific
    fields; they are kept and round-tripped. Frozen, because it only ever
    lives inside an immutable exercise.
    """

    model_config = ConfigDict(
        extra="allow",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class WireRecord(BaseModel):
    """
    Frozen camelCase record.

    Used for values that are immutable once produced (exercises and
    everything nested in them, grading results).
    """

    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )
