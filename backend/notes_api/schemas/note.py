"""
Notes API — Pydantic Request/Response Schemas
===============================================

What:  Pydantic models defining the API contract for the notes resource.
Why:   Request bodies pass through one explicit schema with defined coercion
       rules before anything touches the database.
How:   Route handlers call NoteInput.from_payload() on the decoded JSON body
       and serialize rows through NoteResponse.

Input coercion rules (NoteInput):
    title:    must be a string; surrounding whitespace removed; must be
              non-empty afterwards and at most 255 characters
    content:  missing → ""; strings kept verbatim; any other JSON value
              (null, number, boolean, object, array) → its compact JSON text,
              so null is stored as "null"

Path ids (parse_note_id):
    any literal whose numeric value is a whole number: "7", "+7", "7.0",
    "7e0", "0x7", "0o7", "0b111"; it must also fit a PostgreSQL INTEGER
"""

import json
import re
from decimal import Decimal, DecimalException
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator

from notes_api.exceptions import ValidationError
from notes_api.models.note import TITLE_MAX_LENGTH

TITLE_REQUIRED = "Title is required"
TITLE_TOO_LONG = f"Title must be at most {TITLE_MAX_LENGTH} characters"
INVALID_ID = "Invalid id"

# Bounds of a PostgreSQL INTEGER (SERIAL) column
ID_MIN = -(2 ** 31)
ID_MAX = 2 ** 31 - 1

_DECIMAL_ID = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_PREFIXED_ID = re.compile(r"0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)")


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteInput(BaseModel):
    """
    What:  Validated body of POST /notes and PUT /notes/{id}.
    Who:   Built by the notes routes; consumed by NoteService.
    """

    title: str = Field(max_length=TITLE_MAX_LENGTH)
    content: str = Field(default="")

    model_config = {"extra": "ignore"}

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v: Any) -> str:
        if not isinstance(v, str):
            raise ValueError("title must be a string")
        stripped = v.strip()
        if not stripped:
            raise ValueError("title must not be blank")
        return stripped

    @field_validator("content", mode="before")
    @classmethod
    def stringify_content(cls, v: Any) -> str:
        if isinstance(v, str):
            return v
        return json.dumps(v, separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def from_payload(cls, payload: Any) -> "NoteInput":
        """
        Validate a decoded JSON body.

        A body that is not a JSON object is treated as an empty one, so it
        fails on the missing title like any other incomplete request.

        Raises:
            ValidationError: Title missing, not a string, blank or too long.
        """
        if not isinstance(payload, dict):
            payload = {}
        try:
            return cls.model_validate(payload)
        except PydanticValidationError as e:
            if any(err["type"] == "string_too_long" for err in e.errors()):
                raise ValidationError(TITLE_TOO_LONG, field="title") from e
            raise ValidationError(TITLE_REQUIRED, field="title") from e


def parse_note_id(raw: str) -> int:
    """
    Parse the `{id}` path segment.

    Any numeric literal with a whole-number value is accepted, so "1", "1.0",
    "1e0" and "0x1" all address note 1. Fractions ("1.5"), non-numbers
    ("abc", "") and values outside a PostgreSQL INTEGER ("99999999999") are
    client errors.
    """
    candidate = raw.strip()

    if _PREFIXED_ID.fullmatch(candidate):
        number = Decimal(int(candidate, 0))
    elif _DECIMAL_ID.fullmatch(candidate):
        try:
            number = Decimal(candidate)
        except DecimalException:
            # Exponents beyond what decimal can represent
            raise ValidationError(INVALID_ID, field="id", context={"value": raw}) from None
    else:
        raise ValidationError(INVALID_ID, field="id", context={"value": raw})

    # Range first: keeps huge exponents away from the integral check
    if not ID_MIN <= number <= ID_MAX or number != number.to_integral_value():
        raise ValidationError(INVALID_ID, field="id", context={"value": raw})
    return int(number)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """
    What:  Full representation of a stored note.
    Who:   Returned by list, create and update.
    """
    id: int = Field(description="Server-assigned identifier")
    title: str = Field(description="Trimmed title")
    content: str = Field(description="Note body; empty string when absent")
    created_at: datetime = Field(description="Creation time, set once by the database")
    updated_at: datetime = Field(description="Last modification time")

    model_config = {"from_attributes": True}

    @field_validator("content", mode="before")
    @classmethod
    def null_content_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class ErrorResponse(BaseModel):
    """Body of every error response: `{"error": "<message>"}`."""
    error: str = Field(description="Human-readable error message")


class HealthResponse(BaseModel):
    """Body of a successful health check."""
    status: str = Field(default="ok")
