from datetime import date, datetime
import re
from pydantic import BaseModel, model_validator
from typing import Any, Union, get_args, get_origin

INVISIBLE_CHARS_PATTERN = re.compile(
    r'[\u200b-\u200f\u202a-\u202e\u2066-\u2069\ufeff]')


def deep_clean(value: Any):
    """Recursively convert empty strings to None and strip invisible chars."""

    if isinstance(value, BaseModel):
        return type(value)(**deep_clean(value.model_dump()))

    if isinstance(value, dict):
        return {k: deep_clean(v) for k, v in value.items()}

    if isinstance(value, list):
        return [deep_clean(v) for v in value]

    if isinstance(value, str):
        cleaned = INVISIBLE_CHARS_PATTERN.sub("", value).strip()
        return None if cleaned == "" else cleaned

    return value


def _date_kind(annotation):
    """datetime, date or None for a (possibly Optional) annotation."""
    candidates = get_args(annotation) if get_origin(annotation) is Union else (annotation,)
    if datetime in candidates:
        return datetime
    if date in candidates:
        return date
    return None


def safe_parse_date(value: Any, kind=date):
    """Parse ISO date strings; anything unparseable is returned as-is so
    validation reports it."""
    if value is None or isinstance(value, (date, datetime)) or not isinstance(value, str):
        return value

    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value

    return parsed if kind is datetime else parsed.date()


class EmptyStringModel(BaseModel):
    model_config = {
        "populate_by_name": True,
        "from_attributes": True,
    }

    # STEP 1: Pre-clean input
    @model_validator(mode="before")
    @classmethod
    def clean_input(cls, values):
        if isinstance(values, dict):
            return deep_clean(values)
        return values

    # STEP 2: Date strings to date/datetime by field type
    @model_validator(mode="before")
    @classmethod
    def fix_dates(cls, values):
        if not isinstance(values, dict):
            return values

        for field_name, field in cls.model_fields.items():
            kind = _date_kind(field.annotation)
            if kind and field_name in values:
                values[field_name] = safe_parse_date(values[field_name], kind)

        return values
