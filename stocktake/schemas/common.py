from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """JSON bodies use camelCase names; Python code uses snake_case."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        allow_inf_nan=False,
    )


def strip_required(value):
    value = (value or "").strip()
    if not value:
        raise ValueError("field is required")
    return value


def strip_optional(value):
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValueError("cannot be empty")
    return value


def non_negative(value):
    if value is not None and value < 0:
        raise ValueError("cannot be negative")
    return value


def positive(value):
    if value is not None and value <= 0:
        raise ValueError("must be greater than 0")
    return value


class MessageResponse(BaseModel):
    message: str
