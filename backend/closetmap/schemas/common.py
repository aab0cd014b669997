"""Shared schema configuration — camelCase on the wire, snake_case in Python."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for API schemas: accepts camelCase or snake_case, emits camelCase."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    message: str


def strip_required(value: str, field: str) -> str:
    """Strip whitespace; reject values that become empty."""
    value = value.strip()
    if not value:
        raise ValueError(f"{field} cannot be empty or whitespace")
    return value
