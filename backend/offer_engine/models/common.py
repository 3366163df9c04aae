"""Shared pydantic base for all document configuration models."""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Immutable input model that accepts both the camelCase keys sent by the
    proposal forms and the snake_case field names used in Python.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )
