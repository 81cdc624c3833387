"""Shared pydantic base: snake_case attributes, camelCase JSON."""
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelSchema(BaseModel):
    class Config:
        from_attributes = True
        populate_by_name = True
        alias_generator = to_camel
