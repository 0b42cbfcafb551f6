"""Shared pydantic base for API bodies.

Records are snake_case in Python and in the database; the web client
speaks camelCase. ``CamelModel`` accepts either on input and emits
camelCase when routes serialize with ``by_alias``.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
