"""Shared pydantic configuration for request and response bodies.

Python attributes are snake_case; JSON keys are camelCase. Both spellings
are accepted on input.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    message: str = Field(..., description="Human-readable outcome")
