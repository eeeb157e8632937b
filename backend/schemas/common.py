# backend/schemas/common.py
from typing import Annotated

from pydantic import BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel


# Base configuration for ORM compatibility; JSON keys are camelCase,
# request bodies accept either camelCase or snake_case
class ORMBase(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# Names are trimmed before the length check, so "   " is rejected
Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
UnitName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]


class MessageResponse(ORMBase):
    message: str
