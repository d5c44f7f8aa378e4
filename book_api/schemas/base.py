from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# Largest value of the 32-bit integer ID columns
MAX_ID = 2_147_483_647


class CamelModel(BaseModel):
    """
    Base schema exposing snake_case attributes as camelCase JSON fields.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class MessageResponse(BaseModel):
    message: str
