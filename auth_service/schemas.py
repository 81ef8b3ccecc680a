from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class IdResponse(BaseModel):
    id: int


class UserOut(CamelModel):
    """Public view of a user. There is no password field to leak."""
    id: int
    first_name: str
    last_name: str
    email: str
    role: str
    created_at: datetime
    updated_at: datetime


class JWKSet(BaseModel):
    keys: list[dict]
