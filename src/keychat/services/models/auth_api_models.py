from pydantic import BaseModel, Field
from dataclasses import dataclass

class UserRegisterRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    email: str = Field(..., min_length=1, max_length=255)

class UserRegisterResponse(BaseModel):
    id: int
    key: str

@dataclass(frozen=True)
class RequestContext:
    """ Identity of the caller, attached once the api key is validated """
    user_id: int
    username: str
