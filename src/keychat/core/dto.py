from pydantic import BaseModel
from datetime import datetime

class UserDTO(BaseModel):
    id: int
    username: str
    email: str

class RegisteredUserDTO(BaseModel):
    id: int
    key: str

class ApiKeyOwnerDTO(BaseModel):
    id: int
    username: str
    active: bool

class MessageDTO(BaseModel):
    id: int
    src_id: int
    dst_id: int
    content: str
    created_at: datetime
