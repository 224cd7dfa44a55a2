from pydantic import BaseModel, Field
from datetime import datetime

class MessageSendRequest(BaseModel):
    dst: str = Field(..., min_length=1)
    content: str

class ConversationMessage(BaseModel):
    src: str
    dst: str
    content: str
    createdAt: datetime
