from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_serializer

from hopebot.core.timezone import format_time


def _camel(name: str, camel: str):
    # Read from ORM attributes or re-validated JSON, always write camelCase
    return Field(validation_alias=AliasChoices(name, camel), serialization_alias=camel)


class MessageIn(BaseModel):
    content: Optional[str] = None


class MessageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    user_id: int = _camel("user_id", "userId")
    content: str
    is_bot: str = _camel("is_bot", "isBot")
    created_at: datetime = _camel("created_at", "createdAt")

    @field_serializer("created_at")
    def _created_at(self, value: datetime) -> str:
        return format_time(value)


class SendResult(BaseModel):
    message: str
    response: MessageOut


class ConversationOut(BaseModel):
    date: str
    messages: List[MessageOut]


class DistressOut(BaseModel):
    level: str
    confidence: float
