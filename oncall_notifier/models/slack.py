"""Тело запроса для входящего вебхука Slack (legacy attachments)."""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class SlackAttachmentField(BaseModel):
    title: str
    value: Optional[str] = None
    short: Optional[bool] = None


class SlackAttachment(BaseModel):
    fallback: Optional[str] = None
    pretext: Optional[str] = None
    color: Optional[str] = None
    fields: List[SlackAttachmentField] = Field(default_factory=list)


class SlackWebhookRequest(BaseModel):
    text: Optional[str] = None
    channel: Optional[str] = None
    username: Optional[str] = None
    icon_url: Optional[str] = None
    icon_emoji: Optional[str] = None
    attachments: List[SlackAttachment] = Field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        # None-поля Slack не нужны; пустой список fields остаётся в теле
        return self.model_dump(exclude_none=True)
