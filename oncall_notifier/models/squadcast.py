"""
Модели ответов API Squadcast.

Поля, которые не нужны для уведомления (контакты, ротации и т.п.),
всё равно описаны, чтобы ответ разбирался и сериализовался без потерь.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SquadcastModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data):
        # null в ответе Squadcast означает "пусто": берём значение по умолчанию
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class SquadcastErrorDetails(SquadcastModel):
    status: int = 0
    error_message: str = ""


class SquadcastErrorResponse(SquadcastModel):
    meta: SquadcastErrorDetails


class AccessTokenDetails(SquadcastModel):
    access_token: str


class AccessTokenResponse(SquadcastModel):
    data: AccessTokenDetails


class Team(SquadcastModel):
    id: str
    name: str


class TeamsResponse(SquadcastModel):
    data: List[Team] = Field(default_factory=list)


class ScheduleRef(SquadcastModel):
    """Расписание из ответа GraphQL: числовой ID приходит в ключе "ID"."""
    name: str
    id: int = Field(alias="ID")


class SchedulesData(SquadcastModel):
    schedules: List[ScheduleRef] = Field(default_factory=list)


class Contact(SquadcastModel):
    dial_code: str = ""
    phone_number: str = ""


class OnCallPerson(SquadcastModel):
    id: str = ""
    first_name: str = ""
    last_name: str = ""
    username_for_display: str = ""
    email: str = ""
    contact: Contact = Field(default_factory=Contact)

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Rotation(SquadcastModel):
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    deleted_at: Optional[str] = None
    id: int = 0
    name: str = ""


class ScheduleDetails(SquadcastModel):
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    deleted_at: Optional[str] = None
    id: int = 0
    name: str = ""
    rotations: List[Rotation] = Field(default_factory=list)


class OnCallAssignment(SquadcastModel):
    """Одна запись who-is-oncall: расписание и люди, дежурящие по нему сейчас."""
    schedule: ScheduleDetails = Field(default_factory=ScheduleDetails)
    oncall: List[OnCallPerson] = Field(default_factory=list)


class OnCallResponse(SquadcastModel):
    data: List[OnCallAssignment] = Field(default_factory=list)
