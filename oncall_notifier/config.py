import logging
from dataclasses import dataclass
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_URL = "https://api.eu.squadcast.com"
DEFAULT_AUTH_URL = "https://auth.eu.squadcast.com"

ACCESS_TOKEN_PATH = "/oauth/access-token"
TEAMS_PATH = "/v3/teams"
GRAPHQL_PATH = "/v3/graphql"
ONCALL_PATH = "/v4/schedules/who-is-oncall"


@dataclass(frozen=True)
class SquadcastEndpoints:
    """Адреса API Squadcast (регион задаётся базовыми URL)."""

    api_url: str = DEFAULT_API_URL
    auth_url: str = DEFAULT_AUTH_URL

    @property
    def access_token_url(self) -> str:
        return self.auth_url.rstrip("/") + ACCESS_TOKEN_PATH

    @property
    def teams_url(self) -> str:
        return self.api_url.rstrip("/") + TEAMS_PATH

    @property
    def graphql_url(self) -> str:
        return self.api_url.rstrip("/") + GRAPHQL_PATH

    @property
    def who_is_oncall_url(self) -> str:
        return self.api_url.rstrip("/") + ONCALL_PATH


DEFAULT_ENDPOINTS = SquadcastEndpoints()


class Settings(BaseSettings):
    """Настройки приложения (берутся из окружения или .env)"""
    squadcast_refresh_token: str = Field(..., description="Long-lived Squadcast refresh token")
    squadcast_team_name: str = Field(..., description="Team name, matched exactly")
    squadcast_schedule_name: str = Field(..., description="Schedule name, matched exactly")
    slack_webhook_url: str = Field(..., description="Slack incoming webhook URL")

    # Тип смены пока не участвует в выборке дежурных, только передаётся дальше
    oncall_shift_type: Optional[str] = Field(None)

    # Регион Squadcast: по умолчанию EU
    squadcast_api_url: str = Field(DEFAULT_API_URL)
    squadcast_auth_url: str = Field(DEFAULT_AUTH_URL)

    http_timeout: float = Field(30, description="Connect/read timeout in seconds")
    log_level: str = Field("INFO")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v):
        level = str(v).upper()
        if level not in logging._nameToLevel:
            raise ValueError(f"invalid log level: {v}")
        return level

    @field_validator("http_timeout")
    @classmethod
    def validate_http_timeout(cls, v):
        if v <= 0:
            raise ValueError("HTTP_TIMEOUT must be positive")
        return v

    def endpoints(self) -> SquadcastEndpoints:
        return SquadcastEndpoints(
            api_url=self.squadcast_api_url,
            auth_url=self.squadcast_auth_url,
        )
