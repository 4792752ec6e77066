"""Исключения, которыми этапы пайплайна сообщают о фатальных ошибках."""
from typing import List, Optional


class OnCallNotifierError(Exception):
    """Base exception for oncall-notifier."""
    pass


class SquadcastError(OnCallNotifierError):
    """Ошибка при обращении к Squadcast."""
    pass


class SquadcastTransportError(SquadcastError):
    """Network failure or timeout talking to Squadcast."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Request to {url} failed : {reason}")


class SquadcastAPIError(SquadcastError):
    """Squadcast вернул не-2xx ответ."""

    def __init__(self, url: str, status_code: int, error_message: str):
        self.url = url
        self.status_code = status_code
        self.error_message = error_message
        super().__init__(f"Squadcast returned HTTP {status_code} for {url} : {error_message}")


class SquadcastGraphQLError(SquadcastError):
    """GraphQL query returned an errors array."""

    def __init__(self, messages: List[str]):
        self.messages = messages
        super().__init__("GraphQL query failed : " + "; ".join(messages))


class NotFoundError(SquadcastError):
    """Resource not found."""
    pass


class TeamNotFoundError(NotFoundError):

    def __init__(self, team_name: str):
        self.team_name = team_name
        super().__init__(f"Team of name: {team_name} doesn't exist")


class ScheduleNotFoundError(NotFoundError):

    def __init__(self, schedule_name: str):
        self.schedule_name = schedule_name
        super().__init__(f"Schedule of name: {schedule_name} doesn't exist")


class SlackWebhookError(OnCallNotifierError):
    """Не удалось доставить сообщение во входящий вебхук Slack."""

    def __init__(self, status_code: Optional[int], body: str):
        self.status_code = status_code
        self.body = body
        if status_code is None:
            super().__init__(f"Failed to post to Slack webhook : {body}")
        else:
            super().__init__(
                f"Failed to post to Slack webhook (status {status_code}) : {body}"
            )
