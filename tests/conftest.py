"""Pytest fixtures and configuration."""

import json
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest

from oncall_notifier.config import Settings, SquadcastEndpoints

API_URL = "https://api.test.squadcast.local"
AUTH_URL = "https://auth.test.squadcast.local"
WEBHOOK_URL = "https://hooks.slack.test/services/T000/B000/XXXX"

ENV_VARS = (
    "SQUADCAST_REFRESH_TOKEN",
    "SQUADCAST_TEAM_NAME",
    "SQUADCAST_SCHEDULE_NAME",
    "SLACK_WEBHOOK_URL",
    "ONCALL_SHIFT_TYPE",
    "SQUADCAST_API_URL",
    "SQUADCAST_AUTH_URL",
    "HTTP_TIMEOUT",
    "LOG_LEVEL",
)

Route = Callable[[httpx.Request], httpx.Response]


class FakeSquadcast:
    """In-memory stand-in for the Squadcast and Slack endpoints.

    Responses are registered per (method, path); every request is recorded.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Route] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, path: str, status: int = 200, json_body: Any = None,
            text: Optional[str] = None) -> None:
        def route(request: httpx.Request) -> httpx.Response:
            if text is not None:
                return httpx.Response(status, text=text)
            return httpx.Response(status, json=json_body)

        self.routes[(method, path)] = route

    def add_route(self, method: str, path: str, route: Route) -> None:
        self.routes[(method, path)] = route

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"meta": {"status": 404, "error_message": "no route"}})
        return route(request)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport())

    def requests_to(self, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    @staticmethod
    def body(request: httpx.Request) -> Any:
        return json.loads(request.content.decode())


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate tests from the real environment and any local .env file."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def endpoints():
    return SquadcastEndpoints(api_url=API_URL, auth_url=AUTH_URL)


@pytest.fixture
def fake():
    return FakeSquadcast()


@pytest.fixture
def test_settings():
    """Create test settings with minimal configuration."""
    return Settings(
        squadcast_refresh_token="refresh-123",
        squadcast_team_name="Platform",
        squadcast_schedule_name="platform-primary",
        slack_webhook_url=WEBHOOK_URL,
        squadcast_api_url=API_URL,
        squadcast_auth_url=AUTH_URL,
    )


def oncall_person(first: str, last: str, person_id: str = "u1") -> Dict[str, Any]:
    return {
        "id": person_id,
        "first_name": first,
        "last_name": last,
        "username_for_display": f"{first.lower()}.{last.lower()}",
        "email": f"{first.lower()}@example.com",
        "contact": {"dial_code": "+44", "phone_number": "7700900123"},
    }


def assignment(*people: Dict[str, Any], schedule_id: int = 1936,
               name: str = "platform-primary") -> Dict[str, Any]:
    return {
        "schedule": {
            "created_at": "2024-01-01T00:00:00Z",
            "updated_at": "2024-01-02T00:00:00Z",
            "deleted_at": None,
            "id": schedule_id,
            "name": name,
            "rotations": [{"id": 7, "name": "weekly", "created_at": "2024-01-01T00:00:00Z",
                           "updated_at": "2024-01-01T00:00:00Z", "deleted_at": None}],
        },
        "oncall": list(people),
    }


@pytest.fixture
def happy_fake(fake):
    """FakeSquadcast with every endpoint answering successfully."""
    fake.add("GET", "/oauth/access-token", json_body={"data": {"access_token": "access-abc"}})
    fake.add("GET", "/v3/teams", json_body={"data": [
        {"id": "t1", "name": "Infra"},
        {"id": "t2", "name": "Platform"},
    ]})
    fake.add("POST", "/v3/graphql", json_body={"data": {"schedules": [
        {"name": "platform-primary", "ID": 1936},
    ]}})
    fake.add("GET", "/v4/schedules/who-is-oncall", json_body={"data": [
        assignment(oncall_person("Jane", "Doe"), oncall_person("John", "Smith", "u2")),
    ]})
    fake.add("POST", "/services/T000/B000/XXXX", text="ok")
    return fake
