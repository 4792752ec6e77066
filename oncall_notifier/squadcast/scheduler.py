import logging
from typing import List

import httpx

from oncall_notifier.config import DEFAULT_ENDPOINTS, SquadcastEndpoints
from oncall_notifier.errors import (
    ScheduleNotFoundError,
    SquadcastError,
    TeamNotFoundError,
)
from oncall_notifier.models.squadcast import (
    AccessTokenResponse,
    OnCallResponse,
    SchedulesData,
    TeamsResponse,
)
from oncall_notifier.squadcast.client import (
    bearer_headers,
    execute_graphql,
    request_model,
    variable_definitions,
)

logger = logging.getLogger(__name__)

SCHEDULE_VARIABLE_TYPES = {"teamID": "String!", "scheduleName": "String!"}

SCHEDULES_QUERY = (
    "query ScheduleByName(" + variable_definitions(SCHEDULE_VARIABLE_TYPES) + ") {"
    " schedules(filters: {teamID: $teamID, scheduleName: $scheduleName}) { name ID } }"
)


async def fetch_access_token(
    client: httpx.AsyncClient,
    refresh_token: str,
    endpoints: SquadcastEndpoints = DEFAULT_ENDPOINTS,
) -> str:
    """
    Обменять refresh token на короткоживущий access token.

    Refresh token передаётся только в заголовке X-Refresh-Token, запрос без Bearer.
    """
    token_response = await request_model(
        client,
        "GET",
        endpoints.access_token_url,
        AccessTokenResponse,
        headers={"X-Refresh-Token": refresh_token},
    )
    logger.info("Obtained Squadcast access token")
    return token_response.data.access_token


async def resolve_team_id(
    client: httpx.AsyncClient,
    access_token: str,
    team_name: str,
    endpoints: SquadcastEndpoints = DEFAULT_ENDPOINTS,
) -> str:
    """
    Найти ID команды по точному (с учётом регистра) совпадению имени.

    Returns:
        ID первой команды с таким именем

    Raises:
        TeamNotFoundError: если команды с таким именем нет
    """
    teams_response = await request_model(
        client, "GET", endpoints.teams_url, TeamsResponse, headers=bearer_headers(access_token)
    )

    for team in teams_response.data:
        if team.name == team_name:
            logger.info("Resolved team %r -> %s", team_name, team.id)
            return team.id

    raise TeamNotFoundError(team_name)


async def resolve_schedule_id(
    client: httpx.AsyncClient,
    access_token: str,
    team_id: str,
    schedule_name: str,
    endpoints: SquadcastEndpoints = DEFAULT_ENDPOINTS,
) -> int:
    """
    Найти числовой ID расписания через GraphQL API.

    Фильтр по teamID и scheduleName применяется на стороне Squadcast,
    но имя всё равно сверяется здесь: берётся первое точное совпадение.

    Args:
        client: HTTP-клиент
        access_token: Bearer-токен
        team_id: ID команды
        schedule_name: Имя расписания

    Returns:
        ID расписания

    Raises:
        ScheduleNotFoundError: если подходящего расписания нет
    """
    variables = {"teamID": team_id, "scheduleName": schedule_name}
    try:
        data = await execute_graphql(
            client,
            endpoints.graphql_url,
            access_token,
            SCHEDULES_QUERY,
            variables,
            SCHEDULE_VARIABLE_TYPES,
            SchedulesData,
        )
    except SquadcastError:
        logger.error("There is an error fetching the schedule id for the schedule name: %s", schedule_name)
        raise

    for schedule in data.schedules:
        if schedule.name == schedule_name:
            logger.info("Resolved schedule %r -> %d", schedule_name, schedule.id)
            return schedule.id

    raise ScheduleNotFoundError(schedule_name)


async def fetch_oncall_responders(
    client: httpx.AsyncClient,
    access_token: str,
    team_id: str,
    schedule_id: int,
    endpoints: SquadcastEndpoints = DEFAULT_ENDPOINTS,
) -> List[str]:
    """
    Получить имена текущих дежурных по расписанию.

    Returns:
        Список "Имя Фамилия" в порядке ответа, дубликаты сохраняются
    """
    params = {"teamId": team_id, "scheduleID": str(schedule_id)}
    roster = await request_model(
        client,
        "GET",
        endpoints.who_is_oncall_url,
        OnCallResponse,
        headers=bearer_headers(access_token),
        params=params,
    )

    responders = []
    for assignment in roster.data:
        for person in assignment.oncall:
            responders.append(person.display_name)

    logger.info("Found %d on-call responder(s) for schedule %d", len(responders), schedule_id)
    return responders
