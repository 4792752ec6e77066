"""
Низкоуровневые вызовы API Squadcast: REST-запросы и GraphQL.

Все функции принимают уже открытый httpx.AsyncClient, таймауты задаются
при его создании.
"""
import logging
from typing import Any, Dict, Mapping, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from oncall_notifier.errors import (
    SquadcastAPIError,
    SquadcastGraphQLError,
    SquadcastTransportError,
)
from oncall_notifier.models.squadcast import SquadcastErrorResponse

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

STRING_SCALARS = {"String", "ID"}


def bearer_headers(access_token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {access_token}"}


def parse_error_message(response: httpx.Response) -> str:
    """
    Достать текст ошибки из ответа Squadcast.

    Squadcast отвечает {"meta": {"status": ..., "error_message": ...}};
    если тело другое, возвращаем его как есть.
    """
    try:
        error = SquadcastErrorResponse.model_validate(response.json())
    except (ValueError, ValidationError):
        return response.text
    return error.meta.error_message or response.text


async def _send(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    headers: Optional[Mapping[str, str]] = None,
    params: Optional[Mapping[str, str]] = None,
    json: Optional[Any] = None,
) -> httpx.Response:
    logger.debug("%s %s params=%s", method, url, params)
    try:
        resp = await client.request(method, url, headers=headers, params=params, json=json)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise SquadcastTransportError(url, str(e) or type(e).__name__) from e

    if resp.is_error:
        message = parse_error_message(resp)
        logger.debug("HTTP error %s from %s: %s", resp.status_code, url, message)
        raise SquadcastAPIError(url, resp.status_code, message)
    return resp


def _decode(resp: httpx.Response, url: str) -> Any:
    try:
        return resp.json()
    except ValueError as e:
        raise SquadcastAPIError(url, resp.status_code, f"invalid JSON body: {resp.text}") from e


def _validate(model: Type[M], data: Any, url: str, status_code: int) -> M:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise SquadcastAPIError(url, status_code, f"unexpected response shape: {e}") from e


async def request_json(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    headers: Optional[Mapping[str, str]] = None,
    params: Optional[Mapping[str, str]] = None,
    json: Optional[Any] = None,
) -> Any:
    """
    Выполнить запрос к Squadcast и вернуть разобранный JSON.

    Raises:
        SquadcastTransportError: сетевая ошибка, таймаут или некорректный URL
        SquadcastAPIError: ответ с кодом вне 2xx или тело не JSON
    """
    resp = await _send(client, method, url, headers=headers, params=params, json=json)
    return _decode(resp, url)


async def request_model(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    model: Type[M],
    *,
    headers: Optional[Mapping[str, str]] = None,
    params: Optional[Mapping[str, str]] = None,
) -> M:
    """
    То же, что request_json, но ответ сразу разбирается в pydantic-модель.

    Raises:
        SquadcastAPIError: в том числе если тело не совпадает с моделью
            (с реальным HTTP-статусом ответа)
    """
    resp = await _send(client, method, url, headers=headers, params=params)
    return _validate(model, _decode(resp, url), url, resp.status_code)


def coerce_variables(
    values: Mapping[str, Any],
    types: Mapping[str, str],
) -> Dict[str, Any]:
    """
    Привести переменные GraphQL к объявленным скалярам.

    Схема Squadcast принимает teamID/scheduleName только как String!,
    поэтому каждая строковая переменная явно приводится к str.

    Args:
        values: Значения переменных
        types: Объявленные GraphQL-типы, например {"teamID": "String!"}

    Returns:
        Словарь переменных, готовый для тела запроса
    """
    unknown = set(values) - set(types)
    if unknown:
        raise ValueError(f"undeclared GraphQL variables: {sorted(unknown)}")

    coerced: Dict[str, Any] = {}
    for name, gql_type in types.items():
        value = values.get(name)
        non_null = gql_type.endswith("!")
        if value is None:
            if non_null:
                raise ValueError(f"GraphQL variable ${name} of type {gql_type} must not be null")
            coerced[name] = None
            continue
        if gql_type.rstrip("!") in STRING_SCALARS:
            coerced[name] = str(value)
        else:
            coerced[name] = value
    return coerced


def variable_definitions(types: Mapping[str, str]) -> str:
    """{"teamID": "String!"} -> "$teamID: String!" """
    return ", ".join(f"${name}: {gql_type}" for name, gql_type in types.items())


async def execute_graphql(
    client: httpx.AsyncClient,
    url: str,
    access_token: str,
    query: str,
    variables: Mapping[str, Any],
    types: Mapping[str, str],
    model: Type[M],
) -> M:
    """
    Выполнить GraphQL-запрос к Squadcast с Bearer-токеном.

    Returns:
        Поле "data" ответа, разобранное в model

    Raises:
        SquadcastGraphQLError: в ответе есть массив errors
        SquadcastAPIError: HTTP-ошибка или "data" не совпадает с моделью
    """
    body = {"query": query, "variables": coerce_variables(variables, types)}
    resp = await _send(client, "POST", url, headers=bearer_headers(access_token), json=body)
    result = _decode(resp, url)
    if not isinstance(result, dict):
        raise SquadcastGraphQLError(["response is not a JSON object"])

    errors = result.get("errors")
    if errors:
        messages = [
            e.get("message", str(e)) if isinstance(e, dict) else str(e)
            for e in errors
        ]
        raise SquadcastGraphQLError(messages)

    return _validate(model, result.get("data") or {}, url, resp.status_code)
