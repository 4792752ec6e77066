"""
Точка входа: узнать, кто сейчас дежурит по расписанию Squadcast,
и отправить список дежурных в Slack.

Рассчитано на разовый запуск по расписанию (cron и т.п.): любая ошибка
завершает процесс с ненулевым кодом.
"""
import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional, Sequence

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from oncall_notifier.config import Settings
from oncall_notifier.errors import OnCallNotifierError
from oncall_notifier.models.slack import SlackWebhookRequest
from oncall_notifier.slack.formatters import build_oncall_payload
from oncall_notifier.slack.notifier import notify_slack
from oncall_notifier.squadcast.scheduler import (
    fetch_access_token,
    fetch_oncall_responders,
    resolve_schedule_id,
    resolve_team_id,
)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


class OnCallSummary(BaseModel):
    """Результат одного запуска."""
    model_config = ConfigDict(frozen=True)

    team_id: str
    schedule_id: int
    schedule_name: str
    responders: List[str]
    payload: SlackWebhookRequest
    sent: bool


async def run_pipeline(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    dry_run: bool = False,
) -> OnCallSummary:
    """
    Выполнить все этапы по очереди.

    Каждый этап получает результаты предыдущих; первая же ошибка
    прерывает запуск (исключение пробрасывается наверх).

    Args:
        settings: Настройки запуска
        transport: Транспорт httpx (для тестов)
        dry_run: Не отправлять сообщение в Slack, только сформировать

    Returns:
        OnCallSummary с найденными ID и списком дежурных
    """
    endpoints = settings.endpoints()
    timeout = httpx.Timeout(settings.http_timeout, connect=settings.http_timeout)

    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        access_token = await fetch_access_token(client, settings.squadcast_refresh_token, endpoints)
        team_id = await resolve_team_id(client, access_token, settings.squadcast_team_name, endpoints)
        schedule_id = await resolve_schedule_id(
            client, access_token, team_id, settings.squadcast_schedule_name, endpoints
        )
        responders = await fetch_oncall_responders(
            client, access_token, team_id, schedule_id, endpoints
        )

        payload = build_oncall_payload(settings.squadcast_schedule_name, responders)
        if dry_run:
            logger.info("Dry run: Slack notification not sent")
        else:
            await notify_slack(client, settings.slack_webhook_url, payload)

    return OnCallSummary(
        team_id=team_id,
        schedule_id=schedule_id,
        schedule_name=settings.squadcast_schedule_name,
        responders=responders,
        payload=payload,
        sent=not dry_run,
    )


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Post the current Squadcast on-call roster to a Slack webhook"
    )
    parser.add_argument("--team", help="Squadcast team name; defaults to SQUADCAST_TEAM_NAME env")
    parser.add_argument("--schedule", help="Squadcast schedule name; defaults to SQUADCAST_SCHEDULE_NAME env")
    parser.add_argument("--webhook-url", help="Slack webhook URL; defaults to SLACK_WEBHOOK_URL env")
    parser.add_argument("--log-level", help="Logging level; defaults to LOG_LEVEL env or INFO")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the Slack payload instead of posting it",
    )
    return parser.parse_args(argv)


def load_settings(args: argparse.Namespace) -> Settings:
    """Настройки из окружения, аргументы командной строки имеют приоритет."""
    overrides = {
        "squadcast_team_name": args.team,
        "squadcast_schedule_name": args.schedule,
        "slack_webhook_url": args.webhook_url,
        "log_level": args.log_level,
    }
    return Settings(**{k: v for k, v in overrides.items() if v is not None})


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)

    try:
        settings = load_settings(args)
    except ValidationError as e:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        logger.error("Configuration error: %s", e)
        sys.exit(1)

    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    try:
        summary = asyncio.run(run_pipeline(settings, dry_run=args.dry_run))
    except OnCallNotifierError as e:
        logger.error("%s", e)
        sys.exit(1)

    if args.dry_run:
        print(json.dumps(summary.payload.to_payload(), indent=2))

    logger.info(
        "Done: %d responder(s) on-call for schedule %s",
        len(summary.responders),
        summary.schedule_name,
    )


if __name__ == "__main__":
    main()
