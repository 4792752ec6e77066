"""
Отправка сообщения во входящий вебхук Slack.
"""
import logging

import httpx

from oncall_notifier.errors import SlackWebhookError
from oncall_notifier.models.slack import SlackWebhookRequest

logger = logging.getLogger(__name__)


async def notify_slack(
    client: httpx.AsyncClient,
    webhook_url: str,
    payload: SlackWebhookRequest,
) -> None:
    """
    Отправить сообщение в Slack.

    Авторизация зашита в сам URL вебхука, дополнительных заголовков нет.

    Raises:
        SlackWebhookError: сетевая ошибка, некорректный URL или ответ с кодом вне 2xx
    """
    body = payload.to_payload()
    logger.debug("Slack webhook payload: %s", body)

    try:
        resp = await client.post(webhook_url, json=body)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise SlackWebhookError(None, str(e) or type(e).__name__) from e

    if resp.is_error:
        logger.debug("HTTP error %s from Slack webhook: %s", resp.status_code, resp.text)
        raise SlackWebhookError(resp.status_code, resp.text)

    logger.info("Slack notification sent")
