from typing import Sequence

from oncall_notifier.models.slack import (
    SlackAttachment,
    SlackAttachmentField,
    SlackWebhookRequest,
)

ONCALL_COLOR = "#00FF00"


def build_oncall_payload(schedule_name: str, responders: Sequence[str]) -> SlackWebhookRequest:
    """
    Сформировать сообщение о дежурных для вебхука Slack.

    Args:
        schedule_name: Имя расписания
        responders: Имена дежурных, по одному полю на каждого

    Returns:
        Тело запроса с одним attachment
    """
    fields = [SlackAttachmentField(title=name) for name in responders]
    attachment = SlackAttachment(
        fallback=f"On-Call Update for schedule: {schedule_name}",
        pretext=f"People on-call for schedule: {schedule_name}",
        color=ONCALL_COLOR,
        fields=fields,
    )
    return SlackWebhookRequest(attachments=[attachment])
