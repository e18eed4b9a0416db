"""
Basic Slack Post functionality. Sends a message thread to a specified channel.
"""
import ssl

import certifi
from slack.errors import SlackClientError
from slack.web.client import WebClient
from slack.web.slack_response import SlackResponse

from validator_economics.logger import set_log

log = set_log(__name__)


def slack_client_from_token(token: str | None) -> WebClient:
    """Slack client verifying TLS against the certifi bundle"""
    ssl_context = ssl.create_default_context(cafile=certifi.where())
    ssl_context.verify_mode = ssl.CERT_REQUIRED
    # https://stackoverflow.com/questions/59808346/python-3-slack-client-ssl-sslcertverificationerror
    return WebClient(token=token, ssl=ssl_context)


def post_to_slack(
    slack_client: WebClient, channel: str, message: str, sub_messages: dict[str, str]
) -> None:
    """Posts message to Slack channel and sub message inside thread of first message"""
    response = slack_client.chat_postMessage(
        channel=channel,
        text=message,
        # Do not show link preview!
        # https://api.slack.com/reference/messaging/link-unfurling
        unfurl_media=False,
    )
    # This assertion is only for type safety,
    # since previous function can also return a Future
    assert isinstance(response, SlackResponse)
    # Post logs in thread.
    for category, content in sub_messages.items():
        if not content:
            continue
        slack_client.chat_postMessage(
            channel=channel,
            format="mrkdwn",
            text=f"{category}:\n```{content}```",
            # According to https://api.slack.com/methods/conversations.replies
            thread_ts=response.get("ts"),
            unfurl_media=False,
        )


def notify(
    slack_client: WebClient, channel: str, message: str, sub_messages: dict[str, str]
) -> bool:
    """
    Delivers a report to Slack. Delivery problems are logged and reported
    through the return value, they never abort the calling run.
    """
    try:
        post_to_slack(slack_client, channel, message, sub_messages)
    except (SlackClientError, OSError) as err:
        log.error(f"Failed to deliver report to slack channel {channel}: {err}")
        return False
    return True
