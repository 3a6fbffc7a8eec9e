"""
Delivery transports.
Each one fails silently; delivery is best-effort and never raises.
"""

import logging
import re

import requests
from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

from fleetledger.conf import fleet_setting

logger = logging.getLogger("fleetledger.notifications")

_GROUP_UNSAFE = re.compile(r"[^A-Za-z0-9_.\-]")


def group_name(recipient: str) -> str:
    """Channels group for a role or username."""
    return f"notifications_{_GROUP_UNSAFE.sub('_', recipient)}"[:99]


def payload_for(notification) -> dict:
    return {
        "id":            str(notification.id),
        "type":          notification.type,
        "title":         notification.title,
        "message":       notification.message,
        "related_model": notification.related_model,
        "related_id":    notification.related_id,
        "metadata":      notification.metadata,
        "created_at":    notification.created_at.isoformat() if notification.created_at else None,
    }


class ChannelsTransport:
    """Push to every recipient's WebSocket group."""

    def send(self, notification) -> bool:
        layer = get_channel_layer()
        if layer is None:
            logger.warning("No channel layer configured, notification %s not pushed", notification.id)
            return False
        try:
            for recipient in notification.recipients:
                async_to_sync(layer.group_send)(
                    group_name(recipient),
                    {"type": "notification_message", "payload": payload_for(notification)},
                )
        except Exception as exc:
            logger.warning("WebSocket push failed for notification %s: %s", notification.id, exc)
            return False
        logger.info("Notification %s pushed to %s", notification.id, ", ".join(notification.recipients))
        return True


class SlackTransport:
    """Post to a Slack incoming webhook when SLACK_WEBHOOK_URL is set."""

    def __init__(self, webhook_url=None):
        self.webhook_url = webhook_url if webhook_url is not None else fleet_setting("SLACK_WEBHOOK_URL")

    def send(self, notification) -> bool:
        if not self.webhook_url:
            return False
        text = f"*{notification.title}*\n{notification.message}"
        try:
            resp = requests.post(self.webhook_url, json={"text": text}, timeout=3)
            if resp.status_code == 200:
                logger.info("Slack alert sent for notification %s", notification.id)
                return True
            logger.warning("Slack webhook returned %s for notification %s", resp.status_code, notification.id)
        except requests.RequestException as exc:
            logger.warning("Slack alert failed for notification %s: %s", notification.id, exc)
        return False
