"""Celery tasks for notification delivery."""

import logging
from celery import shared_task

logger = logging.getLogger("fleetledger.tasks")


@shared_task
def deliver_notification(notification_id: str):
    """Push a notification record out over every configured transport."""
    from apps.notifications.models import Notification
    from apps.notifications.transports import ChannelsTransport, SlackTransport

    try:
        notification = Notification.objects.get(id=notification_id)
    except Notification.DoesNotExist:
        logger.error("Notification %s not found for delivery", notification_id)
        return 0

    if notification.status != Notification.Status.PENDING:
        logger.info("Notification %s is %s, skipping delivery", notification_id, notification.status)
        return 0

    delivered = 0
    for transport in (ChannelsTransport(), SlackTransport()):
        if transport.send(notification):
            delivered += 1
    return delivered
