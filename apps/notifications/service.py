"""
Notification dispatcher.
Drains outbox events into Notification records and hands them to delivery.
Fails silently; a notification problem never blocks the order or ledger mutation.
"""

import logging
from dataclasses import dataclass, field

from django.db import transaction
from django.utils import timezone

from apps.orders.exceptions import InvalidNotificationState, NotificationNotFound

from .models import Notification
from .outbox import NotificationRequest, NotificationResolution

logger = logging.getLogger("fleetledger.notifications")


@dataclass
class DispatchReport:
    created: list = field(default_factory=list)
    resolved: int = 0
    failed: int = 0


class NotificationRepository:

    def pending_for(self, related_model, related_id, types=None):
        qs = Notification.objects.filter(
            related_model=related_model,
            related_id=str(related_id),
            status=Notification.Status.PENDING,
        )
        if types:
            qs = qs.filter(type__in=types)
        return qs

    def create(self, request: NotificationRequest) -> Notification:
        return Notification.objects.create(
            type=request.type,
            title=request.title,
            message=request.message,
            related_model=request.related_model,
            related_id=request.related_id,
            recipients=list(request.recipients),
            metadata=request.metadata,
            created_by=request.created_by,
        )

    def get(self, notification_id) -> Notification:
        try:
            return Notification.objects.select_for_update().get(id=notification_id)
        except (Notification.DoesNotExist, ValueError):
            raise NotificationNotFound(f"Notification {notification_id} not found.")


class NotificationDispatcher:
    """
    Turns outbox events into records.
    Delivery is injected so tests can replace the Celery hand-off.
    """

    def __init__(self, repository=None, deliver=None):
        self.repo    = repository or NotificationRepository()
        self.deliver = deliver or _enqueue_delivery

    # ── Outbox ────────────────────────────────────────────────────────────────
    def drain(self, events) -> DispatchReport:
        report = DispatchReport()
        for event in events:
            try:
                with transaction.atomic():
                    if isinstance(event, NotificationRequest):
                        notification = self._create(event)
                        if notification is not None:
                            report.created.append(notification)
                    elif isinstance(event, NotificationResolution):
                        report.resolved += self._resolve(event)
                    else:
                        logger.warning("Unknown outbox event %r dropped", event)
            except Exception:
                report.failed += 1
                logger.exception(
                    "Notification event for %s %s failed",
                    getattr(event, "related_model", "?"), getattr(event, "related_id", "?"),
                )
        return report

    def _create(self, request):
        if self.repo.pending_for(request.related_model, request.related_id, [request.type]).exists():
            logger.info(
                "Pending %s notification already open for %s %s, not raising another",
                request.type, request.related_model, request.related_id,
            )
            return None
        notification = self.repo.create(request)
        logger.info("Notification %s raised: %s", notification.id, notification.title)
        transaction.on_commit(lambda: self._hand_off(notification.id))
        return notification

    def _resolve(self, resolution) -> int:
        count = self.repo.pending_for(
            resolution.related_model, resolution.related_id, resolution.types,
        ).update(
            status=Notification.Status.RESOLVED,
            resolved_at=timezone.now(),
            resolved_by=resolution.resolved_by,
        )
        if count:
            logger.info(
                "Resolved %d notification(s) on %s %s",
                count, resolution.related_model, resolution.related_id,
            )
        return count

    def _hand_off(self, notification_id):
        try:
            self.deliver(str(notification_id))
        except Exception as exc:
            logger.warning("Delivery of notification %s could not be queued: %s", notification_id, exc)

    # ── Recipient actions ─────────────────────────────────────────────────────
    def pending_for_actor(self, actor) -> list:
        qs = Notification.objects.filter(status=Notification.Status.PENDING)
        return [n for n in qs if n.is_addressed_to(actor.username, actor.role)]

    @transaction.atomic
    def mark_read(self, notification_id, actor) -> Notification:
        notification = self.repo.get(notification_id)
        if actor.username not in notification.read_by:
            notification.read_by = [*notification.read_by, actor.username]
        notification.is_read = True
        notification.save(update_fields=["is_read", "read_by"])
        return notification

    @transaction.atomic
    def resolve(self, notification_id, actor) -> Notification:
        return self._close(notification_id, actor, Notification.Status.RESOLVED)

    @transaction.atomic
    def dismiss(self, notification_id, actor) -> Notification:
        return self._close(notification_id, actor, Notification.Status.DISMISSED)

    def _close(self, notification_id, actor, status) -> Notification:
        notification = self.repo.get(notification_id)
        if notification.status != Notification.Status.PENDING:
            raise InvalidNotificationState(f"Notification is already {notification.status}.")
        notification.status      = status
        notification.resolved_at = timezone.now()
        notification.resolved_by = actor.username
        notification.save(update_fields=["status", "resolved_at", "resolved_by"])
        logger.info("Notification %s %s by %s", notification.id, status, actor.username)
        return notification


def _enqueue_delivery(notification_id):
    from .tasks import deliver_notification
    deliver_notification.delay(notification_id)
