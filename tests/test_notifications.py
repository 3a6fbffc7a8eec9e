"""
Configuration lock policy, notification dispatcher, delivery transports and
the recipient-facing notification endpoints.
"""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import requests

from apps.authentication.context import Actor
from apps.fuel.models import FuelLedger
from apps.notifications.locks import (
    ConfigLockPolicy, missing_reason, unlinked_return_resolution,
)
from apps.notifications.models import Notification
from apps.notifications.outbox import NotificationRequest, NotificationResolution
from apps.notifications.service import NotificationDispatcher, NotificationRepository
from apps.notifications.tasks import deliver_notification
from apps.notifications.transports import ChannelsTransport, SlackTransport, group_name
from apps.orders.exceptions import InvalidNotificationState, NotificationNotFound

Reason = FuelLedger.ConfigReason

CLERK = Actor(username="amina", role="fuel_order_maker")
ADMIN = Actor(username="baraka", role="admin")


def _ledger(total="1000", extra="50", locked=False, reason=Reason.NONE):
    return FuelLedger(
        truck_no="T100 ABC", going_do_number="0001/26", to_location="ZAMBIA",
        total_liters=None if total is None else Decimal(total),
        extra_liters=None if extra is None else Decimal(extra),
        is_locked=locked, pending_config_reason=reason,
    )


def _request(related_id="ledger-1", type_="missing_total_liters"):
    return NotificationRequest(
        type=type_, title="Fuel Record Locked: DO 0001/26", message="needs admin action",
        related_model="FuelLedger", related_id=related_id,
        recipients=["fuel_order_maker", "admin", "super_admin"], created_by="amina",
    )


# ═══════════════════════════════════════════════════════════════════════════════
# UNIT — Lock policy
# ═══════════════════════════════════════════════════════════════════════════════

class TestLockPolicy:

    def test_missing_reason(self):
        assert missing_reason(_ledger()) == Reason.NONE
        assert missing_reason(_ledger(total=None)) == Reason.MISSING_TOTAL
        assert missing_reason(_ledger(extra=None)) == Reason.MISSING_EXTRA
        assert missing_reason(_ledger(total=None, extra=None)) == Reason.BOTH

    def test_complete_configuration_is_a_no_op(self):
        ledger = _ledger()
        assert ConfigLockPolicy().apply(ledger, CLERK) == []
        assert not ledger.is_locked

    def test_missing_total_locks_and_requests_notification(self):
        ledger = _ledger(total=None)
        events = ConfigLockPolicy().apply(ledger, CLERK)
        assert ledger.is_locked
        assert ledger.pending_config_reason == Reason.MISSING_TOTAL
        assert len(events) == 1
        assert events[0].type == "missing_total_liters"
        assert events[0].related_model == "FuelLedger"
        assert events[0].metadata["missing_fields"] == ["total_liters"]

    def test_non_admin_creator_alerts_operations_and_admins(self):
        [event] = ConfigLockPolicy().apply(_ledger(total=None), CLERK, order_number="0001/26")
        assert event.recipients == ["fuel_order_maker", "admin", "super_admin"]
        assert event.title == "Fuel Record Locked: DO 0001/26"
        assert "needs admin action" in event.message

    def test_admin_creator_gets_action_item_for_own_role(self):
        [event] = ConfigLockPolicy().apply(_ledger(extra=None), ADMIN, order_number="0001/26")
        assert event.recipients == ["admin"]
        assert event.title.startswith("Action Required")
        assert "System Configuration > Truck Batches" in event.message
        assert event.metadata["truck_suffix"] == "ABC"

    def test_same_reason_again_does_not_re_notify(self):
        ledger = _ledger(total=None, locked=True, reason=Reason.MISSING_TOTAL)
        assert ConfigLockPolicy().apply(ledger, CLERK) == []
        assert ledger.is_locked

    def test_narrowing_reason_does_not_re_notify(self):
        ledger = _ledger(extra=None, locked=True, reason=Reason.BOTH)
        assert ConfigLockPolicy().apply(ledger, CLERK) == []
        assert ledger.pending_config_reason == Reason.MISSING_EXTRA

    def test_widening_reason_notifies(self):
        ledger = _ledger(total=None, extra=None, locked=True, reason=Reason.MISSING_TOTAL)
        [event] = ConfigLockPolicy().apply(ledger, CLERK)
        assert event.type == "both"

    def test_filling_last_field_unlocks_and_resolves(self):
        ledger = _ledger(locked=True, reason=Reason.MISSING_TOTAL)
        [event] = ConfigLockPolicy().apply(ledger, ADMIN)
        assert isinstance(event, NotificationResolution)
        assert event.related_id == str(ledger.id)
        assert event.types is None
        assert not ledger.is_locked
        assert ledger.pending_config_reason == Reason.NONE


# ═══════════════════════════════════════════════════════════════════════════════
# DISPATCHER — Outbox draining
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestDispatcher:

    def test_request_creates_pending_record(self):
        report = NotificationDispatcher(deliver=MagicMock()).drain([_request()])
        assert len(report.created) == 1
        note = Notification.objects.get()
        assert note.status == Notification.Status.PENDING
        assert note.recipients == ["fuel_order_maker", "admin", "super_admin"]

    def test_duplicate_pending_is_suppressed(self):
        dispatcher = NotificationDispatcher(deliver=MagicMock())
        dispatcher.drain([_request()])
        report = dispatcher.drain([_request()])
        assert report.created == []
        assert Notification.objects.count() == 1

    def test_resolution_closes_every_pending_on_the_entity(self):
        dispatcher = NotificationDispatcher(deliver=MagicMock())
        dispatcher.drain([_request(), _request(type_="missing_extra_fuel"), _request(related_id="other")])
        report = dispatcher.drain([NotificationResolution("FuelLedger", "ledger-1", resolved_by="baraka")])
        assert report.resolved == 2
        resolved = Notification.objects.filter(status=Notification.Status.RESOLVED)
        assert {n.resolved_by for n in resolved} == {"baraka"}
        assert all(n.resolved_at is not None for n in resolved)
        assert Notification.objects.get(related_id="other").status == Notification.Status.PENDING

    def test_typed_resolution_leaves_other_types(self):
        class Order:
            id = "order-1"
        dispatcher = NotificationDispatcher(deliver=MagicMock())
        dispatcher.drain([
            _request(related_id="order-1", type_="unlinked_export_do"),
            _request(related_id="order-1", type_="warning"),
        ])
        for note in Notification.objects.all():
            note.related_model = "DeliveryOrder"
            note.save()
        report = dispatcher.drain([unlinked_return_resolution(Order(), CLERK)])
        assert report.resolved == 1
        assert Notification.objects.get(type="warning").status == Notification.Status.PENDING

    def test_failed_event_is_counted_not_raised(self):
        repo = MagicMock(spec=NotificationRepository)
        repo.pending_for.return_value.exists.return_value = False
        repo.create.side_effect = RuntimeError("db down")
        report = NotificationDispatcher(repository=repo, deliver=MagicMock()).drain([_request()])
        assert report.failed == 1
        assert report.created == []

    def test_delivery_handed_off_after_commit(self, django_capture_on_commit_callbacks):
        deliver = MagicMock()
        with django_capture_on_commit_callbacks(execute=True):
            report = NotificationDispatcher(deliver=deliver).drain([_request()])
        deliver.assert_called_once_with(str(report.created[0].id))

    def test_delivery_failure_is_swallowed(self, django_capture_on_commit_callbacks):
        deliver = MagicMock(side_effect=ConnectionError("broker unreachable"))
        with django_capture_on_commit_callbacks(execute=True):
            report = NotificationDispatcher(deliver=deliver).drain([_request()])
        assert len(report.created) == 1
        assert Notification.objects.count() == 1


# ═══════════════════════════════════════════════════════════════════════════════
# DISPATCHER — Recipient actions
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestRecipientActions:

    @pytest.fixture
    def note(self):
        report = NotificationDispatcher(deliver=MagicMock()).drain([_request()])
        return report.created[0]

    def test_pending_for_actor_by_role_or_username(self, note):
        dispatcher = NotificationDispatcher(deliver=MagicMock())
        assert dispatcher.pending_for_actor(CLERK) == [note]
        assert dispatcher.pending_for_actor(Actor(username="someone", role="viewer")) == []
        direct = _request(related_id="ledger-2")
        direct.recipients = ["someone"]
        dispatcher.drain([direct])
        assert len(dispatcher.pending_for_actor(Actor(username="someone", role="viewer"))) == 1

    def test_mark_read_records_reader_once(self, note):
        dispatcher = NotificationDispatcher(deliver=MagicMock())
        dispatcher.mark_read(note.id, CLERK)
        dispatcher.mark_read(note.id, CLERK)
        note.refresh_from_db()
        assert note.is_read
        assert note.read_by == ["amina"]

    def test_resolve_then_dismiss_refused(self, note):
        dispatcher = NotificationDispatcher(deliver=MagicMock())
        resolved = dispatcher.resolve(note.id, ADMIN)
        assert resolved.status == Notification.Status.RESOLVED
        assert resolved.resolved_by == "baraka"
        with pytest.raises(InvalidNotificationState):
            dispatcher.dismiss(note.id, ADMIN)

    def test_unknown_notification(self):
        with pytest.raises(NotificationNotFound):
            NotificationDispatcher().resolve("7b0e4c9a-0000-4000-8000-000000000000", ADMIN)


# ═══════════════════════════════════════════════════════════════════════════════
# TRANSPORTS & DELIVERY TASK
# ═══════════════════════════════════════════════════════════════════════════════

class TestTransports:

    def _note(self):
        return Notification(type="both", title="Fuel Record Locked: DO 0001/26", message="needs admin action",
                            related_model="FuelLedger", related_id="ledger-1",
                            recipients=["admin", "amina s"])

    def test_group_names_are_channels_safe(self):
        assert group_name("fuel_order_maker") == "notifications_fuel_order_maker"
        assert group_name("amina s@hq") == "notifications_amina_s_hq"

    def test_channels_pushes_to_every_recipient_group(self):
        layer = MagicMock()
        layer.group_send = AsyncMock()
        with patch("apps.notifications.transports.get_channel_layer", return_value=layer):
            assert ChannelsTransport().send(self._note())
        groups = [call.args[0] for call in layer.group_send.await_args_list]
        assert groups == ["notifications_admin", "notifications_amina_s"]
        assert layer.group_send.await_args_list[0].args[1]["type"] == "notification_message"

    def test_channels_failure_is_reported_not_raised(self):
        layer = MagicMock()
        layer.group_send = AsyncMock(side_effect=RuntimeError("redis down"))
        with patch("apps.notifications.transports.get_channel_layer", return_value=layer):
            assert ChannelsTransport().send(self._note()) is False

    def test_slack_disabled_without_webhook(self):
        with patch("apps.notifications.transports.requests.post") as post:
            assert SlackTransport(webhook_url="").send(self._note()) is False
        post.assert_not_called()

    def test_slack_posts_title_and_message(self):
        with patch("apps.notifications.transports.requests.post") as post:
            post.return_value = MagicMock(status_code=200)
            assert SlackTransport(webhook_url="https://hooks.example.test/x").send(self._note())
        payload = post.call_args.kwargs["json"]
        assert payload["text"].startswith("*Fuel Record Locked: DO 0001/26*")
        assert post.call_args.kwargs["timeout"] == 3

    def test_slack_failure_is_reported_not_raised(self):
        with patch("apps.notifications.transports.requests.post",
                   side_effect=requests.ConnectionError("no route")):
            assert SlackTransport(webhook_url="https://hooks.example.test/x").send(self._note()) is False


@pytest.mark.django_db
class TestDeliveryTask:

    def test_pending_notification_delivered(self):
        note = NotificationDispatcher(deliver=MagicMock()).drain([_request()]).created[0]
        with patch("apps.notifications.transports.ChannelsTransport.send", return_value=True) as push:
            assert deliver_notification(str(note.id)) == 1
        push.assert_called_once()

    def test_closed_notification_skipped(self):
        note = NotificationDispatcher(deliver=MagicMock()).drain([_request()]).created[0]
        Notification.objects.filter(id=note.id).update(status=Notification.Status.DISMISSED)
        with patch("apps.notifications.transports.ChannelsTransport.send") as push:
            assert deliver_notification(str(note.id)) == 0
        push.assert_not_called()

    def test_missing_notification(self):
        assert deliver_notification("7b0e4c9a-0000-4000-8000-000000000000") == 0


# ═══════════════════════════════════════════════════════════════════════════════
# API — Notifications
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestNotificationEndpoints:

    @pytest.fixture
    def note(self):
        return NotificationDispatcher(deliver=MagicMock()).drain([_request()]).created[0]

    def test_list_pending_for_my_role(self, auth_client, note):
        resp = auth_client.get("/api/notifications/")
        assert resp.status_code == 200
        assert resp.data["count"] == 1
        assert resp.data["unread"] == 1
        assert resp.data["results"][0]["id"] == str(note.id)

    def test_viewer_sees_nothing(self, api_client, make_operator, note):
        api_client.force_authenticate(user=make_operator(role="viewer"))
        resp = api_client.get("/api/notifications/")
        assert resp.data["count"] == 0

    def test_read_resolve_dismiss(self, auth_client, note):
        resp = auth_client.post(f"/api/notifications/{note.id}/read/")
        assert resp.status_code == 200
        assert resp.data["is_read"] is True

        resp = auth_client.post(f"/api/notifications/{note.id}/resolve/")
        assert resp.status_code == 200
        assert resp.data["status"] == "resolved"

        resp = auth_client.post(f"/api/notifications/{note.id}/dismiss/")
        assert resp.status_code == 409
        assert resp.data["code"] == "invalid_notification_state"

    def test_unknown_notification_is_404(self, auth_client):
        resp = auth_client.post("/api/notifications/7b0e4c9a-0000-4000-8000-000000000000/resolve/")
        assert resp.status_code == 404

    def test_unauthenticated_rejected(self, api_client):
        assert api_client.get("/api/notifications/").status_code == 401


# ═══════════════════════════════════════════════════════════════════════════════
# WEBSOCKET — Live notification feed
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestNotificationConsumer:

    class _User:
        is_authenticated = True
        username = "amina"
        role = "fuel_order_maker"

    @staticmethod
    def _with_user(user):
        from apps.notifications.consumers import NotificationConsumer
        app = NotificationConsumer.as_asgi()

        async def inner(scope, receive, send):
            return await app({**scope, "user": user}, receive, send)
        return inner

    def test_role_group_receives_push(self):
        from asgiref.sync import async_to_sync
        from channels.layers import get_channel_layer
        from channels.testing import WebsocketCommunicator

        async def scenario():
            communicator = WebsocketCommunicator(self._with_user(self._User()), "/ws/notifications/")
            connected, _ = await communicator.connect()
            assert connected
            await get_channel_layer().group_send(
                group_name("fuel_order_maker"),
                {"type": "notification_message", "payload": {"title": "Fuel Record Locked: DO 0001/26"}},
            )
            message = await communicator.receive_json_from()
            await communicator.disconnect()
            return message

        assert async_to_sync(scenario)() == {"title": "Fuel Record Locked: DO 0001/26"}

    def test_anonymous_connection_closed(self):
        from asgiref.sync import async_to_sync
        from channels.testing import WebsocketCommunicator

        class Anonymous:
            is_authenticated = False

        async def scenario():
            communicator = WebsocketCommunicator(self._with_user(Anonymous()), "/ws/notifications/")
            return await communicator.connect()

        connected, code = async_to_sync(scenario)()
        assert not connected
        assert code == 4001
