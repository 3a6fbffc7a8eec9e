"""
Live notification feed.
An authenticated operator joins the group for their username and the group for their role.
"""

import logging
from channels.generic.websocket import AsyncJsonWebsocketConsumer

from .transports import group_name

logger = logging.getLogger("fleetledger.notifications")


class NotificationConsumer(AsyncJsonWebsocketConsumer):

    async def connect(self):
        user = self.scope.get("user")
        if user is None or not user.is_authenticated:
            await self.close(code=4001)
            return

        self.groups_joined = [group_name(user.username), group_name(user.role)]
        for group in self.groups_joined:
            await self.channel_layer.group_add(group, self.channel_name)
        await self.accept()
        logger.info("WS connected: %s (%s)", user.username, user.role)

    async def disconnect(self, code):
        for group in getattr(self, "groups_joined", []):
            await self.channel_layer.group_discard(group, self.channel_name)

    async def notification_message(self, event):
        await self.send_json(event["payload"])
