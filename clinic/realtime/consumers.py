import json
import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer

logger = logging.getLogger(__name__)


def calendar_group(tenant_id: int) -> str:
    return f"calendar.{tenant_id}"


@database_sync_to_async
def _may_join(user, tenant_id: int) -> bool:
    from clinic.models import Tenant
    from clinic.services.tenancy import can_use
    if not (user and user.is_authenticated):
        return False
    return can_use(user, Tenant.objects.filter(id=tenant_id).first())


class CalendarConsumer(AsyncWebsocketConsumer):
    """Pushes ``calendar.refresh`` events to every screen of one tenant."""

    async def connect(self):
        self.tenant_id = int(self.scope["url_route"]["kwargs"]["tenant_id"])
        if not await _may_join(self.scope.get("user"), self.tenant_id):
            logger.info("Rejected calendar socket for tenant %s", self.tenant_id)
            await self.close()
            return
        self.group = calendar_group(self.tenant_id)
        await self.channel_layer.group_add(self.group, self.channel_name)
        await self.accept()
        await self.send(json.dumps({"type": "welcome", "tenant_id": self.tenant_id}))

    async def disconnect(self, close_code):
        group = getattr(self, "group", None)
        if group:
            await self.channel_layer.group_discard(group, self.channel_name)

    async def calendar_refresh(self, event):
        # event: {"type": "calendar.refresh", "action": "...", "appointment_id": int, "date": "YYYY-MM-DD"}
        await self.send(json.dumps(event))
