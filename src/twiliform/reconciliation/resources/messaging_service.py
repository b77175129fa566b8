from __future__ import annotations

from typing import TYPE_CHECKING

from twiliform.domain.model import ResourceKind

from .base import ResourceController

if TYPE_CHECKING:
    from twiliform.adapters.twilio.schema import MessagingService

    from ..ports import RequestParams


class MessagingServiceController(ResourceController):
    kind = ResourceKind.MESSAGING_SERVICE
    noun = "messaging service"

    def _create_remote(self, params: RequestParams) -> MessagingService:
        return self._client.create_messaging_service(params)

    def _update_remote(self, sid: str, params: RequestParams) -> MessagingService:
        return self._client.update_messaging_service(sid, params)

    def _delete_remote(self, sid: str) -> None:
        self._client.delete_messaging_service(sid)
