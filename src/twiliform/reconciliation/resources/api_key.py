from __future__ import annotations

from typing import TYPE_CHECKING

from twiliform.domain.errors import UnsupportedOperationError
from twiliform.domain.model import ResourceKind

from .base import ResourceController

if TYPE_CHECKING:
    from twiliform.adapters.twilio.schema import ApiKey
    from twiliform.domain.model import ResourceRecord

    from ..ports import RequestParams


class ApiKeyController(ResourceController):
    """API keys are immutable once created; the secret is only returned by create."""

    kind = ResourceKind.API_KEY
    noun = "API key"

    def _update(self, record: ResourceRecord) -> None:
        raise UnsupportedOperationError(
            "API keys cannot be updated; replace the key instead",
            kind=self.kind,
            identifier=record.id,
        )

    def _create_remote(self, params: RequestParams) -> ApiKey:
        return self._client.create_key(params)

    def _delete_remote(self, sid: str) -> None:
        self._client.delete_key(sid)
