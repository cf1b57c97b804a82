from __future__ import annotations

import copy
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict


@dataclass(frozen=True)
class WebhookEnvelope:
    """Generic wrapper around every inbound event.

    `data` stays an untyped JSON object until the dispatcher knows which payload shape
    `type` calls for.
    """

    type: str
    data: Dict[str, Any]
    event_id: str
    created_at: datetime


@dataclass(frozen=True)
class StoredEventRecord:
    event_id: str
    type: str
    created_at: datetime
    data: Dict[str, Any]

    @staticmethod
    def from_envelope(env: WebhookEnvelope) -> "StoredEventRecord":
        # Own copy: the handler receives env.data and may change it.
        return StoredEventRecord(
            event_id=env.event_id,
            type=env.type,
            created_at=env.created_at,
            data=copy.deepcopy(env.data),
        )

    def clone(self) -> "StoredEventRecord":
        return replace(self, data=copy.deepcopy(self.data))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_id": self.event_id,
            "type": self.type,
            "created_at": self.created_at.isoformat(),
            "data": self.data,
        }
