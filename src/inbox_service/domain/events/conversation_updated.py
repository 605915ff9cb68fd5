from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True, slots=True)
class ConversationUpdated:
    """Broadcast to every listener so conversation lists can refresh."""

    event_type: ClassVar[str] = "conversation_updated"

    conversation_id: str
