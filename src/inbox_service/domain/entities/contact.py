from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class Contact:
    conversation_id: str
    display_name: str | None
    last_seen_at: datetime
    avatar_url: str | None = None

    def __post_init__(self) -> None:
        if not self.conversation_id:
            raise ValueError("contact conversation id must not be empty")
