from __future__ import annotations

from inbox_service.domain.entities.contact import Contact
from inbox_service.infrastructure.db.models.contact import ContactModel


def model_to_entity(model: ContactModel) -> Contact:
    return Contact(
        conversation_id=model.conversation_id,
        display_name=model.display_name,
        last_seen_at=model.last_seen_at,
        avatar_url=model.avatar_url,
    )
