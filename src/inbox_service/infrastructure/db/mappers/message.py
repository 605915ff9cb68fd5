from __future__ import annotations

from inbox_service.domain.entities.message import Message
from inbox_service.infrastructure.db.models.message import MessageModel


def model_to_entity(model: MessageModel) -> Message:
    return Message(
        id=model.id,
        meta_msg_id=model.meta_msg_id,
        conversation_id=model.conversation_id,
        author_display_name=model.author_display_name,
        body=model.body,
        timestamp=model.timestamp,
        kind=model.kind,
        delivery_status=model.delivery_status,
        direction=model.direction,
        media_url=model.media_url,
        media_mime_type=model.media_mime_type,
        media_sha256=model.media_sha256,
        caption=model.caption,
    )


def entity_to_values(entity: Message) -> dict[str, object]:
    """Column values for an INSERT; ``seq`` and ``created_at`` come from the database."""
    return {
        "id": entity.id,
        "meta_msg_id": entity.meta_msg_id,
        "conversation_id": entity.conversation_id,
        "author_display_name": entity.author_display_name,
        "body": entity.body,
        "timestamp": entity.timestamp,
        "kind": entity.kind.value,
        "delivery_status": entity.delivery_status.value,
        "direction": entity.direction.value,
        "media_url": entity.media_url,
        "media_mime_type": entity.media_mime_type,
        "media_sha256": entity.media_sha256,
        "caption": entity.caption,
    }
