"""Raw webhook record shapes.

Only the fields the ingestion pipeline reads are declared; everything else in
a record is ignored.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _WebhookModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)


class WebhookProfile(_WebhookModel):
    name: str | None = None


class WebhookContact(_WebhookModel):
    wa_id: str = Field(min_length=1)
    profile: WebhookProfile | None = None

    @property
    def display_name(self) -> str | None:
        return self.profile.name if self.profile else None


class WebhookText(_WebhookModel):
    body: str | None = None


class WebhookMedia(_WebhookModel):
    link: str | None = None
    mime_type: str | None = None
    sha256: str | None = None
    caption: str | None = None
    filename: str | None = None


class WebhookMessage(_WebhookModel):
    id: str = Field(min_length=1)
    sender: str = Field(alias="from", min_length=1)
    timestamp: str | int | float | None = None
    type: str = "text"
    text: WebhookText | None = None
    image: WebhookMedia | None = None
    document: WebhookMedia | None = None
    audio: WebhookMedia | None = None
    video: WebhookMedia | None = None

    @property
    def media(self) -> WebhookMedia | None:
        """The kind-specific media object, if any is present."""
        return self.image or self.document or self.audio or self.video
