"""Import all models so Base.metadata knows every table."""
from inbox_service.infrastructure.db.models.contact import ContactModel
from inbox_service.infrastructure.db.models.message import MessageModel

__all__ = [
    "ContactModel",
    "MessageModel",
]
