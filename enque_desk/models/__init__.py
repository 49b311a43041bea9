"""Domain vocabularies and API schemas."""

from enque_desk.models.entities import TicketPriority, TicketStatus, TicketType

__all__ = ["TicketPriority", "TicketStatus", "TicketType"]
