"""Messaging transport interface."""

from abc import ABC, abstractmethod

from schemas.messages import OutboundMessage


class MessageTransport(ABC):
    """Abstract base class for chat platform adapters."""

    @abstractmethod
    def send(self, message: OutboundMessage) -> None:
        """
        Deliver a message with its mentions and attachments.

        Raises:
            Exception: Delivery failures propagate to the caller
        """
        pass

    @abstractmethod
    def send_typing(self, conversation_id: str) -> None:
        """Show a typing indicator in a conversation."""
        pass
