"""Console transport for local use."""

import sys
from typing import List, Optional, TextIO

from schemas.messages import OutboundMessage
from .base import MessageTransport


class ConsoleTransport(MessageTransport):
    """Prints outbound messages to a stream and keeps them for inspection."""

    def __init__(self, stream: Optional[TextIO] = None, show_typing: bool = False):
        self.stream = stream or sys.stdout
        self.show_typing = show_typing
        self.sent: List[OutboundMessage] = []

    def send(self, message: OutboundMessage) -> None:
        self.sent.append(message)
        print(f"\n{message.text}", file=self.stream)

        for attachment in message.attachments:
            location = attachment.path or attachment.content_url or f"{len(attachment.content or b'')} bytes"
            print(f"  [attachment: {attachment.name or attachment.content_type} -> {location}]", file=self.stream)

    def send_typing(self, conversation_id: str) -> None:
        if self.show_typing:
            print("...", file=self.stream)
