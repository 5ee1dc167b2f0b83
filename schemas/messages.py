"""Transport-neutral inbound and outbound message schemas."""

from typing import List, Optional
from pydantic import BaseModel, Field


class Mention(BaseModel):
    """A user mention rendered as <at>name</at> in message text."""
    id: str  # Platform user id, or email for support contacts
    name: str

    @property
    def text(self) -> str:
        return f"<at>{self.name}</at>"


class Attachment(BaseModel):
    """File or image attached to a message."""
    content_type: str = "image/png"
    name: Optional[str] = None
    content: Optional[bytes] = None  # Inline bytes
    content_url: Optional[str] = None  # Remote URL
    path: Optional[str] = None  # Local file

    @property
    def is_image(self) -> bool:
        return self.content_type.startswith("image/")

    @classmethod
    def from_chart(cls, result, name: str = "chart.png") -> "Attachment":
        """
        Wrap a chart renderer result.

        Args:
            result: PNG bytes, an http(s) URL, or a local file path
            name: Attachment file name
        """
        if isinstance(result, (bytes, bytearray)):
            return cls(name=name, content=bytes(result))
        if isinstance(result, str) and result.startswith(("http://", "https://")):
            return cls(name=name, content_url=result)
        if isinstance(result, str):
            return cls(name=name, path=result)
        raise TypeError(f"Unsupported chart result type: {type(result).__name__}")


class InboundMessage(BaseModel):
    """A message received from the chat platform."""
    conversation_id: str
    user_id: str
    user_name: str
    text: str = ""
    mentions_bot: bool = False  # Bot was explicitly @-mentioned
    attachments: List[Attachment] = Field(default_factory=list)

    def first_image(self) -> Optional[Attachment]:
        """First image attachment, if any."""
        for attachment in self.attachments:
            if attachment.is_image:
                return attachment
        return None


class OutboundMessage(BaseModel):
    """A message to deliver to the chat platform."""
    conversation_id: str
    text: str
    mentions: List[Mention] = Field(default_factory=list)
    attachments: List[Attachment] = Field(default_factory=list)
    is_escalation: bool = False
