"""Pydantic schemas for the support assistant."""

from .responses import MessageIntent, AnswerKind, AnswerOutcome
from .charts import ChartType, ChartDataset
from .messages import Mention, Attachment, InboundMessage, OutboundMessage

__all__ = [
    "MessageIntent",
    "AnswerKind",
    "AnswerOutcome",
    "ChartType",
    "ChartDataset",
    "Mention",
    "Attachment",
    "InboundMessage",
    "OutboundMessage",
]
