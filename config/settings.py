"""Application settings."""

import os
import logging
from typing import ClassVar, Dict, Optional, List
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class SupportContact(BaseModel):
    """Human support contact mentioned on escalation."""
    name: str
    email: str


def normalize_name(name: str) -> str:
    """Lowercase a display name and drop spaces for REPLY_TO matching."""
    return (name or "").lower().replace(" ", "")


class Settings(BaseModel):
    """Application configuration settings."""

    # LLM Provider settings
    llm_provider: str = "openai"  # "openai" or "anthropic"
    llm_model: Optional[str] = None  # OPENAI_MODEL, falls back to the client default
    llm_timeout_seconds: float = 60.0

    # API Keys
    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None

    # Sampling
    language_detection_temperature: float = 0.3
    message_intent_temperature: float = 0.5
    response_temperature: float = 0.7
    translation_temperature: float = 0.3
    completion_frequency_penalty: float = 0.8
    completion_presence_penalty: float = 0.3

    # Conversation memory
    message_retention_count: int = 20
    conversation_retention_hours: float = 24.0
    recent_message_window: int = 6
    context_max_tokens: int = 1500

    # Knowledge base
    knowledge_base_path: str = "data/knowledge_base.md"
    knowledge_images_dir: Optional[str] = None
    max_chunk_size: int = 500
    max_knowledge_chunks: int = 3

    # Escalation and gating
    support_users: str = ""  # "Name:email,Name:email"
    reply_to: str = ""  # "Name|Name"
    bot_name: str = "Support Assistant"

    # Charts
    chart_renderer: str = "quickchart"  # "quickchart", "quickchart_url" or "none"
    quickchart_url: str = "https://quickchart.io"

    # Logging
    log_level: str = "INFO"
    verbose: bool = False

    # Environment variable backing each field
    ENV_VARS: ClassVar[Dict[str, str]] = {
        "llm_provider": "LLM_PROVIDER",
        "llm_model": "OPENAI_MODEL",
        "llm_timeout_seconds": "LLM_TIMEOUT_SECONDS",
        "openai_api_key": "OPENAI_API_KEY",
        "anthropic_api_key": "ANTHROPIC_API_KEY",
        "language_detection_temperature": "LANGUAGE_DETECTION_TEMPERATURE",
        "message_intent_temperature": "MESSAGE_INTENT_TEMPERATURE",
        "response_temperature": "RESPONSE_TEMPERATURE",
        "translation_temperature": "TRANSLATION_TEMPERATURE",
        "completion_frequency_penalty": "COMPLETION_FREQUENCY_PENALTY",
        "completion_presence_penalty": "COMPLETION_PRESENCE_PENALTY",
        "message_retention_count": "MESSAGE_RETENTION_COUNT",
        "conversation_retention_hours": "CONVERSATION_RETENTION_HOURS",
        "recent_message_window": "RECENT_MESSAGE_WINDOW",
        "context_max_tokens": "CONTEXT_MAX_TOKENS",
        "knowledge_base_path": "KNOWLEDGE_BASE_PATH",
        "knowledge_images_dir": "KNOWLEDGE_IMAGES_DIR",
        "max_chunk_size": "MAX_CHUNK_SIZE",
        "max_knowledge_chunks": "MAX_KNOWLEDGE_CHUNKS",
        "support_users": "SUPPORT_USERS",
        "reply_to": "REPLY_TO",
        "bot_name": "BOT_NAME",
        "chart_renderer": "CHART_RENDERER",
        "quickchart_url": "QUICKCHART_URL",
        "log_level": "LOG_LEVEL",
    }

    def __init__(self, **data):
        # Auto-load from environment if not provided
        for field_name, env_var in self.ENV_VARS.items():
            if data.get(field_name) is None and os.environ.get(env_var):
                data[field_name] = os.environ[env_var]

        # Older deployments store the key under a SECRET_ prefix
        if data.get("openai_api_key") is None:
            data["openai_api_key"] = os.environ.get("SECRET_OPENAI_API_KEY")

        # Unset values keep the field default
        super().__init__(**{key: value for key, value in data.items() if value is not None})

    def get_llm_api_key(self) -> Optional[str]:
        """Get the API key for the configured LLM provider."""
        if self.llm_provider == "openai":
            return self.openai_api_key
        elif self.llm_provider == "anthropic":
            return self.anthropic_api_key
        return None

    def get_support_users(self) -> List[SupportContact]:
        """Parse SUPPORT_USERS into support contacts."""
        contacts = []
        for entry in self.support_users.split(","):
            entry = entry.strip()
            if not entry:
                continue
            if ":" not in entry:
                logger.warning(f"Skipping malformed SUPPORT_USERS entry: {entry}")
                continue
            name, email = entry.split(":", 1)
            contacts.append(SupportContact(name=name.strip(), email=email.strip()))
        return contacts

    def get_reply_to(self) -> List[str]:
        """Parse REPLY_TO into normalized display names."""
        return [
            normalize_name(name)
            for name in self.reply_to.split("|")
            if name.strip()
        ]

    def is_reply_to(self, name: str) -> bool:
        """Check whether the bot answers this sender without a mention."""
        return normalize_name(name) in self.get_reply_to()
