"""
Configuration for the coaching core.
Values are read from environment variables prefixed with ``COACH_``.

Version: 1.0.0
"""
import json
import logging
from functools import lru_cache
from typing import Annotated, List, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

logger = logging.getLogger(__name__)


class CoachSettings(BaseSettings):
    """
    Runtime configuration for analysis, escalation and conversation storage.

    Every field can be overridden from the environment, e.g.
    ``COACH_STORAGE_BACKEND=file`` or ``COACH_MENTOR_MAX_LOAD=80``.
    """

    model_config = SettingsConfigDict(
        env_prefix="COACH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # ===========================
    # General
    # ===========================

    environment: Literal["development", "testing", "production"] = Field(
        default="development",
        description="Deployment environment"
    )

    debug: bool = Field(
        default=False,
        description="Enable debug logging"
    )

    log_level: str = Field(
        default="INFO",
        description="Root log level when debug is off"
    )

    # ===========================
    # Conversation Storage
    # ===========================

    storage_backend: Literal["memory", "file", "redis"] = Field(
        default="memory",
        description="Conversation store implementation"
    )

    storage_path: str = Field(
        default="data/conversation-storage.json",
        description="JSON document path for the file store"
    )

    storage_key: str = Field(
        default="conversation-storage",
        min_length=1,
        max_length=255,
        description="Document key (one per user profile) for key-value stores"
    )

    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for the redis store"
    )

    recent_messages_limit: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="Default number of messages returned by get_recent_messages"
    )

    insights_window: int = Field(
        default=20,
        ge=1,
        le=500,
        description="Number of recent messages examined for insights"
    )

    # ===========================
    # Escalation
    # ===========================

    mentor_max_load: int = Field(
        default=90,
        ge=1,
        le=100,
        description="Mentors at or above this load are not auto-assigned"
    )

    mentor_load_step: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Load added on assignment and removed on resolution"
    )

    extra_crisis_keywords: Annotated[List[str], NoDecode] = Field(
        default_factory=list,
        description="Additional career-crisis keywords"
    )

    extra_escalation_keywords: Annotated[List[str], NoDecode] = Field(
        default_factory=list,
        description="Additional explicit escalation-request keywords"
    )

    # ===========================
    # Validators
    # ===========================

    @field_validator('extra_crisis_keywords', 'extra_escalation_keywords', mode='before')
    @classmethod
    def parse_keyword_list(cls, v):
        """Parse keyword lists from JSON arrays or comma-separated strings."""
        if v is None:
            return []

        if isinstance(v, str):
            if v.startswith('['):
                try:
                    return [str(item).lower() for item in json.loads(v)]
                except json.JSONDecodeError:
                    logger.warning(f"Invalid JSON keyword list: {v}")

            return [item.strip().lower() for item in v.split(',') if item.strip()]

        return [str(item).lower() for item in v]

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the log level name."""
        level = v.upper()
        if level not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    def get_store_config(self) -> dict:
        """
        Get keyword arguments for create_conversation_store().

        Returns:
            Store-specific configuration for the selected backend
        """
        if self.storage_backend == "file":
            return {"path": self.storage_path}

        if self.storage_backend == "redis":
            return {"redis_url": self.redis_url, "key": self.storage_key}

        return {}


@lru_cache()
def get_settings() -> CoachSettings:
    """Get the cached settings instance."""
    return CoachSettings()


settings = get_settings()

__all__ = ['CoachSettings', 'get_settings', 'settings']
