"""
Conversation models.

The persisted document and the export bundle share these models, so their
camelCase JSON shape is defined in exactly one place.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import ConfigDict, Field, model_validator

from .base import CoachModel, utc_now
from .sentiment import Sentiment


class MessageType(str, Enum):
    """Author of a conversation message."""
    USER = "user"
    COACH = "coach"


class Level(str, Enum):
    """Three-step scale used by insights."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ConversationMessage(CoachModel):
    """A single chat message. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    type: MessageType
    content: str
    timestamp: datetime = Field(default_factory=utc_now)
    sentiment: Optional[Sentiment] = None
    topics: Optional[List[str]] = None
    metadata: Optional[Dict[str, Any]] = None


class ConversationSession(CoachModel):
    """Ordered, append-only message sequence between a user and the coach."""

    id: str
    user_id: str
    title: str
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    message_count: int = Field(default=0, ge=0)
    last_message_at: datetime = Field(default_factory=utc_now)
    tags: List[str] = Field(default_factory=list)
    summary: Optional[str] = None


class ConversationDocument(CoachModel):
    """Whole conversation state as persisted by a ConversationStore."""

    conversations: Dict[str, List[ConversationMessage]] = Field(default_factory=dict)
    sessions: Dict[str, ConversationSession] = Field(default_factory=dict)
    current_session_id: Optional[str] = None

    @model_validator(mode='after')
    def validate_consistency(self) -> 'ConversationDocument':
        """Every session must own a message list and vice versa."""
        missing = set(self.sessions) ^ set(self.conversations)
        if missing:
            raise ValueError(f"Sessions and conversations do not match: {sorted(missing)}")

        if self.current_session_id and self.current_session_id not in self.sessions:
            raise ValueError(f"Unknown current session: {self.current_session_id}")

        return self

    def to_dict(self) -> dict:
        """Dump keeping the explicit null current session id."""
        return self.model_dump(mode="json", by_alias=True)


class TopicCount(CoachModel):
    """Frequency of one topic."""

    topic: str
    count: int = Field(ge=0)


class SentimentDistribution(CoachModel):
    """Message counts per sentiment label."""

    positive: int = 0
    negative: int = 0
    neutral: int = 0


class ConversationStats(CoachModel):
    """Per-user conversation statistics."""

    total_messages: int = 0
    total_sessions: int = 0
    average_session_length: float = 0.0
    most_active_day: str = ""
    top_topics: List[TopicCount] = Field(default_factory=list)
    sentiment_distribution: SentimentDistribution = Field(default_factory=SentimentDistribution)


class LearningPatterns(CoachModel):
    """Question habits derived from recent user messages."""

    total_questions: int = 0
    unique_topics: int = 0
    most_frequent_topics: List[TopicCount] = Field(default_factory=list)
    question_complexity: Level = Level.LOW


class ConversationInsights(CoachModel):
    """Coaching insights derived from stats and recent messages."""

    learning_patterns: LearningPatterns = Field(default_factory=LearningPatterns)
    engagement_level: Level = Level.LOW
    improvement_areas: List[str] = Field(default_factory=list)
    achievements: List[str] = Field(default_factory=list)


class ExportedSession(CoachModel):
    """A session together with its messages."""

    session: ConversationSession
    messages: List[ConversationMessage] = Field(default_factory=list)


class ConversationExport(CoachModel):
    """Export bundle for one user."""

    user_id: str
    export_date: datetime = Field(default_factory=utc_now)
    sessions: List[ExportedSession]
    stats: Optional[ConversationStats] = None

    @model_validator(mode='after')
    def validate_sessions(self) -> 'ConversationExport':
        """Reject duplicate session ids and sessions or messages owned by someone else."""
        seen = set()
        for entry in self.sessions:
            if entry.session.user_id != self.user_id:
                raise ValueError(
                    f"Session {entry.session.id} belongs to {entry.session.user_id}, not {self.user_id}"
                )
            if entry.session.id in seen:
                raise ValueError(f"Duplicate session in export: {entry.session.id}")
            seen.add(entry.session.id)

            for message in entry.messages:
                if message.user_id != entry.session.user_id:
                    raise ValueError(
                        f"Message {message.id} does not belong to owner of session {entry.session.id}"
                    )

        return self


__all__ = [
    'MessageType',
    'Level',
    'ConversationMessage',
    'ConversationSession',
    'ConversationDocument',
    'TopicCount',
    'SentimentDistribution',
    'ConversationStats',
    'LearningPatterns',
    'ConversationInsights',
    'ExportedSession',
    'ConversationExport'
]
