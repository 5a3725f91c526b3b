"""
Escalation and mentor models.

EscalationRequest instances are owned by EscalationManager; callers only
ever receive copies.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import ConfigDict, Field, field_validator

from .base import CoachModel, utc_now
from .sentiment import EmotionalState, SentimentAnalysis

MIN_MENTOR_LOAD = 0
MAX_MENTOR_LOAD = 100


class EscalationReasonType(str, Enum):
    """Why a conversation is handed to a human mentor."""
    TECHNICAL_COMPLEXITY = "technical_complexity"
    EMOTIONAL_SUPPORT = "emotional_support"
    CAREER_CRISIS = "career_crisis"
    AI_LIMITATION = "ai_limitation"
    USER_REQUEST = "user_request"


class EscalationPriority(str, Enum):
    """Escalation priority."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class EscalationStatus(str, Enum):
    """Escalation request lifecycle status."""
    PENDING = "pending"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CANCELLED = "cancelled"


class MentorAvailability(CoachModel):
    """Published working hours of a mentor."""

    timezone: str = "UTC"
    working_hours: str = ""
    days_available: List[str] = Field(default_factory=list)


class Mentor(CoachModel):
    """
    Human mentor available for escalations.

    current_load is clamped to [0, 100] on construction and on every
    assignment, so arithmetic on it never leaves the valid range.
    """

    id: str = Field(..., min_length=1)
    name: str = ""
    email: str = ""
    expertise: List[str] = Field(default_factory=list)
    availability: MentorAvailability = Field(default_factory=MentorAvailability)
    rating: float = Field(default=0.0, ge=0.0, le=5.0)
    response_time: int = Field(default=60, ge=0, description="Typical response time in minutes")
    is_online: bool = False
    current_load: int = Field(default=0, ge=MIN_MENTOR_LOAD, le=MAX_MENTOR_LOAD)

    @field_validator('current_load', mode='before')
    @classmethod
    def clamp_load(cls, v: Any) -> int:
        """Clamp load into [0, 100]."""
        return max(MIN_MENTOR_LOAD, min(MAX_MENTOR_LOAD, int(v)))


class EscalationReason(CoachModel):
    """A single escalation candidate produced by a detector."""

    type: EscalationReasonType
    description: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    triggers: List[str] = Field(default_factory=list)


class EscalationContext(CoachModel):
    """
    Conversation context captured with an escalation request.

    Unknown keys supplied by the chat layer are kept as-is.
    """

    model_config = ConfigDict(extra="allow")

    original_message: str = ""
    conversation_history: List[Any] = Field(default_factory=list)
    user_profile: Dict[str, Any] = Field(default_factory=dict)
    emotional_state: Optional[EmotionalState] = None
    sentiment_analysis: Optional[SentimentAnalysis] = None


class EscalationRequest(CoachModel):
    """Handoff of a conversation to a human mentor."""

    id: str
    user_id: str
    reason: EscalationReason
    priority: EscalationPriority
    context: EscalationContext = Field(default_factory=EscalationContext)
    status: EscalationStatus = EscalationStatus.PENDING
    assigned_mentor: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    resolution: Optional[str] = None


class EscalationDecision(CoachModel):
    """Outcome of should_escalate()."""

    should_escalate: bool
    reason: Optional[EscalationReason] = None


class ReasonCount(CoachModel):
    """Frequency of one escalation reason type."""

    reason: EscalationReasonType
    count: int = Field(ge=0)


class EscalationStats(CoachModel):
    """Aggregate escalation statistics."""

    total: int = 0
    pending: int = 0
    assigned: int = 0
    in_progress: int = 0
    resolved: int = 0
    cancelled: int = 0
    average_resolution_time: float = Field(default=0.0, description="Hours")
    top_reasons: List[ReasonCount] = Field(default_factory=list)


__all__ = [
    'EscalationReasonType',
    'EscalationPriority',
    'EscalationStatus',
    'MentorAvailability',
    'Mentor',
    'EscalationReason',
    'EscalationContext',
    'EscalationRequest',
    'EscalationDecision',
    'ReasonCount',
    'EscalationStats',
    'MIN_MENTOR_LOAD',
    'MAX_MENTOR_LOAD'
]
