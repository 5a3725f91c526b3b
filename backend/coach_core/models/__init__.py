"""
Data models package.
Exports all pydantic models used across the coaching core.

Version: 1.0.0
"""
from .base import CoachModel, utc_now
from .sentiment import (
    Sentiment,
    SupportLevel,
    Intensity,
    Mood,
    SentimentAnalysis,
    EmotionalState
)
from .escalation import (
    EscalationReasonType,
    EscalationPriority,
    EscalationStatus,
    MentorAvailability,
    Mentor,
    EscalationReason,
    EscalationContext,
    EscalationRequest,
    EscalationDecision,
    ReasonCount,
    EscalationStats
)
from .conversation import (
    MessageType,
    Level,
    ConversationMessage,
    ConversationSession,
    ConversationDocument,
    TopicCount,
    SentimentDistribution,
    ConversationStats,
    LearningPatterns,
    ConversationInsights,
    ExportedSession,
    ConversationExport
)

__all__ = [
    'CoachModel',
    'utc_now',
    
    # Sentiment
    'Sentiment',
    'SupportLevel',
    'Intensity',
    'Mood',
    'SentimentAnalysis',
    'EmotionalState',
    
    # Escalation
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
    
    # Conversation
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
