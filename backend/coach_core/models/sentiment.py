"""
Sentiment and emotional-state models.
Derived from message text on demand; never persisted on their own.
"""
from enum import Enum
from typing import List

from pydantic import Field

from .base import CoachModel


class Sentiment(str, Enum):
    """Coarse text sentiment."""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class SupportLevel(str, Enum):
    """How much support a message calls for."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Intensity(str, Enum):
    """Emotional intensity."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Mood(str, Enum):
    """Primary mood; also the emotion category labels."""
    EXCITED = "excited"
    FRUSTRATED = "frustrated"
    CONFUSED = "confused"
    MOTIVATED = "motivated"
    OVERWHELMED = "overwhelmed"
    CONFIDENT = "confident"
    ANXIOUS = "anxious"
    CURIOUS = "curious"


class SentimentAnalysis(CoachModel):
    """Result of analyze_sentiment()."""
    
    sentiment: Sentiment = Sentiment.NEUTRAL
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    emotions: List[Mood] = Field(default_factory=list)
    support_level: SupportLevel = SupportLevel.LOW
    recommendations: List[str] = Field(default_factory=list, max_length=3)


class EmotionalState(CoachModel):
    """Result of detect_emotional_state()."""
    
    mood: Mood = Mood.CURIOUS
    intensity: Intensity = Intensity.LOW
    triggers: List[str] = Field(default_factory=list)
    support_needed: bool = False


__all__ = [
    'Sentiment',
    'SupportLevel',
    'Intensity',
    'Mood',
    'SentimentAnalysis',
    'EmotionalState'
]
