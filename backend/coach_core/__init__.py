"""
Career Coach Core
Sentiment analysis, mentor escalation and conversation storage for an AI
career coaching assistant.
"""

__version__ = "1.0.0"
__author__ = "Career Coach Team"

# Application metadata
APP_NAME = "Career Coach Core"
APP_DESCRIPTION = "Sentiment analysis, mentor escalation and conversation analytics for career coaching"

# Import key components for easier access
from .config import settings, get_settings
from .logging_config import setup_logging
from .analysis import KeywordSentimentAnalyzer, SentimentClassifier, create_classifier
from .escalation import EscalationManager, MentorDirectory
from .conversation import ConversationStorage, create_conversation_store, create_conversation_storage
from .services import CoachingService, CoachingTurn

__all__ = [
    "settings",
    "get_settings",
    "setup_logging",
    "KeywordSentimentAnalyzer",
    "SentimentClassifier",
    "create_classifier",
    "EscalationManager",
    "MentorDirectory",
    "ConversationStorage",
    "create_conversation_store",
    "create_conversation_storage",
    "CoachingService",
    "CoachingTurn",
    "APP_NAME",
    "APP_DESCRIPTION",
    "__version__",
]
