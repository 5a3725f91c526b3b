"""
Coaching service.
Runs one chat turn through classification, conversation storage and the
escalation decision.

Version: 1.0.0
"""
import logging
import time
from typing import Any, Dict, List, Mapping, Optional

from ..analysis import KeywordSentimentAnalyzer, SentimentClassifier, extract_topics
from ..conversation import ConversationStorage
from ..escalation import EscalationManager
from ..exceptions import SessionNotFound
from ..models.conversation import ConversationMessage, MessageType
from ..models.escalation import EscalationContext, EscalationDecision, EscalationRequest
from ..models.sentiment import EmotionalState, SentimentAnalysis

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 10


class CoachingTurn:
    """Result of processing one user message."""

    def __init__(
        self,
        session_id: str,
        message: ConversationMessage,
        sentiment: SentimentAnalysis,
        emotional_state: EmotionalState,
        topics: List[str] = None,
        decision: Optional[EscalationDecision] = None,
        escalation: Optional[EscalationRequest] = None,
        processing_time: float = 0.0
    ):
        self.session_id = session_id
        self.message = message
        self.sentiment = sentiment
        self.emotional_state = emotional_state
        self.topics = topics or []
        self.decision = decision or EscalationDecision(should_escalate=False)
        self.escalation = escalation
        self.processing_time = processing_time

    @property
    def requires_escalation(self) -> bool:
        return self.decision.should_escalate

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "session_id": self.session_id,
            "message": self.message.to_dict(),
            "sentiment": self.sentiment.to_dict(),
            "emotional_state": self.emotional_state.to_dict(),
            "topics": self.topics,
            "requires_escalation": self.requires_escalation,
            "escalation": self.escalation.to_dict() if self.escalation else None,
            "processing_time": self.processing_time
        }


class CoachingService:
    """
    Orchestrates a coaching conversation.

    Each user message is classified, tagged with taxonomy topics, stored in
    its session and checked for escalation. Coach replies are stored with
    the same tagging.
    """

    def __init__(
        self,
        storage: Optional[ConversationStorage] = None,
        escalations: Optional[EscalationManager] = None,
        classifier: Optional[SentimentClassifier] = None
    ):
        """
        Initialize coaching service.

        Args:
            storage: Conversation storage
            escalations: Escalation manager
            classifier: Sentiment classifier (keyword tables by default)
        """
        self.storage = storage or ConversationStorage()
        self.escalations = escalations or EscalationManager()
        self.classifier = classifier or KeywordSentimentAnalyzer()

        logger.info(f"CoachingService initialized ({type(self.classifier).__name__})")

    def _resolve_session(self, user_id: str, session_id: Optional[str]) -> str:
        """Pick the session for a user message, creating one when needed."""
        if session_id is not None:
            session = self.storage.get_session(session_id)
            if session is None or session.user_id != user_id:
                raise SessionNotFound(session_id)
            return session_id

        current_id = self.storage.get_current_session_id()
        if current_id:
            current = self.storage.get_session(current_id)
            if current and current.user_id == user_id:
                return current_id

        return self.storage.create_session(user_id).id

    def process_user_message(
        self,
        user_id: str,
        content: str,
        session_id: Optional[str] = None,
        ai_response: Any = None,
        user_profile: Optional[Mapping[str, Any]] = None
    ) -> CoachingTurn:
        """
        Process one user message.

        Args:
            user_id: User identifier
            content: Message text
            session_id: Target session (the user's current session, or a new one, if omitted)
            ai_response: Generated reply to check for admitted limitations
            user_profile: Profile with 'interests' and 'skills' for mentor matching

        Returns:
            CoachingTurn with the stored message and any escalation request
        """
        start_time = time.time()

        session_id = self._resolve_session(user_id, session_id)

        sentiment = self.classifier.analyze_sentiment(content)
        emotional_state = self.classifier.detect_emotional_state(content, sentiment.sentiment)
        topics = extract_topics(content)

        message = self.storage.add_message(
            content,
            MessageType.USER,
            session_id=session_id,
            sentiment=sentiment.sentiment,
            topics=topics,
            metadata={
                "emotions": [emotion.value for emotion in sentiment.emotions],
                "supportLevel": sentiment.support_level.value,
                "mood": emotional_state.mood.value
            }
        )

        history = self.storage.get_session_messages(session_id)[-HISTORY_LIMIT:]
        context = EscalationContext(
            original_message=content,
            conversation_history=[m.to_dict() for m in history],
            user_profile=dict(user_profile or {}),
            emotional_state=emotional_state,
            sentiment_analysis=sentiment
        )

        decision = self.escalations.should_escalate(
            content,
            context=context,
            ai_response=ai_response,
            emotional_state=emotional_state
        )

        escalation = None
        if decision.should_escalate:
            escalation = self.escalations.create_escalation_request(user_id, decision.reason, context)

        processing_time = time.time() - start_time

        logger.info(
            f"Processed message {message.id} in session {session_id} "
            f"(sentiment={sentiment.sentiment.value}, escalate={decision.should_escalate}, "
            f"time={processing_time:.3f}s)"
        )

        return CoachingTurn(
            session_id=session_id,
            message=message,
            sentiment=sentiment,
            emotional_state=emotional_state,
            topics=topics,
            decision=decision,
            escalation=escalation,
            processing_time=processing_time
        )

    def record_coach_message(
        self,
        session_id: str,
        content: str,
        metadata: Optional[Mapping[str, Any]] = None
    ) -> ConversationMessage:
        """
        Store a coach reply in a session.

        Raises:
            SessionNotFound: If the session does not exist
        """
        sentiment = self.classifier.analyze_sentiment(content)

        return self.storage.add_message(
            content,
            MessageType.COACH,
            session_id=session_id,
            sentiment=sentiment.sentiment,
            topics=extract_topics(content),
            metadata=metadata
        )


__all__ = ['CoachingService', 'CoachingTurn']
