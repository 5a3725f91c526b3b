"""
Escalation manager.
Decides when a conversation needs a human mentor, dispatches requests to
the best available mentor and owns the request state machine.

Version: 1.0.0
"""
import logging
import threading
import uuid
from collections import Counter
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from ..config import CoachSettings, get_settings
from ..exceptions import InvalidStatusTransition
from ..models.base import utc_now
from ..models.escalation import (
    EscalationContext,
    EscalationDecision,
    EscalationPriority,
    EscalationReason,
    EscalationReasonType,
    EscalationRequest,
    EscalationStats,
    EscalationStatus,
    Mentor,
    ReasonCount
)
from ..models.sentiment import EmotionalState
from .detectors import (
    CRISIS_KEYWORDS,
    USER_REQUEST_KEYWORDS,
    detect_ai_limitation,
    detect_career_crisis,
    detect_emotional_support,
    detect_technical_complexity,
    detect_user_request,
    select_primary_reason
)
from .events import EscalationCallback, EscalationEventBus
from .matching import extract_user_topics, is_available, rank_mentors
from .mentors import MentorDirectory

logger = logging.getLogger(__name__)

PRIORITY_BY_REASON: Dict[EscalationReasonType, EscalationPriority] = {
    EscalationReasonType.CAREER_CRISIS: EscalationPriority.URGENT,
    EscalationReasonType.EMOTIONAL_SUPPORT: EscalationPriority.HIGH,
    EscalationReasonType.TECHNICAL_COMPLEXITY: EscalationPriority.MEDIUM,
    EscalationReasonType.USER_REQUEST: EscalationPriority.MEDIUM,
    EscalationReasonType.AI_LIMITATION: EscalationPriority.LOW
}

# pending -> assigned -> in_progress -> resolved; cancelled from any open state
ALLOWED_TRANSITIONS: Dict[EscalationStatus, frozenset] = {
    EscalationStatus.PENDING: frozenset({EscalationStatus.ASSIGNED, EscalationStatus.CANCELLED}),
    EscalationStatus.ASSIGNED: frozenset({
        EscalationStatus.IN_PROGRESS,
        EscalationStatus.RESOLVED,
        EscalationStatus.CANCELLED
    }),
    EscalationStatus.IN_PROGRESS: frozenset({EscalationStatus.RESOLVED, EscalationStatus.CANCELLED}),
    EscalationStatus.RESOLVED: frozenset(),
    EscalationStatus.CANCELLED: frozenset()
}

TOP_REASONS_LIMIT = 5


class EscalationManager:
    """
    Escalation decision engine and mentor dispatcher.

    Signals evaluated by should_escalate(), in order:
    1. Technical complexity of the message
    2. Emotional support needs
    3. Career crisis language
    4. Limitations admitted by the AI reply
    5. Explicit request for a human

    Requests are stored in memory and only ever handed out as copies;
    every change is broadcast through the event bus.
    """

    def __init__(
        self,
        mentors: Optional[MentorDirectory] = None,
        event_bus: Optional[EscalationEventBus] = None,
        settings: Optional[CoachSettings] = None,
        clock: Callable[[], datetime] = utc_now
    ):
        """
        Initialize escalation manager.

        Args:
            mentors: Mentor directory (defaults to the seeded fixture)
            event_bus: Event bus for request updates
            settings: Settings (defaults to the cached instance)
            clock: Source of timestamps
        """
        self.settings = settings or get_settings()
        self.mentors = mentors if mentors is not None else MentorDirectory()
        self.event_bus = event_bus or EscalationEventBus()
        self.clock = clock

        self.crisis_keywords = [*CRISIS_KEYWORDS, *self.settings.extra_crisis_keywords]
        self.request_keywords = [*USER_REQUEST_KEYWORDS, *self.settings.extra_escalation_keywords]

        self._requests: Dict[str, EscalationRequest] = {}
        self._lock = threading.RLock()

        logger.info(
            f"EscalationManager initialized "
            f"(max_load={self.settings.mentor_max_load}, load_step={self.settings.mentor_load_step})"
        )

    # ===========================
    # Decision
    # ===========================

    def should_escalate(
        self,
        user_message: str,
        context: Union[EscalationContext, Mapping[str, Any], None] = None,
        ai_response: Any = None,
        emotional_state: Union[EmotionalState, Mapping[str, Any], None] = None
    ) -> EscalationDecision:
        """
        Determine whether a message should be handed to a human mentor.

        Args:
            user_message: Current user message
            context: Conversation context (kept for detectors that need it)
            ai_response: Generated reply (string, mapping or object with content)
            emotional_state: Emotional state of the user message

        Returns:
            EscalationDecision with the primary reason when escalating
        """
        candidates = [
            reason for reason in (
                detect_technical_complexity(user_message),
                detect_emotional_support(emotional_state),
                detect_career_crisis(user_message, self.crisis_keywords),
                detect_ai_limitation(ai_response),
                detect_user_request(user_message, self.request_keywords)
            )
            if reason is not None
        ]

        primary = select_primary_reason(candidates)
        if primary is None:
            logger.debug("Escalation check: no signals")
            return EscalationDecision(should_escalate=False)

        logger.info(
            f"Escalation check: escalate ({primary.type.value}, confidence={primary.confidence}, "
            f"candidates={[c.type.value for c in candidates]})"
        )
        return EscalationDecision(should_escalate=True, reason=primary)

    # ===========================
    # Requests
    # ===========================

    def create_escalation_request(
        self,
        user_id: str,
        reason: Union[EscalationReason, Mapping[str, Any]],
        context: Union[EscalationContext, Mapping[str, Any], None] = None
    ) -> EscalationRequest:
        """
        Create an escalation request and dispatch it to a mentor.

        Args:
            user_id: Requesting user
            reason: Primary escalation reason
            context: Conversation context for the mentor

        Returns:
            Copy of the request after auto-assignment
        """
        if isinstance(reason, EscalationReason):
            reason = reason.model_copy(deep=True)
        else:
            reason = EscalationReason.model_validate(dict(reason))
        now = self.clock()

        request = EscalationRequest(
            id=f"escalation-{uuid.uuid4().hex}",
            user_id=user_id,
            reason=reason,
            priority=PRIORITY_BY_REASON[reason.type],
            context=self._coerce_context(context),
            status=EscalationStatus.PENDING,
            created_at=now,
            updated_at=now
        )

        with self._lock:
            self._requests[request.id] = request
            snapshot = request.model_copy(deep=True)

        logger.info(
            f"Created escalation request {request.id} for user {user_id} "
            f"(reason: {reason.type.value}, priority: {request.priority.value})"
        )

        self.event_bus.publish(snapshot)
        self.auto_assign_mentor(request.id)

        return self.get_escalation_request(request.id)

    def auto_assign_mentor(self, request_id: str) -> Optional[str]:
        """
        Assign the best available mentor to a pending request.

        Candidates are online mentors below the load ceiling, ranked by
        expertise match (desc), current load (asc), response time (asc).

        Returns:
            Assigned mentor id, or None if the request stays pending
        """
        with self._lock:
            request = self._requests.get(request_id)
            if request is None:
                logger.warning(f"Cannot auto-assign unknown escalation {request_id}")
                return None

            if request.status != EscalationStatus.PENDING:
                logger.debug(f"Escalation {request_id} is {request.status.value}; not auto-assigning")
                return None

            topics = extract_user_topics(request.context)
            ranked = rank_mentors(self.mentors.list_all(), topics, self.settings.mentor_max_load)

            if not ranked:
                logger.warning(f"No mentor available for escalation {request_id}; left pending")
                return None

            mentor, score = ranked[0]

        logger.debug(f"Best mentor for {request_id}: {mentor.id} (match={score:.2f}, topics={topics})")

        if not self.assign_mentor(request_id, mentor.id):
            return None
        return mentor.id

    def assign_mentor(self, request_id: str, mentor_id: str) -> bool:
        """
        Assign a mentor to a pending request.

        Increases the mentor's load by the configured step, capped at 100.

        Returns:
            False if the request or mentor does not exist

        Raises:
            InvalidStatusTransition: If the request is not pending
        """
        with self._lock:
            request = self._requests.get(request_id)

            if request is None or not self.mentors.exists(mentor_id):
                logger.warning(f"Cannot assign mentor {mentor_id} to escalation {request_id}: unknown id")
                return False

            self._check_transition(request, EscalationStatus.ASSIGNED)

            request.assigned_mentor = mentor_id
            request.status = EscalationStatus.ASSIGNED
            request.updated_at = self.clock()

            load = self.mentors.adjust_load(mentor_id, self.settings.mentor_load_step)
            snapshot = request.model_copy(deep=True)

        logger.info(f"Assigned escalation {request_id} to mentor {mentor_id} (load now {load})")
        self.event_bus.publish(snapshot)
        return True

    def update_escalation_status(
        self,
        request_id: str,
        status: Union[EscalationStatus, str],
        resolution: Optional[str] = None
    ) -> bool:
        """
        Move a request through its lifecycle.

        Resolving a request releases one load step from its mentor, floored at 0.
        Requests only become assigned through assign_mentor().

        Returns:
            False if the request does not exist

        Raises:
            InvalidStatusTransition: If the transition is not allowed, or the target is assigned
        """
        status = EscalationStatus(status)

        with self._lock:
            request = self._requests.get(request_id)
            if request is None:
                logger.warning(f"Cannot update unknown escalation {request_id}")
                return False

            # assigned is only reachable through assign_mentor, which also books the load
            if status == EscalationStatus.ASSIGNED:
                raise InvalidStatusTransition(request.id, request.status.value, status.value)

            self._check_transition(request, status)

            previous = request.status
            request.status = status
            request.updated_at = self.clock()
            if resolution:
                request.resolution = resolution

            if status == EscalationStatus.RESOLVED and request.assigned_mentor:
                self.mentors.adjust_load(request.assigned_mentor, -self.settings.mentor_load_step)

            snapshot = request.model_copy(deep=True)

        logger.info(f"Escalation {request_id} status {previous.value} -> {status.value}")
        self.event_bus.publish(snapshot)
        return True

    def get_escalation_request(self, request_id: str) -> Optional[EscalationRequest]:
        """Get a copy of a request, or None."""
        with self._lock:
            request = self._requests.get(request_id)
            return request.model_copy(deep=True) if request else None

    def get_user_escalation_requests(self, user_id: str) -> List[EscalationRequest]:
        """A user's requests, newest first."""
        with self._lock:
            requests = [
                request.model_copy(deep=True)
                for request in self._requests.values()
                if request.user_id == user_id
            ]
        return sorted(requests, key=lambda r: r.created_at, reverse=True)

    # ===========================
    # Mentors
    # ===========================

    def get_available_mentors(self) -> List[Mentor]:
        """Online mentors below the load ceiling, least loaded first."""
        available = [
            mentor for mentor in self.mentors.list_all()
            if is_available(mentor, self.settings.mentor_max_load)
        ]
        return sorted(available, key=lambda m: m.current_load)

    def get_mentor(self, mentor_id: str) -> Optional[Mentor]:
        return self.mentors.get(mentor_id)

    # ===========================
    # Subscriptions
    # ===========================

    def subscribe(self, callback: EscalationCallback) -> None:
        """Receive a copy of every request update."""
        self.event_bus.subscribe(callback)

    def unsubscribe(self, callback: EscalationCallback) -> bool:
        return self.event_bus.unsubscribe(callback)

    # ===========================
    # Statistics
    # ===========================

    def get_escalation_stats(self) -> EscalationStats:
        """
        Aggregate counts per status, mean resolution time and top reasons.

        Returns:
            EscalationStats (average_resolution_time in hours, 0 if none resolved)
        """
        with self._lock:
            requests = list(self._requests.values())

        by_status = Counter(request.status for request in requests)
        resolved = [r for r in requests if r.status == EscalationStatus.RESOLVED]

        average_hours = 0.0
        if resolved:
            total_seconds = sum((r.updated_at - r.created_at).total_seconds() for r in resolved)
            average_hours = total_seconds / len(resolved) / 3600

        reason_counts = Counter(request.reason.type for request in requests)

        return EscalationStats(
            total=len(requests),
            pending=by_status[EscalationStatus.PENDING],
            assigned=by_status[EscalationStatus.ASSIGNED],
            in_progress=by_status[EscalationStatus.IN_PROGRESS],
            resolved=by_status[EscalationStatus.RESOLVED],
            cancelled=by_status[EscalationStatus.CANCELLED],
            average_resolution_time=average_hours,
            top_reasons=[
                ReasonCount(reason=reason, count=count)
                for reason, count in reason_counts.most_common(TOP_REASONS_LIMIT)
            ]
        )

    # ===========================
    # Private Helper Methods
    # ===========================

    @staticmethod
    def _coerce_context(context: Union[EscalationContext, Mapping[str, Any], None]) -> EscalationContext:
        if context is None:
            return EscalationContext()
        if isinstance(context, EscalationContext):
            return context.model_copy(deep=True)
        return EscalationContext.model_validate(dict(context))

    @staticmethod
    def _check_transition(request: EscalationRequest, target: EscalationStatus) -> None:
        if target not in ALLOWED_TRANSITIONS[request.status]:
            raise InvalidStatusTransition(request.id, request.status.value, target.value)


__all__ = ['EscalationManager', 'PRIORITY_BY_REASON', 'ALLOWED_TRANSITIONS']
