"""
Escalation package.
Escalation decisions, mentor matching and request lifecycle management.

Version: 1.0.0
"""
from .detectors import DETECTION_ORDER, REASON_CONFIDENCE, select_primary_reason
from .events import EscalationCallback, EscalationEventBus
from .manager import ALLOWED_TRANSITIONS, PRIORITY_BY_REASON, EscalationManager
from .matching import expertise_match, extract_user_topics, rank_mentors
from .mentors import MentorDirectory, default_mentors

__all__ = [
    'EscalationManager',
    'EscalationEventBus',
    'EscalationCallback',
    'MentorDirectory',
    'default_mentors',
    'DETECTION_ORDER',
    'REASON_CONFIDENCE',
    'PRIORITY_BY_REASON',
    'ALLOWED_TRANSITIONS',
    'select_primary_reason',
    'expertise_match',
    'extract_user_topics',
    'rank_mentors'
]
