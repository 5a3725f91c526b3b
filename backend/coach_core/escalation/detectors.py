"""
Escalation detectors.

Each detector inspects one signal and yields at most one EscalationReason
with a fixed confidence. Detectors are evaluated in DETECTION_ORDER, which
is also the tie-break order when two reasons share a confidence.
"""
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from ..analysis.text import contains_any, matching_categories, normalize_text
from ..models.escalation import EscalationReason, EscalationReasonType
from ..models.sentiment import EmotionalState, Intensity, Mood

DETECTION_ORDER = (
    EscalationReasonType.TECHNICAL_COMPLEXITY,
    EscalationReasonType.EMOTIONAL_SUPPORT,
    EscalationReasonType.CAREER_CRISIS,
    EscalationReasonType.AI_LIMITATION,
    EscalationReasonType.USER_REQUEST
)

REASON_CONFIDENCE = {
    EscalationReasonType.TECHNICAL_COMPLEXITY: 0.8,
    EscalationReasonType.EMOTIONAL_SUPPORT: 0.9,
    EscalationReasonType.CAREER_CRISIS: 0.95,
    EscalationReasonType.AI_LIMITATION: 0.7,
    EscalationReasonType.USER_REQUEST: 1.0
}

REASON_DESCRIPTIONS = {
    EscalationReasonType.TECHNICAL_COMPLEXITY:
        'User is asking about complex technical concepts that require expert guidance',
    EscalationReasonType.EMOTIONAL_SUPPORT:
        'User needs emotional support and guidance from a human mentor',
    EscalationReasonType.CAREER_CRISIS:
        'User is experiencing a career crisis that requires immediate human intervention',
    EscalationReasonType.AI_LIMITATION:
        'AI response indicates limitations in handling this specific query',
    EscalationReasonType.USER_REQUEST:
        'User explicitly requested to speak with a human mentor'
}

TECHNICAL_KEYWORDS = [
    'architecture', 'scalability', 'performance', 'optimization', 'security',
    'microservices', 'distributed', 'concurrent', 'asynchronous', 'algorithm',
    'complex', 'advanced', 'enterprise', 'production', 'deployment'
]

TECHNICAL_TRIGGERS = {
    'architecture': ['architecture', 'system design', 'scalability'],
    'performance': ['performance', 'optimization', 'speed', 'efficiency'],
    'security': ['security', 'vulnerability', 'encryption', 'authentication'],
    'deployment': ['deployment', 'production', 'infrastructure', 'devops']
}

CRISIS_KEYWORDS = [
    'fired', 'laid off', 'unemployed', 'job loss', 'career change',
    'crisis', 'emergency', 'urgent', 'desperate', 'stuck',
    'depression', 'anxiety', 'mental health', 'burnout'
]

CRISIS_TRIGGERS = {
    'job_loss': ['fired', 'laid off', 'unemployed', 'job loss'],
    'mental_health': ['depression', 'anxiety', 'mental health', 'burnout'],
    'urgent': ['urgent', 'emergency', 'crisis', 'desperate']
}

AI_LIMITATION_PHRASES = [
    "i don't know", "i can't help", "i'm not sure", "i'm limited",
    "i cannot", "i'm unable", "i don't have", "i'm not qualified"
]

AI_LIMITATION_TRIGGERS = {
    'knowledge_limitation': ["i don't know"],
    'capability_limitation': ["i can't help"],
    'uncertainty': ["i'm not sure"]
}

USER_REQUEST_KEYWORDS = [
    'human', 'mentor', 'person', 'real person', 'speak to someone',
    'talk to', 'connect me', 'escalate', 'transfer', 'help me'
]

DISTRESS_MOODS = (Mood.FRUSTRATED, Mood.OVERWHELMED, Mood.ANXIOUS)


def _reason(reason_type: EscalationReasonType, triggers: Iterable[str]) -> EscalationReason:
    return EscalationReason(
        type=reason_type,
        description=REASON_DESCRIPTIONS[reason_type],
        confidence=REASON_CONFIDENCE[reason_type],
        triggers=list(triggers)
    )


def response_text(ai_response: Any) -> str:
    """
    Extract text from an AI response.

    Accepts a plain string, a mapping with a 'content' key, or an object
    with a 'content' attribute.
    """
    if ai_response is None:
        return ""
    if isinstance(ai_response, str):
        return ai_response
    if isinstance(ai_response, Mapping):
        return str(ai_response.get("content") or "")
    return str(getattr(ai_response, "content", "") or "")


def coerce_emotional_state(
    emotional_state: Union[EmotionalState, Mapping[str, Any], None]
) -> Optional[EmotionalState]:
    """Accept an EmotionalState or its dictionary form."""
    if emotional_state is None or isinstance(emotional_state, EmotionalState):
        return emotional_state
    return EmotionalState.model_validate(emotional_state)


# ===========================
# Detectors
# ===========================

def detect_technical_complexity(message: str) -> Optional[EscalationReason]:
    """Complex technical subject matter."""
    if not contains_any(message, TECHNICAL_KEYWORDS):
        return None
    return _reason(
        EscalationReasonType.TECHNICAL_COMPLEXITY,
        matching_categories(message, TECHNICAL_TRIGGERS)
    )


def detect_emotional_support(
    emotional_state: Union[EmotionalState, Mapping[str, Any], None]
) -> Optional[EscalationReason]:
    """High-intensity distress, or a state already flagged as needing support."""
    state = coerce_emotional_state(emotional_state)
    if state is None:
        return None

    distressed = state.intensity == Intensity.HIGH and state.mood in DISTRESS_MOODS
    if not (distressed or state.support_needed):
        return None

    return _reason(
        EscalationReasonType.EMOTIONAL_SUPPORT,
        [state.mood.value, *state.triggers]
    )


def detect_career_crisis(
    message: str,
    keywords: Sequence[str] = CRISIS_KEYWORDS
) -> Optional[EscalationReason]:
    """Job loss, mental health or urgency language."""
    if not contains_any(message, keywords):
        return None
    return _reason(
        EscalationReasonType.CAREER_CRISIS,
        matching_categories(message, CRISIS_TRIGGERS)
    )


def detect_ai_limitation(ai_response: Any) -> Optional[EscalationReason]:
    """The generated reply admits it cannot handle the query."""
    text = normalize_text(response_text(ai_response))
    if not text or not any(phrase in text for phrase in AI_LIMITATION_PHRASES):
        return None

    triggers = [
        trigger
        for trigger, phrases in AI_LIMITATION_TRIGGERS.items()
        if any(phrase in text for phrase in phrases)
    ]
    return _reason(EscalationReasonType.AI_LIMITATION, triggers)


def detect_user_request(
    message: str,
    keywords: Sequence[str] = USER_REQUEST_KEYWORDS
) -> Optional[EscalationReason]:
    """The user asks for a human."""
    if not contains_any(message, keywords):
        return None
    return _reason(EscalationReasonType.USER_REQUEST, ['user_request'])


# ===========================
# Selection
# ===========================

def select_primary_reason(candidates: Sequence[EscalationReason]) -> Optional[EscalationReason]:
    """
    Pick the reason with the highest confidence.

    Ties go to the candidate that appears first; callers pass candidates in
    DETECTION_ORDER, so a tie resolves to the earlier detector.
    """
    primary = None
    for candidate in candidates:
        if primary is None or candidate.confidence > primary.confidence:
            primary = candidate
    return primary


__all__ = [
    'DETECTION_ORDER',
    'REASON_CONFIDENCE',
    'TECHNICAL_KEYWORDS',
    'CRISIS_KEYWORDS',
    'AI_LIMITATION_PHRASES',
    'USER_REQUEST_KEYWORDS',
    'response_text',
    'coerce_emotional_state',
    'detect_technical_complexity',
    'detect_emotional_support',
    'detect_career_crisis',
    'detect_ai_limitation',
    'detect_user_request',
    'select_primary_reason'
]
