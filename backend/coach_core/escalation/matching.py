"""
Mentor matching.
Ranks available mentors for an escalation by expertise overlap, then load,
then response time.
"""
from typing import Iterable, List, Sequence, Tuple

from ..analysis.text import dedupe
from ..analysis.topics import extract_topics
from ..models.escalation import EscalationContext, Mentor


def extract_user_topics(context: EscalationContext) -> List[str]:
    """
    Collect the topics an escalation is about.
    
    Union of taxonomy topics in the original message and the user profile's
    interests and skills, de-duplicated in that order.
    """
    topics: List[str] = []
    
    if context.original_message:
        topics.extend(extract_topics(context.original_message))
    
    profile = context.user_profile or {}
    topics.extend(str(item) for item in profile.get("interests") or [])
    topics.extend(str(item) for item in profile.get("skills") or [])
    
    return dedupe(topics)


def topic_matches(topic: str, expertise: Iterable[str]) -> bool:
    """A topic matches an expertise area when either contains the other."""
    topic = topic.lower()
    return any(topic in area.lower() or area.lower() in topic for area in expertise)


def expertise_match(mentor: Mentor, topics: Sequence[str]) -> float:
    """
    Fraction of topics covered by the mentor's expertise.
    
    Returns 0.0 when there are no topics.
    """
    if not topics:
        return 0.0
    matched = sum(1 for topic in topics if topic_matches(topic, mentor.expertise))
    return matched / len(topics)


def is_available(mentor: Mentor, max_load: int) -> bool:
    """Online and below the load ceiling."""
    return mentor.is_online and mentor.current_load < max_load


def rank_mentors(
    mentors: Iterable[Mentor],
    topics: Sequence[str],
    max_load: int
) -> List[Tuple[Mentor, float]]:
    """
    Rank available mentors for a set of topics.
    
    Args:
        mentors: Candidate mentors
        topics: User topics from extract_user_topics()
        max_load: Mentors at or above this load are excluded
        
    Returns:
        (mentor, expertise_match) pairs, best first
    """
    scored = [
        (mentor, expertise_match(mentor, topics))
        for mentor in mentors
        if is_available(mentor, max_load)
    ]
    scored.sort(key=lambda pair: (-pair[1], pair[0].current_load, pair[0].response_time))
    return scored


__all__ = [
    'extract_user_topics',
    'topic_matches',
    'expertise_match',
    'is_available',
    'rank_mentors'
]
