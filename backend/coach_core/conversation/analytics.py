"""
Conversation analytics.

Pure functions over sessions and messages: titles, summaries, statistics
and coaching insights. Nothing here touches storage.
"""
from collections import Counter
from typing import Dict, Iterable, List, Sequence

from ..analysis.text import contains_any, dedupe
from ..models.conversation import (
    ConversationInsights,
    ConversationMessage,
    ConversationSession,
    ConversationStats,
    LearningPatterns,
    Level,
    MessageType,
    SentimentDistribution,
    TopicCount
)
from ..models.sentiment import Sentiment

TITLE_WORDS = 6
TITLE_MAX_LENGTH = 50
TOP_TOPICS_LIMIT = 5
SUMMARY_TOPICS_LIMIT = 3

COMPLEXITY_KEYWORDS: Dict[Level, List[str]] = {
    Level.HIGH: ['design', 'implement', 'optimize', 'architecture', 'complex'],
    Level.MEDIUM: ['explain', 'describe', 'compare', 'analyze', 'evaluate'],
    Level.LOW: ['what', 'how', 'why', 'when', 'where']
}

COMPLEXITY_WEIGHTS: Dict[Level, int] = {
    Level.HIGH: 3,
    Level.MEDIUM: 2,
    Level.LOW: 1
}

HIGH_COMPLEXITY_THRESHOLD = 2.5
MEDIUM_COMPLEXITY_THRESHOLD = 1.5

HIGH_ENGAGEMENT_MESSAGES = 20
MEDIUM_ENGAGEMENT_MESSAGES = 10

NEGATIVE_SHARE_THRESHOLD = 0.3
MIN_DIVERSE_TOPICS = 3
ACTIVE_LEARNER_MESSAGES = 100
CONSISTENT_LEARNER_SESSIONS = 10


# ===========================
# Titles and Summaries
# ===========================

def generate_session_title(content: str) -> str:
    """
    Title a session after its first message.

    First six words; titles over 50 characters are cut to 47 plus '...'.
    """
    title = " ".join(content.split()[:TITLE_WORDS])
    if len(title) > TITLE_MAX_LENGTH:
        return title[:TITLE_MAX_LENGTH - 3] + "..."
    return title


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def describe_duration(messages: Sequence[ConversationMessage]) -> str:
    """Human-readable span between the first and last message."""
    if len(messages) < 2:
        return "a few minutes"

    elapsed = messages[-1].timestamp - messages[0].timestamp
    minutes = int(elapsed.total_seconds() // 60)

    if minutes < 1:
        return "less than a minute"
    if minutes < 60:
        return _plural(minutes, "minute")
    return _plural(minutes // 60, "hour")


def topics_of(messages: Iterable[ConversationMessage]) -> List[str]:
    """Distinct topics across messages in first-seen order."""
    return dedupe(topic for message in messages for topic in (message.topics or []))


def summarize_session(messages: Sequence[ConversationMessage]) -> str:
    """
    Build a one-paragraph session summary.

    Returns:
        Summary text, or '' when there are no messages
    """
    if not messages:
        return ""

    questions = sum(1 for m in messages if m.type == MessageType.USER)
    responses = sum(1 for m in messages if m.type == MessageType.COACH)
    topic_list = ", ".join(topics_of(messages)[:SUMMARY_TOPICS_LIMIT]) or "general topics"

    return (
        f"Discussed {topic_list} over {describe_duration(messages)}. "
        f"{questions} questions asked, {responses} responses provided."
    )


# ===========================
# Statistics
# ===========================

def count_topics(messages: Iterable[ConversationMessage], limit: int = TOP_TOPICS_LIMIT) -> List[TopicCount]:
    """Most frequent topics; equal counts keep first-seen order."""
    counts = Counter(topic for message in messages for topic in (message.topics or []))
    return [TopicCount(topic=topic, count=count) for topic, count in counts.most_common(limit)]


def most_active_day(messages: Iterable[ConversationMessage]) -> str:
    """
    Calendar day (ISO date) with the most messages.

    Ties keep the day encountered first; '' when there are no messages.
    """
    counts: Dict[str, int] = {}
    for message in messages:
        day = message.timestamp.date().isoformat()
        counts[day] = counts.get(day, 0) + 1

    best_day, best_count = "", 0
    for day, count in counts.items():
        if count > best_count:
            best_day, best_count = day, count
    return best_day


def sentiment_distribution(messages: Iterable[ConversationMessage]) -> SentimentDistribution:
    counts = Counter(message.sentiment for message in messages if message.sentiment)
    return SentimentDistribution(
        positive=counts[Sentiment.POSITIVE],
        negative=counts[Sentiment.NEGATIVE],
        neutral=counts[Sentiment.NEUTRAL]
    )


def compute_stats(
    sessions: Sequence[ConversationSession],
    messages: Sequence[ConversationMessage]
) -> ConversationStats:
    """
    Aggregate statistics for one user.

    Args:
        sessions: The user's sessions
        messages: Every message of those sessions
    """
    total_messages = len(messages)
    total_sessions = len(sessions)
    average = round(total_messages / total_sessions, 1) if total_sessions else 0.0

    return ConversationStats(
        total_messages=total_messages,
        total_sessions=total_sessions,
        average_session_length=average,
        most_active_day=most_active_day(messages),
        top_topics=count_topics(messages),
        sentiment_distribution=sentiment_distribution(messages)
    )


# ===========================
# Insights
# ===========================

def question_complexity(messages: Sequence[ConversationMessage]) -> Level:
    """
    Weighted complexity of questions.

    Each message scores 3/2/1 for its highest matching keyword bucket
    (0 for none); the average is compared with 2.5 and 1.5.
    """
    if not messages:
        return Level.LOW

    score = 0
    for message in messages:
        for level, keywords in COMPLEXITY_KEYWORDS.items():
            if contains_any(message.content, keywords):
                score += COMPLEXITY_WEIGHTS[level]
                break

    average = score / len(messages)
    if average >= HIGH_COMPLEXITY_THRESHOLD:
        return Level.HIGH
    if average >= MEDIUM_COMPLEXITY_THRESHOLD:
        return Level.MEDIUM
    return Level.LOW


def learning_patterns(messages: Sequence[ConversationMessage]) -> LearningPatterns:
    """Question habits of the user messages among messages."""
    questions = [m for m in messages if m.type == MessageType.USER]

    return LearningPatterns(
        total_questions=len(questions),
        unique_topics=len(topics_of(questions)),
        most_frequent_topics=count_topics(questions),
        question_complexity=question_complexity(questions)
    )


def engagement_level(stats: ConversationStats) -> Level:
    """Messages per session: 20+ is high, 10+ is medium."""
    if not stats.total_sessions:
        return Level.LOW

    per_session = stats.total_messages / stats.total_sessions
    if per_session >= HIGH_ENGAGEMENT_MESSAGES:
        return Level.HIGH
    if per_session >= MEDIUM_ENGAGEMENT_MESSAGES:
        return Level.MEDIUM
    return Level.LOW


def improvement_areas(messages: Sequence[ConversationMessage]) -> List[str]:
    areas = []

    negative = sum(1 for m in messages if m.sentiment == Sentiment.NEGATIVE)
    if negative > len(messages) * NEGATIVE_SHARE_THRESHOLD:
        areas.append('Consider asking more specific questions to get better guidance')

    if len(topics_of(messages)) < MIN_DIVERSE_TOPICS:
        areas.append('Explore more diverse topics to broaden your learning')

    return areas


def achievements(stats: ConversationStats) -> List[str]:
    earned = []

    if stats.total_messages >= ACTIVE_LEARNER_MESSAGES:
        earned.append('Active learner - 100+ messages exchanged')

    if stats.total_sessions >= CONSISTENT_LEARNER_SESSIONS:
        earned.append('Consistent learner - 10+ conversation sessions')

    distribution = stats.sentiment_distribution
    if distribution.positive > distribution.negative:
        earned.append('Positive learning attitude maintained')

    return earned


def build_insights(
    stats: ConversationStats,
    recent_messages: Sequence[ConversationMessage]
) -> ConversationInsights:
    """
    Combine statistics and recent messages into coaching insights.

    Args:
        stats: Output of compute_stats() for the user
        recent_messages: The user's most recent messages
    """
    return ConversationInsights(
        learning_patterns=learning_patterns(recent_messages),
        engagement_level=engagement_level(stats),
        improvement_areas=improvement_areas(recent_messages),
        achievements=achievements(stats)
    )


__all__ = [
    'generate_session_title',
    'describe_duration',
    'summarize_session',
    'count_topics',
    'most_active_day',
    'sentiment_distribution',
    'compute_stats',
    'question_complexity',
    'learning_patterns',
    'engagement_level',
    'improvement_areas',
    'achievements',
    'build_insights'
]
