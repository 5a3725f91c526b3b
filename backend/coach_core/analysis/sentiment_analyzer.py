"""
Keyword sentiment analyzer.
Classifies chat text into sentiment, emotions, support level and emotional
state using the fixed keyword tables in lexicon.py.

Version: 1.0.0
"""
import logging
import random
from typing import Dict, List, Optional, Sequence

from ..models.sentiment import (
    EmotionalState,
    Intensity,
    Mood,
    Sentiment,
    SentimentAnalysis,
    SupportLevel
)
from . import lexicon
from .classifier import SentimentClassifier
from .text import count_keywords, contains_any, matching_categories

logger = logging.getLogger(__name__)


class KeywordSentimentAnalyzer(SentimentClassifier):
    """
    Deterministic keyword-table classifier.

    Features:
    - Whole-word, case-insensitive keyword counting
    - Multi-label emotion and trigger detection
    - Rule-table recommendations and support suggestions
    - Injectable random source for response template selection
    """

    def __init__(self, rng: Optional[random.Random] = None):
        """
        Initialize analyzer.

        Args:
            rng: Random source used to pick response templates
        """
        self.rng = rng or random.Random()

    # ===========================
    # Sentiment
    # ===========================

    def analyze_sentiment(self, text: str) -> SentimentAnalysis:
        """
        Classify sentiment of text.

        A category wins only if its hit count strictly exceeds both other
        counts; anything else (including no hits at all) is neutral.
        """
        positive = count_keywords(text, lexicon.POSITIVE_WORDS)
        negative = count_keywords(text, lexicon.NEGATIVE_WORDS)
        neutral = count_keywords(text, lexicon.NEUTRAL_WORDS)
        total = positive + negative + neutral

        if positive > negative and positive > neutral:
            sentiment, winning = Sentiment.POSITIVE, positive
        elif negative > positive and negative > neutral:
            sentiment, winning = Sentiment.NEGATIVE, negative
        else:
            sentiment, winning = Sentiment.NEUTRAL, neutral

        confidence = min(1.0, winning / total) if total else 0.0

        emotions = self.detect_emotions(text)
        support_level = self.determine_support_level(text, sentiment, emotions)
        recommendations = self.generate_recommendations(sentiment, emotions, support_level)

        logger.debug(
            f"Sentiment {sentiment.value} (confidence={confidence:.2f}, "
            f"hits={positive}/{negative}/{neutral}, emotions={[e.value for e in emotions]})"
        )

        return SentimentAnalysis(
            sentiment=sentiment,
            confidence=confidence,
            emotions=emotions,
            support_level=support_level,
            recommendations=recommendations
        )

    def detect_emotions(self, text: str) -> List[Mood]:
        """Flag every emotion category with at least one keyword hit."""
        return matching_categories(text, lexicon.EMOTION_KEYWORDS)

    def determine_support_level(
        self,
        text: str,
        sentiment: Sentiment,
        emotions: Sequence[Mood]
    ) -> SupportLevel:
        """Escalating support need: high keywords, then distress signals, then medium keywords."""
        if contains_any(text, lexicon.SUPPORT_KEYWORDS[SupportLevel.HIGH]):
            return SupportLevel.HIGH

        if sentiment == Sentiment.NEGATIVE or any(e in lexicon.DISTRESS_EMOTIONS for e in emotions):
            return SupportLevel.MEDIUM

        if contains_any(text, lexicon.SUPPORT_KEYWORDS[SupportLevel.MEDIUM]):
            return SupportLevel.MEDIUM

        return SupportLevel.LOW

    def generate_recommendations(
        self,
        sentiment: Sentiment,
        emotions: Sequence[Mood],
        support_level: SupportLevel
    ) -> List[str]:
        """Concatenate sentiment, emotion and support rules; keep the first three."""
        recommendations = list(lexicon.SENTIMENT_RECOMMENDATIONS.get(sentiment, []))

        for emotion in lexicon.EMOTION_RECOMMENDATIONS:
            if emotion in emotions:
                recommendations.extend(lexicon.EMOTION_RECOMMENDATIONS[emotion])

        recommendations.extend(lexicon.SUPPORT_RECOMMENDATIONS.get(support_level, []))

        return recommendations[:lexicon.MAX_RECOMMENDATIONS]

    # ===========================
    # Emotional State
    # ===========================

    def detect_emotional_state(
        self,
        text: str,
        sentiment: Optional[Sentiment] = None
    ) -> EmotionalState:
        """
        Derive mood, intensity, triggers and support need from text.

        Args:
            text: Raw message text
            sentiment: Sentiment of text if the caller already classified it

        Returns:
            EmotionalState
        """
        if sentiment is None:
            sentiment = self.analyze_sentiment(text).sentiment

        emotions = self.detect_emotions(text)
        mood = self._primary_mood(text)
        intensity = self.determine_intensity(text, emotions)
        triggers = matching_categories(text, lexicon.TRIGGER_KEYWORDS)

        support_needed = self.needs_support(sentiment, mood, intensity)

        logger.debug(
            f"Emotional state: mood={mood.value}, intensity={intensity.value}, "
            f"triggers={triggers}, support_needed={support_needed}"
        )

        return EmotionalState(
            mood=mood,
            intensity=intensity,
            triggers=triggers,
            support_needed=support_needed
        )

    def determine_intensity(self, text: str, emotions: Sequence[Mood]) -> Intensity:
        """Adverb tiers first; otherwise infer from how many emotions are flagged."""
        for intensity, words in lexicon.INTENSITY_WORDS.items():
            if contains_any(text, words):
                return intensity

        if len(emotions) > 3:
            return Intensity.HIGH
        if len(emotions) > 1:
            return Intensity.MEDIUM
        return Intensity.LOW

    @staticmethod
    def needs_support(sentiment: Sentiment, mood: Mood, intensity: Intensity) -> bool:
        """Decide whether the emotional state warrants active support."""
        if sentiment == Sentiment.NEGATIVE and intensity == Intensity.HIGH:
            return True
        if mood in (Mood.OVERWHELMED, Mood.ANXIOUS):
            return True
        if mood == Mood.FRUSTRATED and intensity == Intensity.MEDIUM:
            return True
        return False

    def _primary_mood(self, text: str) -> Mood:
        mood = Mood.CURIOUS
        best = 0
        scores: Dict[Mood, int] = {
            emotion: count_keywords(text, keywords)
            for emotion, keywords in lexicon.EMOTION_KEYWORDS.items()
        }

        for emotion, score in scores.items():
            # strict comparison keeps the earliest category on ties
            if score > best:
                best = score
                mood = emotion

        return mood

    # ===========================
    # Responses
    # ===========================

    def generate_empathetic_response(
        self,
        sentiment: Sentiment,
        emotions: Sequence[Mood] = ()
    ) -> str:
        """
        Build an empathetic opener for a reply.

        Args:
            sentiment: Sentiment of the user's message
            emotions: Detected emotions; the first one selects an add-on sentence

        Returns:
            Response text
        """
        pool = lexicon.EMPATHETIC_RESPONSES[Sentiment(sentiment)]
        response = self.rng.choice(pool)

        if emotions:
            addition = lexicon.EMOTION_RESPONSES.get(Mood(emotions[0]))
            if addition:
                response = f"{response} {addition}"

        return response

    def generate_support_suggestions(self, emotional_state: EmotionalState) -> List[str]:
        """Suggest up to four next steps for an emotional state."""
        suggestions = list(lexicon.MOOD_SUGGESTIONS.get(emotional_state.mood, []))

        if emotional_state.intensity == Intensity.HIGH:
            suggestions.extend(lexicon.HIGH_INTENSITY_SUGGESTIONS)

        for trigger, suggestion in lexicon.TRIGGER_SUGGESTIONS.items():
            if trigger in emotional_state.triggers:
                suggestions.append(suggestion)

        return suggestions[:lexicon.MAX_SUGGESTIONS]


__all__ = ['KeywordSentimentAnalyzer']
