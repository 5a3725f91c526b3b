"""
Abstract sentiment classifier interface.
Call sites depend on this contract so the keyword tables can be swapped
for a statistical model without changes elsewhere.
"""
from abc import ABC, abstractmethod
from typing import Optional

from ..models.sentiment import EmotionalState, Sentiment, SentimentAnalysis


class SentimentClassifier(ABC):
    """
    Abstract base class for text classifiers.
    
    Implementations must be deterministic for a given configuration and
    must not perform I/O.
    """
    
    @abstractmethod
    def analyze_sentiment(self, text: str) -> SentimentAnalysis:
        """
        Classify the sentiment of text.
        
        Args:
            text: Raw message text
            
        Returns:
            SentimentAnalysis
        """
        pass
    
    @abstractmethod
    def detect_emotional_state(
        self,
        text: str,
        sentiment: Optional[Sentiment] = None
    ) -> EmotionalState:
        """
        Derive the emotional state expressed in text.
        
        Args:
            text: Raw message text
            sentiment: Sentiment of the same text if already known;
                classified from text when omitted
            
        Returns:
            EmotionalState
        """
        pass


__all__ = ['SentimentClassifier']
