"""
Text analysis package.
Sentiment, emotional-state and topic classification over chat text.
"""
from .classifier import SentimentClassifier
from .sentiment_analyzer import KeywordSentimentAnalyzer
from .topics import TOPIC_KEYWORDS, extract_topics


def create_classifier(classifier_type: str = "keyword", **kwargs) -> SentimentClassifier:
    """
    Factory function to create a sentiment classifier.
    
    Args:
        classifier_type: Type of classifier (only 'keyword' is built in)
        **kwargs: Classifier-specific configuration
        
    Returns:
        SentimentClassifier instance
    """
    if classifier_type == "keyword":
        return KeywordSentimentAnalyzer(**kwargs)
    
    raise ValueError(f"Unknown classifier type: {classifier_type}")


__all__ = [
    'SentimentClassifier',
    'KeywordSentimentAnalyzer',
    'TOPIC_KEYWORDS',
    'extract_topics',
    'create_classifier'
]
