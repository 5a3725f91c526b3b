"""
Topic taxonomy shared by message tagging and mentor matching.
"""
from typing import Dict, List

from .text import matching_categories

TOPIC_KEYWORDS: Dict[str, List[str]] = {
    'web development': ['web', 'website', 'frontend', 'backend', 'html', 'css', 'javascript'],
    'mobile development': ['mobile', 'app', 'ios', 'android', 'react native', 'flutter'],
    'data science': ['data', 'analysis', 'machine learning', 'ai', 'python', 'statistics'],
    'ui/ux': ['ui', 'ux', 'design', 'user interface', 'user experience', 'figma'],
    'career': ['career', 'job', 'internship', 'resume', 'interview', 'hiring'],
    'programming': ['code', 'programming', 'coding', 'developer', 'software']
}


def extract_topics(text: str) -> List[str]:
    """
    Extract taxonomy topics mentioned in text.
    
    Args:
        text: Message text
        
    Returns:
        Topic labels in taxonomy order
    """
    return matching_categories(text, TOPIC_KEYWORDS)


__all__ = ['TOPIC_KEYWORDS', 'extract_topics']
