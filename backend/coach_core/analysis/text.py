"""
Keyword matching helpers shared by the classifiers and detectors.

All matching is case-insensitive and whole-word: "app" matches "my app"
but not "apple". Multi-word phrases match as a unit.
"""
import re
from functools import lru_cache
from typing import Dict, Iterable, List, Sequence

_APOSTROPHES = str.maketrans({"’": "'", "‘": "'"})


@lru_cache(maxsize=1024)
def _keyword_pattern(keyword: str) -> "re.Pattern[str]":
    return re.compile(r'\b' + re.escape(keyword.lower()) + r'\b', re.IGNORECASE)


def normalize_text(text: str) -> str:
    """Lower-case text and fold typographic apostrophes."""
    return (text or "").translate(_APOSTROPHES).lower()


def count_keyword(text: str, keyword: str) -> int:
    """Count whole-word occurrences of keyword in text."""
    return len(_keyword_pattern(keyword).findall(normalize_text(text)))


def count_keywords(text: str, keywords: Iterable[str]) -> int:
    """Total whole-word occurrences of every keyword in text."""
    normalized = normalize_text(text)
    return sum(len(_keyword_pattern(keyword).findall(normalized)) for keyword in keywords)


def contains_any(text: str, keywords: Iterable[str]) -> bool:
    """True if any keyword occurs in text as a whole word."""
    normalized = normalize_text(text)
    return any(_keyword_pattern(keyword).search(normalized) for keyword in keywords)


def matching_categories(text: str, table: Dict[str, Sequence[str]]) -> List[str]:
    """
    Return every category of table with at least one keyword hit.
    
    Categories are returned in the table's iteration order.
    """
    normalized = normalize_text(text)
    return [
        category
        for category, keywords in table.items()
        if any(_keyword_pattern(keyword).search(normalized) for keyword in keywords)
    ]


def dedupe(items: Iterable[str]) -> List[str]:
    """Remove duplicates, keeping first occurrence order."""
    return list(dict.fromkeys(items))


__all__ = [
    'normalize_text',
    'count_keyword',
    'count_keywords',
    'contains_any',
    'matching_categories',
    'dedupe'
]
