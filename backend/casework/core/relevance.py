"""
Casework Backend: Relevance Scorer
====================================

What:  Scores how well a free-text search term matches a record's text.
Who:   The global search (services/search_service.py) scores every hit of
       every category with this function and ranks the merged list.

Scoring table (case-insensitive, no diacritic folding):
    +100  text starts with the whole search term
    +50   text contains the whole search term
    +10   per (search word, text word) pair where the text word contains it
    +20   per (search word, text word) pair where the text word starts with it

    Example: "schmidt" against "Anna Schmidt"
        contains            +50
        "schmidt" contains  +10
        "schmidt" prefix    +20
        total                80
"""

from typing import Callable, Iterable, List, Optional, TypeVar

T = TypeVar("T")

PREFIX_BONUS = 100
CONTAINS_BONUS = 50
WORD_CONTAINS_BONUS = 10
WORD_PREFIX_BONUS = 20


def relevance_score(search_term: str, text: Optional[str]) -> int:
    """
    Compute the relevance of `text` for `search_term`.

    Returns 0 for empty or missing text. Never raises for string input.
    """
    if not text or not search_term:
        return 0

    term = search_term.lower()
    haystack = text.lower()
    score = 0

    if haystack.startswith(term):
        score += PREFIX_BONUS
    if term in haystack:
        score += CONTAINS_BONUS

    text_words = haystack.split()
    for search_word in term.split():
        for text_word in text_words:
            if search_word in text_word:
                score += WORD_CONTAINS_BONUS
            if text_word.startswith(search_word):
                score += WORD_PREFIX_BONUS

    return score


def rank_by_score(items: Iterable[T], key: Callable[[T], int]) -> List[T]:
    """Sort by descending score; items with equal scores keep their input order."""
    # sorted() is stable, including with reverse=True
    return sorted(items, key=key, reverse=True)
