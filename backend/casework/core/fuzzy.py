"""
Casework Backend: Fuzzy Matcher
=================================

What:  Typo-tolerant matching of a search query against a piece of text.
How:   An exact case-insensitive substring is a perfect match (1.0). Otherwise
       every query word looks for its most similar text word, where similarity
       is graded as:

           identical words            1.0
           text word starts with it   0.9
           text word contains it      0.7
           otherwise                  1 - levenshtein / max(len)

       A query word only counts if its best similarity is strictly above the
       threshold; the final score averages over ALL query words, so an
       unmatched word drags the score down.

Also here: the extended relevance used for result decoration, search
suggestions (recent searches, typo corrections, templates) and match
highlighting for server-rendered result lists.
"""

import html
import math
import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

DEFAULT_THRESHOLD = 0.3
MAX_SUGGESTIONS = 5

# Correct spelling -> typos seen in the search log
COMMON_TYPOS = {
    "fälle": ["falle", "faelle", "fäle"],
    "helfer": ["helfr", "helffer"],
    "berichte": ["bericht", "berichtte"],
    "rechnung": ["recnung", "rechnug"],
}


@dataclass(frozen=True)
class MatchSpan:
    """Character span of an exact match in the lower-cased text."""
    start: int
    end: int


@dataclass(frozen=True)
class WordMatch:
    """Best text word for one query word."""
    word: str
    index: int
    score: float


@dataclass
class FuzzyMatch:
    score: float
    matches: List[Union[MatchSpan, WordMatch]] = field(default_factory=list)


@dataclass(frozen=True)
class Suggestion:
    type: str
    text: str
    icon: str
    query: str


def levenshtein_distance(a: str, b: str) -> int:
    """Unit-cost edit distance (insertion, deletion, substitution)."""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            if char_a == char_b:
                current.append(previous[j - 1])
            else:
                current.append(min(
                    previous[j - 1] + 1,  # substitution
                    current[j - 1] + 1,   # insertion
                    previous[j] + 1,      # deletion
                ))
        previous = current
    return previous[-1]


def word_similarity(query_word: str, text_word: str) -> float:
    if query_word == text_word:
        return 1.0
    if text_word.startswith(query_word):
        return 0.9
    if query_word in text_word:
        return 0.7
    longest = max(len(query_word), len(text_word))
    if longest == 0:
        return 0.0
    return 1 - levenshtein_distance(query_word, text_word) / longest


def fuzzy_match(
    query: Optional[str],
    text: Optional[str],
    threshold: float = DEFAULT_THRESHOLD,
) -> FuzzyMatch:
    """
    Match `query` against `text`.

    Returns:
        FuzzyMatch with a score in [0, 1]. An exact substring yields a single
        MatchSpan; otherwise one WordMatch per query word that beat the threshold.
    """
    if not query or not text:
        return FuzzyMatch(score=0.0)

    lower_query = query.lower()
    lower_text = text.lower()

    position = lower_text.find(lower_query)
    if position != -1:
        return FuzzyMatch(
            score=1.0,
            matches=[MatchSpan(start=position, end=position + len(lower_query))],
        )

    query_words = lower_query.split()
    if not query_words:
        return FuzzyMatch(score=0.0)

    text_words = lower_text.split()
    total = 0.0
    matches: List[Union[MatchSpan, WordMatch]] = []

    for query_word in query_words:
        best: Optional[WordMatch] = None
        for index, text_word in enumerate(text_words):
            similarity = word_similarity(query_word, text_word)
            if similarity > threshold and (best is None or similarity > best.score):
                best = WordMatch(word=text_word, index=index, score=similarity)
        if best is not None:
            total += best.score
            matches.append(best)

    return FuzzyMatch(score=total / len(query_words), matches=matches)


def advanced_relevance(
    query: str,
    text: str,
    is_recent: bool = False,
    is_important: bool = False,
    matches_user_role: bool = False,
    threshold: float = DEFAULT_THRESHOLD,
) -> int:
    """
    Relevance on a 0..~300 scale combining fuzzy similarity with bonuses.

    fuzzy score x 100, +50 when the text starts with the query, +25 for every
    query word found as a whole word, then +10 recent / +15 important /
    +20 role match. Rounded half up.
    """
    if not query or not text:
        return 0

    lower_query = query.lower()
    lower_text = text.lower()

    score = fuzzy_match(query, text, threshold).score * 100
    if lower_text.startswith(lower_query):
        score += 50

    for word in lower_query.split():
        if re.search(rf"\b{re.escape(word)}\b", lower_text):
            score += 25

    if is_recent:
        score += 10
    if is_important:
        score += 15
    if matches_user_role:
        score += 20

    return int(math.floor(score + 0.5))


def typo_corrections(query: str) -> List[str]:
    lowered = query.lower()
    return [correct for correct, typos in COMMON_TYPOS.items() if lowered in typos]


def search_suggestions(
    query: str,
    recent_searches: Sequence[str] = (),
) -> List[Suggestion]:
    """
    Build at most five suggestions for a partially typed query.

    Order: recent searches extending the query, typo corrections, templates.
    """
    lowered = query.lower()
    suggestions: List[Suggestion] = []

    for recent in recent_searches:
        if recent.lower().startswith(lowered) and recent != query:
            suggestions.append(Suggestion(type="recent", text=recent, icon="clock", query=recent))

    for correction in typo_corrections(query):
        suggestions.append(Suggestion(
            type="correction",
            text=f'Meintest du "{correction}"?',
            icon="sparkles",
            query=correction,
        ))

    templates = [
        Suggestion(type="template", text=f'Alle Fälle mit "{query}"', icon="clipboard", query=query),
        Suggestion(type="template", text=f'Helfer namens "{query}"', icon="users", query=f"helfer:{query}"),
        Suggestion(type="template", text=f'Berichte über "{query}"', icon="document", query=f"bericht:{query}"),
    ]
    for template in templates:
        # the helper-name template is noise for one- and two-letter queries
        if "helfer:" in template.query.lower() and len(query) <= 2:
            continue
        suggestions.append(template)

    return suggestions[:MAX_SUGGESTIONS]


def highlight_matches(text: Optional[str], query: Optional[str], css_class: str = "search-hit") -> str:
    """
    Wrap every case-insensitive occurrence of `query` in a <mark> element.

    The text is HTML-escaped; the query is matched literally.
    """
    if not text:
        return ""
    if not query:
        return html.escape(text)

    pattern = re.compile(f"({re.escape(query)})", re.IGNORECASE)
    parts = pattern.split(text)
    rendered = []
    for i, part in enumerate(parts):
        # re.split with one capture group puts matches at odd positions
        if i % 2:
            rendered.append(f'<mark class="{css_class}">{html.escape(part)}</mark>')
        else:
            rendered.append(html.escape(part))
    return "".join(rendered)
