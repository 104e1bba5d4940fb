"""
Tokenization for drug and remedy text fields.

Turns free text into normalized tokens (lowercase, alphanumeric, at least two
characters, not a stopword). There is no stemming: "inflammation" and
"inflammatory" are different tokens.
"""

import re
from typing import FrozenSet, Iterable, List, Optional

STOPWORDS: FrozenSet[str] = frozenset({
    # Generic English
    "a", "an", "and", "are", "as", "at", "be", "by", "for", "from",
    "in", "into", "is", "it", "of", "on", "or", "that", "the", "their",
    "this", "to", "used", "with", "without",
    # Units / dosage
    "mg", "mcg", "g", "kg", "ml", "iu",
    # Dosing frequency
    "daily", "day", "once", "twice", "times",
    # Formulation
    "tablet", "tablets", "capsule", "capsules", "extended", "release",
    # Chemical suffixes
    "hydrochloride", "sodium", "acid",
})

MIN_TOKEN_LENGTH = 2

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]+")


def tokenize(text: object, stopwords: FrozenSet[str] = STOPWORDS) -> List[str]:
    """
    Split a phrase into normalized tokens, preserving order.

    Args:
        text: Phrase to tokenize. Anything that is not a string yields no tokens.
        stopwords: Tokens to discard.

    Returns:
        Ordered list of tokens; duplicates are kept.
    """
    if not isinstance(text, str):
        return []

    pieces = _NON_ALPHANUMERIC.sub(" ", text.lower()).split(" ")
    return [
        token for token in (piece.strip() for piece in pieces)
        if len(token) >= MIN_TOKEN_LENGTH and token not in stopwords
    ]


def to_token_set(
    phrases: Optional[Iterable[object]],
    stopwords: FrozenSet[str] = STOPWORDS
) -> FrozenSet[str]:
    """Union of the tokens of every phrase."""
    if phrases is None or isinstance(phrases, str):
        # A bare string is one phrase, not a sequence of characters
        return frozenset(tokenize(phrases, stopwords))

    tokens = set()
    for phrase in phrases:
        tokens.update(tokenize(phrase, stopwords))
    return frozenset(tokens)
