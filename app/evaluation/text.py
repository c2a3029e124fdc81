"""Shared text splitting and rounding helpers for the quality scorers.

All splitting is regex based (no trained tokenizer models), so results are
deterministic and need no downloaded NLTK data.
"""
import math
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import List

from nltk.tokenize import RegexpTokenizer

_sentence_splitter = RegexpTokenizer(r"[.!?]+", gaps=True)
_paragraph_splitter = RegexpTokenizer(r"\n\s*\n", gaps=True)
_whitespace_splitter = RegexpTokenizer(r"\s+", gaps=True)
# Raw split keeps the empty edge pieces, so " a b " counts as 4 tokens
_raw_whitespace_splitter = RegexpTokenizer(r"\s+", gaps=True, discard_empty=False)
_non_word = re.compile(r"[^\w\s]", re.ASCII)


def is_blank(text: str) -> bool:
    return not text or not text.strip()


def split_sentences(text: str) -> List[str]:
    """Sentence segments split on runs of . ! ?, trimmed, empties dropped."""
    stripped = (segment.strip() for segment in _sentence_splitter.tokenize(text))
    return [segment for segment in stripped if segment]


def split_paragraphs(text: str) -> List[str]:
    """Blank-line separated blocks, untrimmed, whitespace-only blocks dropped."""
    return [block for block in _paragraph_splitter.tokenize(text) if block.strip()]


def split_words(text: str) -> List[str]:
    """Non-empty whitespace separated tokens."""
    return _whitespace_splitter.tokenize(text)


def raw_word_count(text: str) -> int:
    """Token count of a plain whitespace split, edge empties included."""
    return len(_raw_whitespace_splitter.tokenize(text))


def content_words(text: str) -> List[str]:
    """Lower-cased word tokens longer than two characters, punctuation removed."""
    cleaned = _non_word.sub(" ", text.lower())
    return [word for word in split_words(cleaned) if len(word) > 2]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity."""
    return int(math.floor(value + 0.5))


def round_places(value: float, places: int = 2) -> float:
    """Decimal rounding of the exact binary value, ties rounded up."""
    exponent = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(exponent, rounding=ROUND_HALF_UP))


def format_places(value: float, places: int = 1) -> str:
    exponent = Decimal(1).scaleb(-places)
    return str(Decimal(value).quantize(exponent, rounding=ROUND_HALF_UP))
