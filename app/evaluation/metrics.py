import math
import re
from typing import Callable, Dict, Tuple

from app.evaluation.schemas.metrics import MetricDetail, QualityMetrics
from app.evaluation.text import (
    content_words,
    format_places,
    is_blank,
    raw_word_count,
    round_half_up,
    split_paragraphs,
    split_sentences,
    split_words,
)

EMPTY_RESPONSE = "Empty response"

MetricScorer = Callable[[str, str], MetricDetail]

_vowel_groups = re.compile(r"[aeiouy]+")
_non_letters = re.compile(r"[^a-z]")
_capitalized = re.compile(r"^[A-Z]")
_excessive_punctuation = re.compile(r"[!?]{3,}|\.{4,}")

_introduction_cues = re.compile(r"\b(first|firstly|to begin|initially|let me|let's)\b", re.IGNORECASE | re.ASCII)
_transition_cues = re.compile(r"\b(however|furthermore|additionally|moreover|nevertheless|meanwhile)\b", re.IGNORECASE | re.ASCII)
_conclusion_cues = re.compile(r"\b(in conclusion|to conclude|finally|in summary|overall|therefore)\b", re.IGNORECASE | re.ASCII)

_detail_cues = re.compile(r"\b(explain|describe|elaborate|discuss|analyze|compare|why|how)\b", re.IGNORECASE | re.ASCII)
_brevity_cues = re.compile(r"\b(brief|short|concise|summary|summarize|quick)\b", re.IGNORECASE | re.ASCII)


def _count_syllables(word: str) -> int:
    """Heuristic syllable count: vowel groups minus a trailing silent 'e', at least 1."""
    word = _non_letters.sub("", word.lower())
    if len(word) <= 3:
        return 1
    count = len(_vowel_groups.findall(word)) or 1
    # Silent 'e' adjustment
    if word.endswith("e"):
        count -= 1
    return max(1, count)


def score_coherence(content: str) -> MetricDetail:
    """Sentence structure: capitalization, punctuation, length spread, paragraph sizes."""
    if is_blank(content):
        return MetricDetail(score=0, explanation=EMPTY_RESPONSE)

    sentences = split_sentences(content)
    if not sentences:
        return MetricDetail(score=20, explanation="No complete sentences found")

    score = 100
    issues = []

    capitalized = sum(1 for s in sentences if _capitalized.match(s))
    if capitalized / len(sentences) < 0.8:
        score -= 20
        issues.append("inconsistent capitalization")

    if _excessive_punctuation.search(content):
        score -= 15
        issues.append("excessive punctuation")

    lengths = [len(re.split(r"\s+", s)) for s in sentences]
    mean = sum(lengths) / len(lengths)
    std_dev = math.sqrt(sum((n - mean) ** 2 for n in lengths) / len(lengths))
    if std_dev < 2:
        score -= 10
        issues.append("overly uniform sentence length")
    elif std_dev > 15:
        score -= 10
        issues.append("highly varied sentence length")

    paragraphs = split_paragraphs(content)
    if len(paragraphs) > 1 and not all(50 < len(p) < 2000 for p in paragraphs):
        score -= 10
        issues.append("inconsistent paragraph structure")

    score = max(0, score)
    listed = ", ".join(issues)
    if score >= 85:
        explanation = "Excellent coherence with proper structure and flow"
    elif score >= 70:
        explanation = f"Good coherence with minor issues: {listed}"
    elif score >= 50:
        explanation = f"Moderate coherence. Issues: {listed}"
    else:
        explanation = f"Poor coherence. Issues: {listed}"
    return MetricDetail(score=score, explanation=explanation)


def score_lexical_diversity(content: str) -> MetricDetail:
    """Type-token ratio of words longer than two characters, mapped 0.3..0.8 -> 40..100."""
    if is_blank(content):
        return MetricDetail(score=0, explanation=EMPTY_RESPONSE)

    words = content_words(content)
    if not words:
        return MetricDetail(score=0, explanation="No valid words found")

    unique = len(set(words))
    ratio = unique / len(words)
    score = round_half_up(min(100.0, max(0.0, (ratio - 0.3) / 0.5 * 60 + 40)))

    # Longer texts that keep their diversity
    if len(words) > 100 and ratio > 0.5:
        score = min(100, score + 5)

    percent = round_half_up(ratio * 100)
    if score >= 85:
        explanation = f"Excellent vocabulary diversity ({unique} unique words from {len(words)} total)"
    elif score >= 70:
        explanation = f"Good vocabulary richness with {percent}% unique words"
    elif score >= 50:
        explanation = "Moderate diversity, some repetition detected"
    else:
        explanation = f"Low diversity, high repetition ({percent}% unique)"
    return MetricDetail(score=score, explanation=explanation)


def score_completeness(content: str) -> MetricDetail:
    """Length adequacy, sentence count and introduction/transition/conclusion cues."""
    if is_blank(content):
        return MetricDetail(score=0, explanation=EMPTY_RESPONSE)

    word_count = raw_word_count(content)
    sentence_count = len(split_sentences(content))

    score = 100
    issues = []

    if word_count < 20:
        score -= 40
        issues.append("too brief")
    elif word_count < 50:
        score -= 20
        issues.append("somewhat brief")
    elif word_count > 1000:
        score -= 10
        issues.append("potentially excessive length")

    if sentence_count < 3:
        score -= 20
        issues.append("insufficient detail")

    bonus = 0
    if _introduction_cues.search(content):
        bonus += 5
    if _transition_cues.search(content):
        bonus += 5
    if _conclusion_cues.search(content):
        bonus += 5

    # The structure penalty replaces the bonus, never stacks with it
    if word_count > 100 and bonus == 0:
        score -= 15
        issues.append("lacks clear structure")
    else:
        score = min(100, score + bonus)

    score = max(0, score)
    listed = ", ".join(issues)
    if score >= 85:
        explanation = f"Complete and well-structured response ({word_count} words, {sentence_count} sentences)"
    elif score >= 70:
        explanation = f"Good completeness with {word_count} words"
    elif score >= 50:
        explanation = f"Adequate but {listed}"
    else:
        explanation = f"Incomplete: {listed}"
    return MetricDetail(score=score, explanation=explanation)


def _flesch_reading_ease(num_sentences: int, num_words: int, num_syllables: int) -> float:
    return 206.835 - 1.015 * (num_words / num_sentences) - 84.6 * (num_syllables / num_words)


def score_readability(content: str) -> MetricDetail:
    """Flesch Reading Ease clamped to 0..100."""
    if is_blank(content):
        return MetricDetail(score=0, explanation=EMPTY_RESPONSE)

    sentences = split_sentences(content)
    words = split_words(content)
    if not sentences or not words:
        return MetricDetail(score=20, explanation="Invalid text structure")

    syllables = sum(_count_syllables(w) for w in words)
    avg_words = len(words) / len(sentences)
    flesch = _flesch_reading_ease(len(sentences), len(words), syllables)
    score = round_half_up(max(0.0, min(100.0, flesch)))

    if score >= 80:
        explanation = f"Highly readable text (avg {format_places(avg_words)} words/sentence)"
    elif score >= 60:
        explanation = "Good readability, conversational style"
    elif score >= 50:
        explanation = "Moderate readability, fairly complex"
    elif score >= 30:
        explanation = f"Challenging readability (avg {format_places(avg_words)} words/sentence)"
    else:
        explanation = "Very complex text, may be hard to follow"
    return MetricDetail(score=score, explanation=explanation)


def expected_length(prompt: str) -> Tuple[int, int]:
    """Expected (min, max) response words for a prompt.

    Prompt length sets the baseline; detail cues then widen the range and
    brevity cues narrow it, in that order, each working on the adjusted bounds.
    """
    prompt_words = raw_word_count(prompt)
    expected_min, expected_max = 50, 300
    if prompt_words > 50:
        expected_min, expected_max = 100, 500
    elif prompt_words < 10:
        expected_min, expected_max = 30, 200

    if _detail_cues.search(prompt):
        expected_min = max(expected_min, 80)
        expected_max = max(expected_max, 400)
    if _brevity_cues.search(prompt):
        expected_min = min(expected_min, 30)
        expected_max = min(expected_max, 150)
    return expected_min, expected_max


def score_length_appropriateness(content: str, prompt: str) -> MetricDetail:
    """Response word count against the range the prompt implies."""
    if is_blank(content):
        return MetricDetail(score=0, explanation=EMPTY_RESPONSE)

    words = raw_word_count(content)
    expected_min, expected_max = expected_length(prompt or "")

    if words < expected_min * 0.5:
        return MetricDetail(score=30, explanation=f"Too brief ({words} words). Expected {expected_min}-{expected_max} words")
    if words < expected_min:
        return MetricDetail(score=70, explanation=f"Somewhat brief ({words} words). Could be more detailed")
    if words > expected_max * 2:
        return MetricDetail(score=50, explanation=f"Excessively long ({words} words). Expected {expected_min}-{expected_max} words")
    if words > expected_max:
        return MetricDetail(score=75, explanation=f"Slightly verbose ({words} words)")
    return MetricDetail(score=100, explanation=f"Appropriate length ({words} words) for the given prompt")


def _ignore_prompt(scorer: Callable[[str], MetricDetail]) -> MetricScorer:
    def _score(content: str, prompt: str) -> MetricDetail:
        return scorer(content)
    _score.__name__ = scorer.__name__
    return _score


# Field name -> (weight, scorer); insertion order is the summation order
SCORERS: Dict[str, Tuple[float, MetricScorer]] = {
    "coherence": (0.25, _ignore_prompt(score_coherence)),
    "lexical_diversity": (0.15, _ignore_prompt(score_lexical_diversity)),
    "completeness": (0.25, _ignore_prompt(score_completeness)),
    "readability": (0.20, _ignore_prompt(score_readability)),
    "length_appropriate": (0.15, score_length_appropriateness),
}


def overall_score(scores: Dict[str, int]) -> int:
    """Weighted round of the five sub-scores."""
    total = 0.0
    for name, (weight, _) in SCORERS.items():
        total += scores[name] * weight
    return round_half_up(total)


def calculate_quality_metrics(content: str, prompt: str) -> QualityMetrics:
    """Score a completion on every quality dimension and derive the overall score.

    Pure and deterministic; empty content degrades to zero scores instead of raising.
    """
    content = content or ""
    prompt = prompt or ""
    details = {name: scorer(content, prompt) for name, (_, scorer) in SCORERS.items()}
    overall = overall_score({name: detail.score for name, detail in details.items()})
    return QualityMetrics(overall_score=overall, **details)
