"""
Tests for the quality scorers and the aggregator
"""

import math

import pytest

from app.evaluation.metrics import (
    EMPTY_RESPONSE,
    SCORERS,
    _count_syllables,
    calculate_quality_metrics,
    expected_length,
    overall_score,
    score_coherence,
    score_completeness,
    score_length_appropriateness,
    score_lexical_diversity,
    score_readability,
)
from app.evaluation.schemas import QualityMetrics


RIVER = "The river flows past the old mill."


def _words(n, word="word"):
    return " ".join([word] * n)


def _sentence(n, first="Alpha"):
    return " ".join([first] + ["beta"] * (n - 1)) + "."


class TestCountSyllables:
    @pytest.mark.parametrize(
        "word,expected",
        [
            ("", 1),
            ("the", 1),
            ("make", 1),
            ("reading", 2),
            ("beautiful", 3),
            ("Table.", 1),
            ("rhythm", 1),
            ("queue", 1),
            ("internationalization", 8),
        ],
    )
    def test_heuristic(self, word, expected):
        assert _count_syllables(word) == expected


class TestCoherence:
    def test_empty(self):
        detail = score_coherence("   ")
        assert detail.score == 0
        assert detail.explanation == EMPTY_RESPONSE

    def test_no_sentences(self):
        detail = score_coherence("...!!!")
        assert detail.score == 20
        assert detail.explanation == "No complete sentences found"

    def test_well_formed_text_has_no_issues(self):
        text = (
            "The sun rises early. "
            "Birds begin to sing in the tall green trees. "
            "People walk their dogs along the quiet river path before the busy day starts."
        )
        detail = score_coherence(text)
        assert detail.score == 100
        assert detail.explanation == "Excellent coherence with proper structure and flow"

    def test_uniform_sentences(self):
        assert score_coherence("I like cats. I like dogs. I like birds.").score == 90

    def test_capitalization_and_uniformity_flags_in_order(self):
        detail = score_coherence("the cat sat. the dog ran. A bird flew away quickly today.")
        assert detail.score == 70
        assert detail.explanation == (
            "Good coherence with minor issues: inconsistent capitalization, overly uniform sentence length"
        )

    def test_excessive_punctuation(self):
        detail = score_coherence("This is great!!! It works very well for all of us. Nothing else matters.")
        assert detail.score == 85

    def test_short_paragraphs(self):
        detail = score_coherence("Short one.\n\nAnother short one here.")
        assert detail.score == 80
        assert detail.explanation.endswith("overly uniform sentence length, inconsistent paragraph structure")

    def test_poor_band(self):
        detail = score_coherence("what??? no way!!! ok.... sure\n\nyes")
        assert detail.score == 45
        assert detail.explanation.startswith("Poor coherence. Issues: inconsistent capitalization, excessive punctuation")

    def test_moderate_band(self):
        # Sentence lengths 3, 8, 2: spread stays inside the 2..15 window
        detail = score_coherence("this is fine!!! and it works for all of us here. ok then.")
        assert detail.score == 65
        assert detail.explanation == "Moderate coherence. Issues: inconsistent capitalization, excessive punctuation"

    @pytest.mark.parametrize(
        "lengths,score",
        [
            ((1, 31), 100),  # std_dev exactly 15
            ((1, 32), 90),  # std_dev 15.5
            ((1, 5), 100),  # std_dev exactly 2
            ((2, 5), 90),  # std_dev 1.5
        ],
    )
    def test_sentence_length_spread_thresholds(self, lengths, score):
        text = " ".join(_sentence(n) for n in lengths)
        assert score_coherence(text).score == score

    def test_highly_varied_sentence_length(self):
        text = " ".join([_sentence(1, "alpha"), _sentence(32, "alpha")])
        detail = score_coherence(text)
        assert detail.score == 70
        assert detail.explanation == (
            "Good coherence with minor issues: inconsistent capitalization, highly varied sentence length"
        )


class TestLexicalDiversity:
    def test_empty(self):
        assert score_lexical_diversity("").explanation == EMPTY_RESPONSE

    def test_no_valid_words(self):
        detail = score_lexical_diversity("a an to be")
        assert detail.score == 0
        assert detail.explanation == "No valid words found"

    def test_repetitive_passage_scores_low(self):
        text = " ".join(["alpha bravo charlie delta echo"] * 40)
        detail = score_lexical_diversity(text)
        assert detail.score == 7
        assert detail.explanation.startswith("Low diversity, high repetition")

    def test_all_unique(self):
        detail = score_lexical_diversity(
            "Quantum physics describes matter behaviour using probability amplitudes."
        )
        assert detail.score == 100
        assert detail.explanation == "Excellent vocabulary diversity (8 unique words from 8 total)"

    def test_long_text_bonus(self):
        words = [f"unit{i}" for i in range(72)] + ["unit0"] * 48
        detail = score_lexical_diversity(" ".join(words))
        assert detail.score == 81
        assert detail.explanation == "Good vocabulary richness with 60% unique words"

    def test_no_bonus_at_half_ratio(self):
        words = [f"item{i}" for i in range(60)] * 2
        # (0.5 - 0.3) / 0.5 * 60 + 40 = 64, bonus needs a ratio above 0.5
        detail = score_lexical_diversity(" ".join(words))
        assert detail.score == 64
        assert detail.explanation == "Moderate diversity, some repetition detected"


class TestCompleteness:
    def test_empty(self):
        assert score_completeness("\n").score == 0

    def test_too_brief(self):
        detail = score_completeness("Yes.")
        assert detail.score == 40
        assert detail.explanation == "Incomplete: too brief, insufficient detail"

    def test_somewhat_brief(self):
        text = " ".join(["Cats sleep a lot during the day and night."] * 3 + ["Dogs bark loudly."])
        # 30 words, 4 sentences
        detail = score_completeness(text)
        assert detail.score == 80
        assert detail.explanation == "Good completeness with 30 words"

    def test_adequate_band(self):
        # 30 words in a single unterminated sentence
        detail = score_completeness(_words(30, "cats"))
        assert detail.score == 60
        assert detail.explanation == "Adequate but somewhat brief, insufficient detail"

    def test_long_text_without_structure_is_penalised(self):
        text = " ".join([RIVER] * 15)
        detail = score_completeness(text)
        assert detail.score == 85
        assert detail.explanation == "Complete and well-structured response (105 words, 15 sentences)"

    def test_structure_cue_cancels_penalty(self):
        text = "First, " + " ".join([RIVER] * 15)
        assert score_completeness(text).score == 100

    def test_cues_are_case_insensitive(self):
        text = " ".join([RIVER] * 5) + " MOREOVER it is quiet."
        # 39 words: -20 for brevity, +5 transition cue
        assert score_completeness(text).score == 85

    def test_excessive_length(self):
        text = " ".join([RIVER] * 150)
        detail = score_completeness(text)
        assert detail.score == 75
        assert detail.explanation == "Good completeness with 1050 words"


class TestReadability:
    def test_empty(self):
        assert score_readability("").score == 0

    def test_invalid_structure(self):
        detail = score_readability("!!!")
        assert detail.score == 20
        assert detail.explanation == "Invalid text structure"

    def test_simple_text(self):
        detail = score_readability("The cat sat on the mat.")
        assert detail.score == 100
        assert detail.explanation == "Highly readable text (avg 6.0 words/sentence)"

    def test_complex_text(self):
        detail = score_readability(
            "Internationalization considerations necessitate comprehensive organizational transformation."
        )
        assert detail.score == 0
        assert detail.explanation == "Very complex text, may be hard to follow"

    @pytest.mark.parametrize(
        "words,score,explanation",
        [
            (50, 71, "Good readability, conversational style"),
            (65, 56, "Moderate readability, fairly complex"),
            (80, 41, "Challenging readability (avg 80.0 words/sentence)"),
        ],
    )
    def test_bands_for_one_long_sentence(self, words, score, explanation):
        # One-syllable words: 206.835 - 1.015 * words - 84.6
        detail = score_readability(_words(words, "cat") + ".")
        assert detail.score == score
        assert detail.explanation == explanation


class TestExpectedLength:
    def test_detail_prompt(self):
        assert expected_length("Explain how photosynthesis works in detail") == (80, 400)

    def test_brevity_prompt(self):
        assert expected_length("Give a brief summary of the war") == (30, 150)

    def test_detail_then_brevity(self):
        assert expected_length("Explain this in a short answer") == (30, 150)

    def test_long_prompt(self):
        assert expected_length(_words(60, "topic")) == (100, 500)

    def test_medium_prompt(self):
        assert expected_length(_words(20, "topic")) == (50, 300)


class TestLengthAppropriateness:
    def test_photosynthesis_regression(self):
        detail = score_length_appropriateness(_words(90), "Explain how photosynthesis works in detail")
        assert detail.score == 100
        assert detail.explanation == "Appropriate length (90 words) for the given prompt"

    @pytest.mark.parametrize(
        "words,score,explanation",
        [
            (10, 30, "Too brief (10 words). Expected 30-200 words"),
            (20, 70, "Somewhat brief (20 words). Could be more detailed"),
            (100, 100, "Appropriate length (100 words) for the given prompt"),
            (250, 75, "Slightly verbose (250 words)"),
            (450, 50, "Excessively long (450 words). Expected 30-200 words"),
        ],
    )
    def test_bands(self, words, score, explanation):
        detail = score_length_appropriateness(_words(words), "Tell me about cats")
        assert detail.score == score
        assert detail.explanation == explanation

    def test_empty(self):
        assert score_length_appropriateness("", "Tell me about cats").explanation == EMPTY_RESPONSE


class TestCalculateQualityMetrics:
    def test_empty_content(self):
        metrics = calculate_quality_metrics("", "anything")
        assert metrics.overall_score == 0
        for name in SCORERS:
            detail = getattr(metrics, name)
            assert detail.score == 0
            assert detail.explanation == EMPTY_RESPONSE

    def test_known_scores(self):
        metrics = calculate_quality_metrics("The cat sat on the mat.", "Tell me about cats")
        assert metrics.coherence.score == 90
        assert metrics.lexical_diversity.score == 100
        assert metrics.completeness.score == 40
        assert metrics.readability.score == 100
        assert metrics.length_appropriate.score == 30
        assert metrics.overall_score == 72

    @pytest.mark.parametrize(
        "content",
        [
            "The cat sat on the mat.",
            "what??? no way!!! ok.... sure",
            " ".join([RIVER] * 40),
            "First, photosynthesis turns light into energy. However, it needs water. In summary, sugar forms.",
            "no punctuation at all just words flowing on and on",
        ],
    )
    def test_overall_is_weighted_round(self, content):
        metrics = calculate_quality_metrics(content, "Explain the topic")
        scores = [
            metrics.coherence.score,
            metrics.lexical_diversity.score,
            metrics.completeness.score,
            metrics.readability.score,
            metrics.length_appropriate.score,
        ]
        for score in scores:
            assert isinstance(score, int)
            assert 0 <= score <= 100
        weighted = scores[0] * 0.25 + scores[1] * 0.15 + scores[2] * 0.25 + scores[3] * 0.20 + scores[4] * 0.15
        assert metrics.overall_score == math.floor(weighted + 0.5)

    def test_overall_score_helper_rounds_half_up(self):
        # 0.25*50 + 0.15*50 + 0.25*50 + 0.20*50 + 0.15*51 = 50.15
        scores = dict(coherence=50, lexical_diversity=50, completeness=50, readability=50, length_appropriate=51)
        assert overall_score(scores) == 50
        scores = dict(coherence=51, lexical_diversity=50, completeness=51, readability=50, length_appropriate=50)
        # 50.5 rounds up
        assert overall_score(scores) == 51

    def test_deterministic(self):
        text = "Plants grow. They need light. Water helps too."
        assert calculate_quality_metrics(text, "why") == calculate_quality_metrics(text, "why")

    def test_serializes_with_camel_case_keys(self):
        dumped = calculate_quality_metrics("Hello there.", "Hi").model_dump(by_alias=True)
        assert set(dumped) == {
            "coherence", "lexicalDiversity", "completeness", "readability", "lengthAppropriate", "overallScore",
        }

    def test_failed_report(self):
        failed = QualityMetrics.failed()
        assert failed.overall_score == 0
        assert failed.generation_failed
        assert failed.readability.explanation == "Generation failed"
        assert not calculate_quality_metrics("", "x").generation_failed
