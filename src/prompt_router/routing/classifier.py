"""
Rule-based prompt classifier.

Scores a prompt against the configured keyword lists plus a fixed table of
contextual bonuses and length heuristics, then picks the routing category.
The scorer is deterministic: the same text and RoutingPolicy always produce
the same category, reason and confidence.
"""

import re
from functools import lru_cache
from typing import Dict

import structlog

from prompt_router.models.enums import Category
from prompt_router.models.routing_models import ClassificationResult, KeywordBonus, RoutingPolicy
from prompt_router.monitoring.metrics import classification_total
from prompt_router.routing.prompt_guard import ensure_prompt_text


logger = structlog.get_logger(__name__)

_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")

SHORT_PROMPT_LENGTH = 30
BRIEF_PROMPT_LENGTH = 50
LONG_PROMPT_LENGTH = 100
VERBOSE_PROMPT_LENGTH = 200

FALLBACK_CREATIVE_WORDS = ("tell", "write", "create", "make")

CATEGORY_REASONS: Dict[Category, str] = {
    Category.CODING: "Detected programming/development related content",
    Category.REASONING: "Identified analytical or problem-solving request",
    Category.CREATIVE: "Recognized creative writing or generation task",
    Category.FAST: "Optimized for quick, simple responses",
    Category.DEFAULT: "Routed based on content analysis",
}


def normalize_prompt(prompt: str) -> str:
    """
    Lowercase, replace punctuation with spaces, collapse whitespace, trim.

    Example:
        >>> normalize_prompt("  Fix   THIS bug!! ")
        'fix this bug'
    """
    text = _NON_WORD.sub(" ", prompt.lower())
    return _WHITESPACE.sub(" ", text).strip()


@lru_cache(maxsize=512)
def _word_pattern(words: tuple[str, ...]) -> re.Pattern:
    alternatives = "|".join(re.escape(word) for word in words)
    return re.compile(rf"\b(?:{alternatives})\b", re.IGNORECASE)


def count_whole_word(text: str, keyword: str) -> int:
    """Count case-insensitive occurrences of `keyword` that are not inside a longer word."""
    if not keyword:
        return 0
    return len(_word_pattern((keyword,)).findall(text))


def bonus_applies(bonus: KeywordBonus, text: str) -> bool:
    if bonus.substrings and any(fragment in text for fragment in bonus.substrings):
        return True
    if bonus.words and _word_pattern(bonus.words).search(text):
        return True
    return False


class PromptClassifier:
    """
    Turns prompt text into a ClassificationResult.

    Scoring, per category in the order coding, reasoning, creative, fast:
    1. +1 per whole-word occurrence of each configured keyword
    2. + contextual bonuses from the policy's bonus table
    3. fast +1 below 50 chars; fast +2 below 30 chars, otherwise
       reasoning/creative +1 each above 200 chars

    The strictly highest score wins, earlier categories winning ties. A
    zero winning score falls back to length/wording heuristics.
    """

    def __init__(self, policy: RoutingPolicy):
        self.policy = policy

    def score(self, normalized: str) -> Dict[Category, int]:
        scores: Dict[Category, int] = {category: 0 for category in Category.scored()}

        for category in scores:
            for keyword in self.policy.keywords_for(category):
                scores[category] += count_whole_word(normalized, keyword)

        for bonus in self.policy.contextual_bonuses:
            if bonus.category in scores and bonus_applies(bonus, normalized):
                scores[bonus.category] += bonus.points

        length = len(normalized)
        if length < BRIEF_PROMPT_LENGTH:
            scores[Category.FAST] += 1

        if length < SHORT_PROMPT_LENGTH:
            scores[Category.FAST] += 2
        elif length > VERBOSE_PROMPT_LENGTH:
            scores[Category.REASONING] += 1
            scores[Category.CREATIVE] += 1

        return scores

    @staticmethod
    def fallback_category(normalized: str, has_question: bool) -> Category:
        """Pick a category when no rule produced any score."""
        if len(normalized) < BRIEF_PROMPT_LENGTH:
            return Category.FAST
        if has_question:
            return Category.REASONING
        if _word_pattern(FALLBACK_CREATIVE_WORDS).search(normalized):
            return Category.CREATIVE
        return Category.REASONING

    def confidence(self, normalized: str, category: Category, has_question: bool) -> float:
        """
        Keyword-coverage confidence in [0.1, 1.0].

        Only configured keywords count here; contextual bonuses do not.
        """
        keywords = self.policy.keywords_for(category)
        matches = sum(1 for keyword in keywords if keyword and keyword in normalized)
        value = min(matches / max(len(keywords) * 0.3, 1), 1.0)

        if len(normalized) > LONG_PROMPT_LENGTH:
            value += 0.1
        if has_question:
            value += 0.1

        return min(max(value, 0.1), 1.0)

    def classify(self, prompt: str) -> ClassificationResult:
        """
        Classify a prompt.

        Args:
            prompt: Raw prompt text

        Returns:
            ClassificationResult with category, confidence, reason and normalized text

        Raises:
            PromptValidationError: prompt is not a string or is blank
        """
        ensure_prompt_text(prompt)

        normalized = normalize_prompt(prompt)
        # Question rules read the normalized text like every other rule
        has_question = "?" in normalized

        scores = self.score(normalized)
        best = Category.CODING
        for category, value in scores.items():
            if value > scores[best]:
                best = category

        used_fallback = scores[best] == 0
        if used_fallback:
            best = self.fallback_category(normalized, has_question)

        result = ClassificationResult(
            category=best,
            confidence=self.confidence(normalized, best, has_question),
            reason=CATEGORY_REASONS[best],
            normalized_prompt=normalized,
        )

        classification_total.labels(category=best.value).inc()
        logger.debug(
            "Prompt classified",
            category=best.value,
            confidence=result.confidence,
            scores={category.value: value for category, value in scores.items()},
            used_fallback=used_fallback,
            prompt_length=len(normalized),
        )
        return result
