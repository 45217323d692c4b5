"""Answer scale and the pure aggregation helpers built on it.

Answers are stored as ``{"1": "agree", "2": "neutral", ...}``. Anything that
is not one of the five labels (missing key, unknown label) contributes to
neither numerator nor denominator of an average.
"""

from __future__ import annotations

import enum
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

QUESTION_COUNT = 50
QUESTION_KEYS: tuple[str, ...] = tuple(str(number) for number in range(1, QUESTION_COUNT + 1))

AnswerMap = Mapping[str, str]


class Answer(str, enum.Enum):
    STRONGLY_DISAGREE = "strongly_disagree"
    DISAGREE = "disagree"
    NEUTRAL = "neutral"
    AGREE = "agree"
    STRONGLY_AGREE = "strongly_agree"

    @property
    def score(self) -> int:
        return ANSWER_SCORES[self.value]


ANSWER_SCORES: dict[str, int] = {
    "strongly_disagree": 1,
    "disagree": 2,
    "neutral": 3,
    "agree": 4,
    "strongly_agree": 5,
}


@dataclass(frozen=True, slots=True)
class Section:
    letter: str
    title: str
    first: int
    last: int

    @property
    def questions(self) -> range:
        return range(self.first, self.last + 1)


SECTIONS: tuple[Section, ...] = (
    Section("A", "Leadership & Vision", 1, 10),
    Section("B", "Employee Wellbeing & Happiness", 11, 20),
    Section("C", "Culture & Communication", 21, 30),
    Section("D", "Growth & Recognition", 31, 40),
    Section("E", "Inclusion & Trust", 41, 50),
)

_SECTIONS_BY_LETTER = {section.letter: section for section in SECTIONS}

# Composite indices, as unions of sections
SUCCESS_QUESTIONS: tuple[int, ...] = (
    *_SECTIONS_BY_LETTER["A"].questions,
    *_SECTIONS_BY_LETTER["D"].questions,
)
PRIDE_QUESTIONS: tuple[int, ...] = (
    *_SECTIONS_BY_LETTER["C"].questions,
    *_SECTIONS_BY_LETTER["E"].questions,
)
HAPPINESS_QUESTIONS: tuple[int, ...] = tuple(_SECTIONS_BY_LETTER["B"].questions)
ALL_QUESTIONS: tuple[int, ...] = tuple(range(1, QUESTION_COUNT + 1))


def score_answer(label: object) -> int | None:
    """Numeric value of an answer label, or None when it does not score."""
    if not isinstance(label, str):
        return None
    return ANSWER_SCORES.get(label)


def pooled_average(answer_maps: Iterable[AnswerMap], questions: Sequence[int]) -> float:
    """Mean score over ``questions`` pooled across every answer map.

    Returns 0.0 when nothing scored.
    """
    total = 0
    count = 0
    for answers in answer_maps:
        for number in questions:
            value = score_answer(answers.get(str(number)))
            if value is not None:
                total += value
                count += 1
    return total / count if count else 0.0


def average_of_all(answer_maps: Iterable[AnswerMap]) -> float:
    """Mean over every scored answer regardless of question number."""
    total = 0
    count = 0
    for answers in answer_maps:
        for label in answers.values():
            value = score_answer(label)
            if value is not None:
                total += value
                count += 1
    return total / count if count else 0.0


def section_averages(answer_maps: Iterable[AnswerMap]) -> dict[str, float]:
    """Per-section means keyed by section letter."""
    maps = list(answer_maps)
    return {section.letter: pooled_average(maps, section.questions) for section in SECTIONS}


def wellbeing_indices(answer_maps: Iterable[AnswerMap]) -> dict[str, float]:
    maps = list(answer_maps)
    return {
        "success_score": pooled_average(maps, SUCCESS_QUESTIONS),
        "pride_index": pooled_average(maps, PRIDE_QUESTIONS),
        "happiness_level": pooled_average(maps, HAPPINESS_QUESTIONS),
        "overall_satisfaction": pooled_average(maps, ALL_QUESTIONS),
    }


def tally(values: Iterable[str | None]) -> list[tuple[str, int]]:
    """Count occurrences of each non-empty value, in first-seen order."""
    counts = Counter(value for value in values if value)
    return list(counts.items())
