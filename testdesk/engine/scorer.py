"""
Scorer
All-or-nothing grading of an answer map against answer keys
"""
from __future__ import annotations

import math
from dataclasses import dataclass


def round_half_up(value) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class ScoreResult:
    """Totals produced by ``score_answers``"""

    correct_answers: int
    total_questions: int
    earned_points: int
    total_points: int
    percentage: float

    @property
    def rounded_percentage(self) -> int:
        """Percentage rounded half up, as shown to students"""
        return round_half_up(self.percentage)


def is_correct(question, response) -> bool:
    if response is None:
        return False
    return question.answer_key.matches(response)


def score_answers(questions, answers) -> ScoreResult:
    """
    Score an answer map

    Args:
        questions: ordered LoadedQuestion sequence
        answers: question id -> response (string or list of strings)

    Every question counts toward the total, answered or not. A question
    earns its full points or nothing.
    """
    correct = 0
    earned = 0
    total = 0

    for question in questions:
        points = question.points or 1
        total += points
        if is_correct(question, answers.get(question.id)):
            correct += 1
            earned += points

    percentage = (earned / total) * 100 if total > 0 else 0.0

    return ScoreResult(
        correct_answers=correct,
        total_questions=len(questions),
        earned_points=earned,
        total_points=total,
        percentage=percentage,
    )
