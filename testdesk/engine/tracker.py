"""
Answer Tracker
In-progress responses keyed by question id
"""
from __future__ import annotations


class AnswerTracker:
    """Holds single responses as strings and multiple responses as ordered, duplicate-free lists"""

    def __init__(self) -> None:
        self._answers: dict = {}

    def set_single(self, question_id, option: str) -> None:
        self._answers[question_id] = option

    def toggle_multiple(self, question_id, option: str, selected: bool) -> None:
        current = self._answers.get(question_id)
        chosen = list(current) if isinstance(current, list) else []

        if selected:
            if option not in chosen:
                chosen.append(option)
        elif option in chosen:
            chosen.remove(option)

        self._answers[question_id] = chosen

    def is_selected(self, question_id, option: str) -> bool:
        current = self._answers.get(question_id)
        if isinstance(current, list):
            return option in current
        return current == option

    def has_answer(self, question_id) -> bool:
        current = self._answers.get(question_id)
        if isinstance(current, list):
            return len(current) > 0
        return bool(current)

    def get(self, question_id):
        return self._answers.get(question_id)

    def snapshot(self) -> dict:
        """Copy of the answer map with list responses copied too"""
        return {
            question_id: list(value) if isinstance(value, list) else value
            for question_id, value in self._answers.items()
        }

    def clear(self) -> None:
        self._answers.clear()
