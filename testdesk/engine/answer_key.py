"""
Answer Keys
Tagged answer-key representation and decoding of stored keys.

A key is one of:

    SingleKey     exactly one correct option string
    MultipleKey   a set of correct option strings
    UndecodableKey a stored value that could not be decoded; matches nothing

Keys are normalized once when a test is authored (``encode_answer_key``).
``decode_answer_key`` still accepts the legacy textual encoding of multiple
keys and degrades instead of failing when a row is malformed.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

SINGLE = 'single'
MULTIPLE = 'multiple'


class AnswerKeyError(ValueError):
    """Raised when an answer key cannot be built for a question kind"""


@dataclass(frozen=True)
class SingleKey:
    option: str

    def matches(self, response) -> bool:
        return isinstance(response, str) and response == self.option

    def to_storage(self):
        return self.option


@dataclass(frozen=True)
class MultipleKey:
    options: frozenset

    def matches(self, response) -> bool:
        if not isinstance(response, (list, tuple, set, frozenset)):
            return False
        submitted = list(response)
        return len(submitted) == len(self.options) and all(
            answer in self.options for answer in submitted
        )

    def to_storage(self):
        return sorted(self.options)


@dataclass(frozen=True)
class UndecodableKey:
    raw: object

    def matches(self, response) -> bool:
        return False

    def to_storage(self):
        return self.raw


def encode_answer_key(kind, value, options=None):
    """
    Build a validated key from authoring input

    Args:
        kind: 'single' or 'multiple'
        value: option string, or iterable of option strings
        options: when given, every key value must be one of these

    Returns:
        SingleKey or MultipleKey
    """
    if kind == SINGLE:
        if not isinstance(value, str) or not value:
            raise AnswerKeyError('Choose the correct answer')
        key = SingleKey(value)
        chosen = {value}
    elif kind == MULTIPLE:
        if isinstance(value, str) or not value:
            raise AnswerKeyError('Choose at least one correct answer')
        values = [str(v) for v in value]
        key = MultipleKey(frozenset(values))
        chosen = set(values)
    else:
        raise AnswerKeyError(f'Unknown question type: {kind}')

    if options is not None and not chosen.issubset(set(options)):
        raise AnswerKeyError('Correct answers must be among the options')
    return key


def decode_answer_key(kind, stored, question_id=None):
    """
    Decode a stored key without failing.

    Multiple keys may be stored as a list or as the JSON text of one.
    Anything else is surfaced as an UndecodableKey and logged.
    """
    if kind == MULTIPLE:
        value = stored
        if isinstance(stored, str):
            try:
                value = json.loads(stored)
            except ValueError:
                logger.warning(
                    "Could not decode answer key for question %s: %r",
                    question_id, stored,
                )
                return UndecodableKey(stored)
        if isinstance(value, (list, tuple, set)) and all(isinstance(v, str) for v in value):
            return MultipleKey(frozenset(value))
        logger.warning(
            "Answer key for question %s is not a list of options: %r",
            question_id, stored,
        )
        return UndecodableKey(stored)

    if isinstance(stored, str):
        return SingleKey(stored)
    logger.warning(
        "Answer key for single question %s is not an option string: %r",
        question_id, stored,
    )
    return UndecodableKey(stored)
