"""
Test Session Engine
Question loading, answer tracking, countdown, scoring and attempt recording
"""
from testdesk.engine.answer_key import (
    AnswerKeyError,
    MultipleKey,
    SingleKey,
    UndecodableKey,
    decode_answer_key,
    encode_answer_key,
)
from testdesk.engine.errors import (
    AlreadySubmitted,
    AttemptSaveError,
    QuestionLoadError,
    SessionClosed,
    SessionError,
    SubmissionInProgress,
    SubmitNotAllowed,
    UnansweredQuestion,
    UnknownQuestion,
)
from testdesk.engine.scorer import ScoreResult, score_answers

__all__ = [
    'AnswerKeyError',
    'MultipleKey',
    'SingleKey',
    'UndecodableKey',
    'decode_answer_key',
    'encode_answer_key',
    'AlreadySubmitted',
    'AttemptSaveError',
    'QuestionLoadError',
    'SessionClosed',
    'SessionError',
    'SubmissionInProgress',
    'SubmitNotAllowed',
    'UnansweredQuestion',
    'UnknownQuestion',
    'ScoreResult',
    'score_answers',
]
