"""
Session Engine Errors
Failure taxonomy for the test-taking flow
"""


class SessionError(Exception):
    """Base class for test session failures"""

    status_code = 400


class QuestionLoadError(SessionError):
    """Question fetch failed; fatal to the session"""

    status_code = 503


class AttemptSaveError(SessionError):
    """Attempt insert failed; the session stays intact so submit can be retried"""

    status_code = 503


class UnansweredQuestion(SessionError):
    """Navigation or manual submit attempted without an answer"""


class UnknownQuestion(SessionError):
    """The question or option is not part of this test"""


class SubmitNotAllowed(SessionError):
    """Manual submit attempted away from the last question or on an empty test"""


class SubmissionInProgress(SessionError):
    """A second submit arrived while the first was still running"""

    status_code = 409


class AlreadySubmitted(SessionError):
    """The session has already stored its attempt"""

    status_code = 409


class SessionClosed(SessionError):
    """The session was closed before the call"""

    status_code = 410
