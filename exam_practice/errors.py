"""Error taxonomy shared by services and routers.

Services raise these; the application maps them to ``{"error": message}``
responses using ``status_code``.
"""


class PracticeError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PracticeError, ValueError):
    """Malformed or out-of-bounds caller input."""

    status_code = 400


class NotFound(PracticeError):
    """The requested record does not exist (or is not visible to the caller)."""

    status_code = 404


class UpstreamFailure(PracticeError):
    """The test repository or another upstream service could not be used."""

    status_code = 500


class MalformedTestError(UpstreamFailure):
    """A stored test record cannot be graded because a question is malformed."""
