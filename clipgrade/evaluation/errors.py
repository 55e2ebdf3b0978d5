"""
Typed parse failures raised by the response parser.

Policy rejections are not errors: they produce a zero-score evaluation.
Everything here is fatal to a single parse call and is left to the caller
to log, alert on, or retry upstream.
"""
from typing import List, Optional

SNIPPET_LENGTH = 200


class ParseError(Exception):
    """Base class for evaluation parse failures."""

    reason: str = "unparseable response"

    def __init__(self, reason: Optional[str] = None, raw_response: Optional[str] = None):
        self.reason = reason or self.reason
        self.raw_response = raw_response
        super().__init__(self.reason)

    @property
    def snippet(self) -> str:
        """Leading slice of the raw response, for logs."""
        if not self.raw_response:
            return ""
        return self.raw_response[:SNIPPET_LENGTH]


class IncompleteResponseError(ParseError):
    """One or more core scores are missing from the model output."""

    def __init__(self, missing: List[str], raw_response: Optional[str] = None):
        self.missing = list(missing)
        super().__init__(f"missing essential scores: {', '.join(self.missing)}", raw_response)


class InvalidScoresError(ParseError):
    """A parsed score fell outside [0, 100]."""

    reason = "invalid scores"


class InsufficientScoresError(ParseError):
    """Too few core skill scores to trust the evaluation."""

    reason = "insufficient scores"


class EmptyFeedbackError(ParseError):
    """Extracted feedback is too short to be meaningful."""

    reason = "no meaningful feedback"


class UnparseableResponseError(ParseError):
    """Unexpected failure while parsing; the original exception is chained."""

    reason = "unparseable response"
