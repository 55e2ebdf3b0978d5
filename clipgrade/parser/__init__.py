"""
Response parser turning model output into validated evaluations.
"""
from clipgrade.parser.response_parser import (
    ResponseParser,
    get_parser,
    inconsistency_message,
    parse_video_evaluation_response,
)

__all__ = [
    "ResponseParser",
    "get_parser",
    "inconsistency_message",
    "parse_video_evaluation_response",
]
