"""
Pydantic schemas for failure responses.
"""

from errorcore.api.schemas.responses import ErrorBody, ErrorResponse

__all__ = [
    "ErrorBody",
    "ErrorResponse",
]
