"""
Response schemas for failed requests.
"""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorBody(BaseModel):
    """The ``error`` member of a failure response.

    Attributes:
        code: The catalog code of the error (e.g. ``CORE-003``).
        message: The resolved, client-safe message.
        details: Either the structured error's context or a field-to-violation
            map for validation failures. Omitted when there is nothing to report.
        error_id: Correlation identifier matching the server-side log entry.

    Example:
        ```json
        {
            "code": "CORE-003",
            "message": "User 42 not found",
            "details": {"userId": 42},
            "errorId": "0b0f8a52-5f0c-4f7c-bb0a-6c1c3a9d1e77"
        }
        ```
    """

    model_config = ConfigDict(frozen=True)

    code: str = Field(..., description="Stable catalog code identifying the error kind")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Structured context or per-field validation messages",
    )
    error_id: Optional[str] = Field(
        default=None,
        serialization_alias="errorId",
        description="Identifier correlating this response with server logs",
    )


class ErrorResponse(BaseModel):
    """The envelope returned to clients for every failed request.

    Only ``success`` and ``error`` are part of the wire format. The transport
    status and the correlation id travel alongside for the boundary and the
    logging collaborator but are excluded from serialization.

    Example:
        ```json
        {
            "success": false,
            "error": {"code": "CORE-002", "message": "Validation failed",
                      "details": {"email": "must be valid"}}
        }
        ```
    """

    model_config = ConfigDict(frozen=True)

    success: Literal[False] = False
    error: ErrorBody
    status_code: int = Field(..., ge=400, le=599, exclude=True)
    correlation_id: str = Field(..., exclude=True)

    def to_payload(self) -> Dict[str, Any]:
        """Returns the wire representation, omitting absent optional members."""
        payload = self.model_dump(by_alias=True)
        error = payload["error"]
        for key in ("details", "errorId"):
            if error.get(key) is None:
                error.pop(key, None)
        return payload
