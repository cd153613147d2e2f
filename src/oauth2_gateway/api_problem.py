"""
API Problem (RFC 7807) payloads

Structured alternative to raw OAuth2 error bodies. The OAuth2 error fields map
onto the problem fields as:

    error             -> title
    error_description -> detail
    error_uri         -> type
    status code       -> status
"""

from http import HTTPStatus
from typing import Any

from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_PROBLEM_TYPE = "http://www.w3.org/Protocols/rfc2616/rfc2616-sec10.html"
PROBLEM_MEDIA_TYPE = "application/problem+json"


class ApiProblem(BaseModel):
    """Problem detail document."""

    type: str = Field(DEFAULT_PROBLEM_TYPE, description="URI identifying the problem type")
    title: str | None = Field(None, description="Short summary of the problem")
    status: int = Field(500, description="HTTP status code")
    detail: str | None = Field(None, description="Explanation specific to this occurrence")

    @field_validator("type", mode="before")
    @classmethod
    def _default_type(cls, value: Any) -> Any:
        return value or DEFAULT_PROBLEM_TYPE

    @field_validator("status", mode="before")
    @classmethod
    def _valid_status(cls, value: Any) -> int:
        try:
            status = int(value)
        except (TypeError, ValueError):
            return 500
        if status < 100 or status > 599:
            return 500
        return status

    @model_validator(mode="after")
    def _default_title(self) -> "ApiProblem":
        if not self.title:
            try:
                self.title = HTTPStatus(self.status).phrase
            except ValueError:
                self.title = "Unknown"
        return self

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class ApiProblemResponse(JSONResponse):
    """JSON response carrying an ApiProblem with the problem+json media type."""

    media_type = PROBLEM_MEDIA_TYPE

    def __init__(self, problem: ApiProblem, headers: dict[str, str] | None = None):
        self.problem = problem
        super().__init__(content=problem.to_dict(), status_code=problem.status, headers=headers)
