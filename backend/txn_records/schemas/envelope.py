"""Response Envelope: the {status, result} wrapper carried by every response.

Invariants:
    - status.code mirrors the HTTP status code
    - result is omitted from the JSON body when None (routes set
      response_model_exclude_none=True)
"""

from typing import Generic, TypeVar

from pydantic import BaseModel

SUCCESS_MESSAGE = "Success"

T = TypeVar("T")


class ResponseStatus(BaseModel):
    code: int
    message: str


class CommonResponse(BaseModel, Generic[T]):
    """Uniform response body for success and error paths."""
    status: ResponseStatus
    result: T | None = None

    @classmethod
    def success(
        cls, result: T | None = None, message: str = SUCCESS_MESSAGE, code: int = 200,
    ) -> "CommonResponse[T]":
        return cls(status=ResponseStatus(code=code, message=message), result=result)
