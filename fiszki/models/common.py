from pydantic import BaseModel
from typing import Any, Optional


class ApiErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None


class ApiMessage(BaseModel):
    message: str


class LogoutResponse(BaseModel):
    success: bool
    message: str


class AuthResponse(BaseModel):
    user: Optional[Any] = None
    session: Optional[Any] = None


# OpenAPI documentation for the uniform error body
ERROR_RESPONSES = {
    status_code: {"model": ApiErrorResponse}
    for status_code in (400, 401, 404, 500, 503)
}
