"""
Failures raised by the user resource layer.

Each one is an HTTPException so FastAPI's default handler turns it into
a `{"detail": ...}` response with the right status code.
"""
from typing import Dict, List, Optional

from fastapi import HTTPException
from pydantic import ValidationError


class MalformedInputError(HTTPException):
    """Absent or unparseable body, or an unusable identifier."""

    def __init__(self, detail: str = "Malformed request"):
        super().__init__(status_code=400, detail=detail)


class UserNotFoundError(HTTPException):
    def __init__(self, user_id):
        super().__init__(status_code=404, detail=f"User {user_id} not found")
        self.user_id = user_id


class ValidationFailedError(HTTPException):
    """Schema or business rule violation. `errors` maps wire field names to messages."""

    def __init__(self, errors: Dict[str, List[str]]):
        super().__init__(status_code=422, detail=errors)
        self.errors = errors

    @classmethod
    def from_pydantic(
        cls, exc: ValidationError, extra: Optional[Dict[str, List[str]]] = None
    ) -> "ValidationFailedError":
        errors: Dict[str, List[str]] = {}
        for key, messages in (extra or {}).items():
            errors.setdefault(key, []).extend(messages)
        for error in exc.errors():
            key = ".".join(str(part) for part in error["loc"]) or "body"
            errors.setdefault(key, []).append(error["msg"])
        return cls(errors)
