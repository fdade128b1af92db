"""Response envelope shared by every endpoint."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """`{success, data?, message?, errors?}` wrapper."""
    success: bool = True
    data: T | None = None
    message: str | None = None
    errors: list[str] | None = None


def fail(message: str, errors: list[str] | None = None) -> dict[str, Any]:
    """Build a failure envelope."""
    body: dict[str, Any] = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    return body
