"""Authentication-related Pydantic schemas."""

from uuid import UUID

from pydantic import BaseModel

from legalaid.db.enums import Role


class TokenPayload(BaseModel):
    """Decoded JWT payload structure."""
    sub: UUID  # user_id
    role: str
    token_version: int


class UserSession(BaseModel):
    """
    Caller identity for authenticated requests.

    Returned by the get_current_session dependency and passed explicitly
    into services that need ownership checks.
    """
    user_id: UUID
    role: Role  # Validated enum
    email: str
    full_name: str
