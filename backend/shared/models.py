"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base for request/response bodies exchanged with the web client.

    Fields are snake_case in Python and camelCase on the wire; either
    spelling is accepted on input.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AuthenticatedUser(BaseModel):
    """
    Represents an authenticated user in the system.

    This model is populated from JWT claims and made available
    to route handlers via dependency injection.
    """

    id: str = Field(..., description="User ID (UUID from Supabase)")
    email: Optional[EmailStr] = Field(None, description="User's email address")
    email_verified: bool = Field(default=False, description="Whether email is verified")

    last_sign_in: Optional[datetime] = Field(None, description="Last sign-in time")
    role: str = Field(default="user", description="User role")

    # Supabase app_metadata/user_metadata claims
    app_metadata: dict = Field(default_factory=dict)
    user_metadata: dict = Field(default_factory=dict)

    model_config = {
        "frozen": True,
        "extra": "ignore",  # Ignore extra fields from JWT
    }


class OperationResult(BaseModel):
    """
    Discriminated success/error result.

    Components that must not raise across their boundary return this
    (or a subclass with payload fields). Callers check ``success`` before
    reading anything else.
    """

    success: bool
    error: Optional[str] = None
