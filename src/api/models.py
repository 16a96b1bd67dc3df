"""Pydantic models for API request/response."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class UserResponse(BaseModel):
    """Response model for user."""
    id: str
    provider_uid: str
    name: Optional[str] = None
    email: Optional[str] = None
    image: Optional[str] = None
    provider: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class CallbackResponse(BaseModel):
    """Response model for a processed callback."""
    token: str = Field(..., description="Session token (JWT) for the user")
    user: UserResponse
    created: bool = Field(..., description="True when the user was inserted, False when updated")
