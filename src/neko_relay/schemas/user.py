"""User-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Schema for account registration."""

    username: str = Field(..., min_length=1, max_length=64, description="Unique, case-sensitive name")
    password: str = Field(..., max_length=256, description="Raw credential; hashed before storage")


class LoginRequest(BaseModel):
    """Schema for login submissions."""

    username: str = Field(..., max_length=64)
    password: str = Field(..., max_length=256)


class UserResponse(BaseModel):
    """Public view of a user together with the current reward balance."""

    user_id: str = Field(..., description="Stable user identifier")
    username: str
    reward_balance: int = Field(..., ge=0)

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(UserResponse):
    """Response returned after successful login."""

    token: str = Field(..., description="Opaque session token")
    token_type: str = Field(default="bearer", description="Token type (always 'bearer')")
