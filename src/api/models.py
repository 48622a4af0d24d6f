"""Pydantic models for API request/response."""

from pydantic import BaseModel, EmailStr, Field


class SignupRequest(BaseModel):
    """Request model for user registration."""
    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    """Request model for user login.

    email is a plain string: any unknown address, well-formed or not, is
    answered with the same 401 as a wrong password.
    """
    email: str
    password: str


class ForgotPasswordRequest(BaseModel):
    # Plain string, so an unknown address of any shape is a 404
    email: str


class ResetPasswordRequest(BaseModel):
    password: str


class MessageResponse(BaseModel):
    message: str


class TokenResponse(BaseModel):
    """Response model for login."""
    token: str = Field(..., description="Bearer token, valid for one hour")


class ErrorResponse(BaseModel):
    """Body of every non-2xx JSON response."""
    error: str
