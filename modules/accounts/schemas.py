from datetime import datetime
from pydantic import BaseModel, Field
from typing import Optional


class SignupRequest(BaseModel):
    username: Optional[str] = Field(None, description="Display name, at least 3 characters")
    email: Optional[str] = Field(None, description="Login email, unique")
    password: Optional[str] = Field(None, description="Password, at least 6 characters")


class LoginRequest(BaseModel):
    username: Optional[str] = Field(None, description="Username (takes precedence over email)")
    email: Optional[str] = Field(None, description="Email")
    password: Optional[str] = Field(None, description="Password")


class AccountResponse(BaseModel):
    id: str = Field(..., description="MongoDB Object ID")
    username: str
    email: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"
