from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import Optional
from ..enums import UserRole

class RegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6)

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    role: UserRole
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

class AuthPayload(BaseModel):
    user: UserResponse
    token: str
    token_type: str = "bearer"

class AuthResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: AuthPayload
