from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from ..dependencies import get_db, get_current_user
from .. import models
from ..schemas import (
    RegisterRequest,
    LoginRequest,
    AuthResponse,
    DataResponse,
    UserResponse
)
from ..services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["authentication"])

@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    db: Session = Depends(get_db)
):
    """Create a new user account."""
    return AuthService.register_user(db, request)

@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    db: Session = Depends(get_db)
):
    """Authenticate user and return access token."""
    return AuthService.login_user(db, request)


@router.get("/me", response_model=DataResponse[UserResponse])
async def get_current_user_info(
    current_user: models.User = Depends(get_current_user)
):
    """Get current user information."""
    return DataResponse(data=UserResponse.model_validate(current_user))
