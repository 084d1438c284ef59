"""Authentication routes."""
from fastapi import APIRouter, Depends, HTTPException, status

from studyqa.core.deps import get_auth_service
from studyqa.schemas import LoginRequest, RegisterRequest, UserPublic
from studyqa.services.auth_service import AuthService


router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/register", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
def register(request: RegisterRequest, auth: AuthService = Depends(get_auth_service)):
    """
    Register a new user.

    - Username and email must both be unused
    - Password is stored as a bcrypt hash and never returned
    """
    user = auth.register(
        username=request.username,
        email=request.email,
        password=request.password
    )
    return UserPublic.model_validate(user)


@router.post("/login", response_model=UserPublic)
def login(request: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    """Check username and password and return the user."""
    if not request.username or not request.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username and password are required"
        )

    user = auth.authenticate(request.username, request.password)
    return UserPublic.model_validate(user)
