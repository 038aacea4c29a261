"""Authentication endpoints: signup, login and the current user."""

from fastapi import APIRouter, Depends

from trekhub.core.dependencies import get_current_user_id, get_user_service
from trekhub.core.jwt import create_access_token
from trekhub.schemas.user import UserCreate, UserRead, LoginRequest, Token
from trekhub.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=Token)
def signup(payload: UserCreate, service: UserService = Depends(get_user_service)):
    """Register a user and log them in."""
    user = service.register(payload.name, payload.email, payload.password)
    return Token(token=create_access_token(user.id))


@router.post("/login", response_model=Token)
def login(payload: LoginRequest, service: UserService = Depends(get_user_service)):
    user = service.authenticate(payload.email, payload.password)
    return Token(token=create_access_token(user.id))


@router.get("/me", response_model=UserRead)
def get_current_user(
    user_id: int = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service),
):
    """Return the authenticated user (never the password hash)."""
    return UserRead.model_validate(service.get_user(user_id))
