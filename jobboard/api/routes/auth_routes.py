"""
Authentication Routes

POST /auth/register - Register new user (returns token)
POST /auth/login - Login and get JWT token
GET /auth/me - Get current user info
POST /auth/change-password - Change own password
"""

from fastapi import APIRouter, Depends

from jobboard.core.auth import create_access_token, get_current_user
from jobboard.services.user_service import UserService, get_user_service, public_user, DASHBOARDS
from jobboard.schemas.schemas import (
    RegisterRequest, LoginRequest, ChangePasswordRequest, TokenResponse, MessageResponse
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _token_for(user: dict) -> str:
    return create_access_token(data={"sub": str(user["_id"]), "role": user["role"]})


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(request: RegisterRequest, users: UserService = Depends(get_user_service)):
    """
    Register a new user account.

    The response already carries an access token; no separate login needed.
    """
    user = users.register(
        name=request.name,
        email=request.email,
        password=request.password,
        role=request.role.value,
        profile=request.profile.model_dump() if request.profile else None,
    )
    return TokenResponse(
        message="User registered successfully",
        token=_token_for(user),
        user=public_user(user),
    )


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, users: UserService = Depends(get_user_service)):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    user = users.authenticate(request.email, request.password)
    return TokenResponse(
        message="Login successful",
        token=_token_for(user),
        redirect_to=DASHBOARDS.get(user["role"], "/"),
        user=public_user(user),
    )


@router.get("/me")
async def get_me(user: dict = Depends(get_current_user), users: UserService = Depends(get_user_service)):
    """Get current authenticated user's info."""
    return {"success": True, "user": users.get_user(user["user_id"])}


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    request: ChangePasswordRequest,
    user: dict = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    """Change password; the current password must be supplied."""
    users.change_password(user["user_id"], request.current_password, request.new_password)
    return MessageResponse(message="Password updated successfully")
