from datetime import timedelta
from fastapi import APIRouter, Depends, Response, status
from app.config import settings
from app.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    UpdateProfileRequest,
    RegisterAgentRequest,
    AuthResponse,
    UserEnvelope,
    UserResponse,
)
from app.schemas.property import MessageResponse
from app.services.auth_service import (
    register_user,
    authenticate_user,
    update_user_profile,
    register_agent,
)
from app.utils.security import create_access_token
from app.utils.dependencies import get_current_user
from app.utils.exceptions import UnauthorizedError, NotFoundError

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _issue_token(response: Response, user: dict) -> str:
    """Sign a token for `user` and mirror it into the `token` cookie"""
    token = create_access_token(data={"sub": user["id"], "email": user["email"], "role": user["role"]})
    response.set_cookie(
        key="token",
        value=token,
        httponly=True,
        secure=not settings.is_development,
        samesite="lax",
        max_age=int(timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES).total_seconds()),
    )
    return token


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register_endpoint(request: RegisterRequest, response: Response):
    """Register a new user account"""
    user = await register_user(name=request.name, email=request.email, password=request.password)
    token = _issue_token(response, user)
    return AuthResponse(message="User registered successfully", token=token, user=UserResponse(**user))


@router.post("/login", response_model=AuthResponse)
async def login_endpoint(request: LoginRequest, response: Response):
    """Login and get an access token (also set as the `token` cookie)"""
    user = await authenticate_user(email=request.email, password=request.password)

    if not user:
        raise UnauthorizedError("Invalid credentials")

    token = _issue_token(response, user)
    return AuthResponse(message="Login successful", token=token, user=UserResponse(**user))


@router.post("/logout", response_model=MessageResponse)
async def logout_endpoint(response: Response):
    response.delete_cookie("token")
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserEnvelope)
async def get_me(user: dict = Depends(get_current_user)):
    """Get current logged-in user"""
    return UserEnvelope(user=UserResponse(**user))


@router.put("/updateprofile", response_model=UserEnvelope)
async def update_profile_endpoint(
    request: UpdateProfileRequest,
    user: dict = Depends(get_current_user)
):
    updated = await update_user_profile(user["id"], request.dict(exclude_unset=True, exclude_none=True))
    if not updated:
        raise NotFoundError("User")
    return UserEnvelope(message="Profile updated successfully", user=UserResponse(**updated))


@router.post("/register-agent", response_model=UserEnvelope)
async def register_agent_endpoint(
    request: RegisterAgentRequest,
    user: dict = Depends(get_current_user)
):
    """Upgrade the current user to an agent with a profile"""
    updated = await register_agent(user["id"], request.dict(exclude_unset=True))
    if not updated:
        raise NotFoundError("User")
    return UserEnvelope(message="Agent registration successful", user=UserResponse(**updated))
