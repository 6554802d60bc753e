from fastapi import APIRouter, Depends, status

from taskhub.core.dependencies import get_auth_service, get_current_user
from taskhub.schemas.auth import Message, Token, UserCredentials, UserProfile
from taskhub.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=Message, status_code=status.HTTP_201_CREATED)
async def register(user_in: UserCredentials, auth_service: AuthService = Depends(get_auth_service)):
    await auth_service.register(user_in.email, user_in.password)
    return {"message": "User registered successfully"}


@router.post("/login", response_model=Token)
async def login(credentials: UserCredentials, auth_service: AuthService = Depends(get_auth_service)):
    token = await auth_service.login(credentials.email, credentials.password)
    return {"token": token}


@router.get("/me", response_model=UserProfile)
async def get_current_user_info(current_user: dict = Depends(get_current_user)):
    """Get the profile of the token holder"""
    return UserProfile(id=current_user["id"], email=current_user["email"])
