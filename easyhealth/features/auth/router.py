from fastapi import APIRouter, Depends, status
from easyhealth.features.auth.schemas import (
    RegisterRequest,
    LoginRequest,
    AuthResponse,
    ProfileResponse,
)
from easyhealth.features.auth.service import AuthService
from easyhealth.features.auth.dependencies import get_current_user
from easyhealth.features.auth.models import Profile
from easyhealth.features.profiles.service import ProfileService


router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest):
    """
    Register a new profile.

    - **email**: Unique email address (case-insensitive)
    - **password**: Plain password, stored only as a bcrypt hash
    - **full_name**: Display name
    - **role**: patient, doctor, lab_technician, pharmacist or nurse
    - **national_id**: Optional, unique when set
    - **insurance_id**: Optional insurance reference
    """
    profile, token = await AuthService.register(request)

    return AuthResponse(
        user=await ProfileService.to_response(profile),
        token=token,
    )


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest):
    """
    Authenticate and return a 7 day bearer token.

    - **email**: Email address
    - **password**: Password
    """
    profile, token = await AuthService.login(request)

    return AuthResponse(
        user=await ProfileService.to_response(profile),
        token=token,
    )


@router.get("/me", response_model=ProfileResponse)
async def get_current_user_info(current_user: Profile = Depends(get_current_user)):
    """
    Get the authenticated profile.

    Requires authentication.
    """
    return await ProfileService.to_response(current_user)
