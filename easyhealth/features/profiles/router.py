# Profile Management Feature - Router

from fastapi import APIRouter, Depends
from typing import List
from easyhealth.core.access import Caller, Role
from easyhealth.features.auth.dependencies import get_caller, require_roles
from easyhealth.features.auth.schemas import ProfileResponse, UpdateProfileRequest
from easyhealth.features.profiles.service import ProfileService
from easyhealth.shared.schemas import MessageResponse


router = APIRouter(prefix="/profiles", tags=["Profiles"])


@router.get("", response_model=List[ProfileResponse])
async def list_profiles(caller: Caller = Depends(require_roles(Role.ADMIN))):
    """
    List every profile, newest first.

    Requires admin.
    """
    return await ProfileService.list_profiles()


@router.get("/{profile_id}", response_model=ProfileResponse)
async def get_profile(profile_id: str, caller: Caller = Depends(get_caller)):
    """Get a profile. Self or admin."""
    profile = await ProfileService.get_profile(profile_id, caller)
    return await ProfileService.to_response(profile)


@router.put("/{profile_id}", response_model=ProfileResponse)
async def update_profile(
    profile_id: str,
    request: UpdateProfileRequest,
    caller: Caller = Depends(get_caller),
):
    """
    Update a profile. Self or admin.

    - **full_name**, **phone**, **national_id**, **insurance_id**: Optional
    - **role**: Admin only
    """
    profile = await ProfileService.update_profile(profile_id, request, caller)
    return await ProfileService.to_response(profile)


@router.delete("/{profile_id}", response_model=MessageResponse)
async def delete_profile(profile_id: str, caller: Caller = Depends(require_roles(Role.ADMIN))):
    """Delete a profile. Requires admin. Nothing referencing it is removed."""
    await ProfileService.delete_profile(profile_id, caller)
    return MessageResponse(message="Profile deleted")
