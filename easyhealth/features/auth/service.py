from typing import Optional, Tuple
from easyhealth.core.access import Role
from easyhealth.core.logging import logger
from easyhealth.core.security import (
    verify_password,
    get_password_hash,
    create_access_token,
)
from easyhealth.features.auth.models import Profile
from easyhealth.features.auth.schemas import RegisterRequest, LoginRequest, normalize_email
from easyhealth.features.catalog.models import Insurance
from easyhealth.shared.exceptions import (
    BadRequestException,
    ConflictException,
    DuplicateUserException,
    ForbiddenException,
    InvalidCredentialsException,
    NotFoundException,
)
from easyhealth.shared.lookups import fetch


class AuthService:
    """Authentication service for handling auth business logic."""

    @staticmethod
    async def register(request: RegisterRequest) -> Tuple[Profile, str]:
        """
        Register a new profile.

        Returns:
            tuple: (profile, access_token)
        """
        if request.role == Role.ADMIN:
            raise ForbiddenException("Administrator accounts cannot be self-registered")

        existing = await Profile.find_one(Profile.email == request.email)
        if existing:
            raise DuplicateUserException("User already exists")

        if request.national_id:
            taken = await Profile.find_one(Profile.national_id == request.national_id)
            if taken:
                raise ConflictException("National ID already registered")

        if request.insurance_id and await fetch(Insurance, request.insurance_id) is None:
            raise NotFoundException("Insurance not found")

        profile = Profile(
            email=request.email,
            password_hash=get_password_hash(request.password),
            full_name=request.full_name,
            role=request.role,
            phone=request.phone,
            national_id=request.national_id or None,
            insurance_id=request.insurance_id or None,
        )
        await profile.insert()

        logger.info(f"Registered {profile.role.value} profile {profile.id}")

        return profile, create_access_token(str(profile.id))

    @staticmethod
    async def login(request: LoginRequest) -> Tuple[Profile, str]:
        """
        Authenticate a profile and return an access token.

        Unknown email and wrong password fail identically.
        """
        email = normalize_email(request.email)
        if not email:
            raise BadRequestException("Email and password are required")

        profile = await Profile.find_one(Profile.email == email)
        if not profile:
            logger.info("Login failed: unknown email")
            raise InvalidCredentialsException()

        if not verify_password(request.password, profile.password_hash):
            logger.info(f"Login failed: password mismatch for profile {profile.id}")
            raise InvalidCredentialsException()

        logger.info(f"Profile {profile.id} logged in")
        return profile, create_access_token(str(profile.id))

    @staticmethod
    async def get_profile_by_id(profile_id: str) -> Optional[Profile]:
        """Get profile by ID."""
        return await fetch(Profile, profile_id)

    @staticmethod
    async def ensure_admin(email: str, password: str, full_name: str) -> Tuple[Profile, bool]:
        """
        Create the bootstrap administrator unless the email already exists.

        Returns:
            tuple: (profile, created)
        """
        email = normalize_email(email)
        existing = await Profile.find_one(Profile.email == email)
        if existing:
            logger.info(f"Profile already exists for {email}; nothing to do")
            return existing, False

        admin = Profile(
            email=email,
            password_hash=get_password_hash(password),
            full_name=full_name,
            role=Role.ADMIN,
        )
        await admin.insert()
        logger.info(f"Created administrator profile {admin.id}")
        return admin, True
