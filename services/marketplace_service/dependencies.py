"""Request dependencies: the caller's profile and role guards.

Application roles live on ``profiles``, so every guard resolves the
authenticated user to a profile row first.
"""

import uuid
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.marketplace_service.models import KYCStatus, Profile
from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload


async def get_current_profile(
    current_user: Annotated[AuthUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_async_db)],
) -> Profile:
    result = await db.execute(
        select(Profile)
        .where(Profile.id == current_user.profile_id)
        .options(selectinload(Profile.region))
    )
    profile = result.scalar_one_or_none()
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    if not profile.is_active:
        raise HTTPException(status_code=403, detail="Account is deactivated")
    return profile


async def require_admin(
    profile: Annotated[Profile, Depends(get_current_profile)],
) -> Profile:
    """Ensure the caller is an admin of any tier."""
    if not profile.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return profile


async def require_logistics(
    profile: Annotated[Profile, Depends(get_current_profile)],
) -> Profile:
    if not profile.is_logistics:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return profile


async def require_kyc_approved(
    profile: Annotated[Profile, Depends(get_current_profile)],
) -> Profile:
    if profile.kyc_status != KYCStatus.APPROVED:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="KYC not approved"
        )
    return profile


def scope_to_region(query: Select, region_column, profile: Profile) -> Select:
    """Limit an admin listing to the caller's region unless they are a super admin."""
    if profile.is_super_admin:
        return query
    return query.where(region_column == profile.region_id)


def ensure_region_access(profile: Profile, region_id: Optional[uuid.UUID]) -> None:
    """403 unless ``profile`` may act on rows of ``region_id``."""
    if not profile.can_access_region(region_id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
