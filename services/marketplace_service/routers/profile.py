"""Customer self-service: own profile and KYC submission."""

from fastapi import APIRouter, Depends, HTTPException
from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.marketplace_service.dependencies import get_current_profile
from services.marketplace_service.models import KYCStatus, Profile
from services.marketplace_service.schemas import (
    KYCSubmission,
    ProfileResponse,
    ProfileUpdate,
)
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["profile"])
logger = get_logger(__name__)


# ============================================================================
# PROFILE
# ============================================================================


@router.get("/profile", response_model=ProfileResponse)
async def get_my_profile(profile: Profile = Depends(get_current_profile)):
    """Get the caller's profile."""
    return profile


@router.patch("/profile", response_model=ProfileResponse)
async def update_my_profile(
    profile_in: ProfileUpdate,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_async_db),
):
    """Update contact and address fields on the caller's profile."""
    for field, value in profile_in.model_dump(exclude_unset=True).items():
        setattr(profile, field, value)
    await db.commit()
    return profile


# ============================================================================
# KYC
# ============================================================================


@router.post("/kyc", response_model=ProfileResponse)
async def submit_kyc(
    kyc_in: KYCSubmission,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_async_db),
):
    """Submit (or resubmit after rejection) business details for review."""
    if profile.kyc_status == KYCStatus.APPROVED:
        raise HTTPException(status_code=400, detail="KYC already approved")

    for field, value in kyc_in.model_dump(exclude_none=True).items():
        setattr(profile, field, value)
    profile.kyc_status = KYCStatus.PENDING
    profile.kyc_submitted_at = utc_now()
    profile.kyc_rejection_reason = None
    await db.commit()

    logger.info("KYC submitted by %s (%s)", profile.id, profile.business_name)
    return profile
