"""Admin KYC review queue."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.marketplace_service.dependencies import (
    ensure_region_access,
    require_admin,
    scope_to_region,
)
from services.marketplace_service.models import KYCStatus, Profile, UserRole
from services.marketplace_service.schemas import KYCDecision, KYCQueueItem
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/admin/kyc", tags=["admin-kyc"])
logger = get_logger(__name__)

DECISION_STATUSES = (KYCStatus.APPROVED, KYCStatus.REJECTED)


@router.get("", response_model=list[KYCQueueItem])
async def list_kyc_submissions(
    status: Optional[KYCStatus] = Query(KYCStatus.PENDING),
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Customer KYC submissions in the admin's region, oldest first."""
    query = select(Profile).where(Profile.role == UserRole.USER)
    if status:
        query = query.where(Profile.kyc_status == status)
    query = scope_to_region(query, Profile.region_id, admin).order_by(
        Profile.kyc_submitted_at.asc(), Profile.created_at.asc()
    )
    result = await db.execute(query)
    return result.scalars().all()


@router.patch("/{profile_id}", response_model=KYCQueueItem)
async def review_kyc(
    profile_id: uuid.UUID,
    decision: KYCDecision,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Approve a submission, or reject it with a reason."""
    if decision.status not in DECISION_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid status")

    reason = decision.rejection_reason
    if decision.status == KYCStatus.REJECTED and not (reason and reason.strip()):
        raise HTTPException(status_code=400, detail="Rejection reason is required")

    profile = await db.get(Profile, profile_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    ensure_region_access(admin, profile.region_id)

    profile.kyc_status = decision.status
    profile.kyc_verified_at = utc_now()
    profile.kyc_verified_by = admin.id
    # Stored verbatim; approval clears any earlier reason
    profile.kyc_rejection_reason = (
        reason if decision.status == KYCStatus.REJECTED else None
    )
    await db.commit()

    logger.info(
        "KYC for %s set to %s by admin %s",
        profile.id,
        decision.status.value,
        admin.id,
    )
    return profile
