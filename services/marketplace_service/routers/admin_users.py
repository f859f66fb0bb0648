"""Admin user management: listings and account provisioning."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from libs.common.supabase_admin import SupabaseAdminClient, get_supabase_admin
from libs.db.session import get_async_db
from services.marketplace_service.dependencies import require_admin, scope_to_region
from services.marketplace_service.models import (
    KYCStatus,
    Profile,
    Region,
    UserRole,
)
from services.marketplace_service.schemas import (
    AdminUserCreate,
    CreatedUser,
    CreatedUserResponse,
    LogisticsUserCreate,
    LogisticsUserListResponse,
    UserListResponse,
)
from services.marketplace_service.services.users import provision_user
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

router = APIRouter(prefix="/admin", tags=["admin-users"])


async def _target_region(
    db: AsyncSession, admin: Profile, requested: Optional[uuid.UUID]
) -> Optional[uuid.UUID]:
    """Super admins place users anywhere; regional admins only in their region."""
    if not admin.is_super_admin:
        return admin.region_id
    if requested is not None and await db.get(Region, requested) is None:
        raise HTTPException(status_code=400, detail="Region not found")
    return requested


def _created(profile: Profile) -> CreatedUserResponse:
    return CreatedUserResponse(
        user=CreatedUser(
            id=profile.id,
            email=profile.email,
            full_name=profile.full_name,
            role=profile.role,
        )
    )


# ============================================================================
# USERS
# ============================================================================


@router.get("/users", response_model=UserListResponse)
async def list_users(
    role: Optional[UserRole] = Query(None),
    kyc_status: Optional[KYCStatus] = Query(None),
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """List users in the admin's region (everyone for super admins)."""
    query = select(Profile).options(selectinload(Profile.region))
    if role:
        query = query.where(Profile.role == role)
    if kyc_status:
        query = query.where(Profile.kyc_status == kyc_status)
    query = scope_to_region(query, Profile.region_id, admin)

    result = await db.execute(query.order_by(Profile.created_at.desc()))
    return UserListResponse(users=result.scalars().all())


@router.post("/users", response_model=CreatedUserResponse, status_code=201)
async def create_user(
    user_in: AdminUserCreate,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
    supabase: SupabaseAdminClient = Depends(get_supabase_admin),
):
    """Create a customer, admin or logistics account with KYC pre-approved."""
    if user_in.role == UserRole.ADMIN and not admin.is_super_admin:
        raise HTTPException(
            status_code=403, detail="Only Super Admins can create admin accounts"
        )

    region_id = await _target_region(db, admin, user_in.region_id)
    if region_id is None:
        raise HTTPException(status_code=400, detail="Missing required fields")

    profile = await provision_user(
        db,
        supabase,
        email=user_in.email,
        password=user_in.password,
        full_name=user_in.full_name,
        phone=user_in.phone,
        role=user_in.role,
        admin_role=user_in.admin_role,
        region_id=region_id,
    )
    return _created(profile)


# ============================================================================
# LOGISTICS PARTNERS
# ============================================================================


@router.get("/logistics-users", response_model=LogisticsUserListResponse)
async def list_logistics_users(
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Logistics partners available for assignment, by name."""
    query = scope_to_region(
        select(Profile).where(
            Profile.role == UserRole.LOGISTICS, Profile.is_active.is_(True)
        ),
        Profile.region_id,
        admin,
    )
    result = await db.execute(query.order_by(Profile.full_name))
    return LogisticsUserListResponse(users=result.scalars().all())


@router.post("/logistics-users", response_model=CreatedUserResponse, status_code=201)
async def create_logistics_user(
    user_in: LogisticsUserCreate,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
    supabase: SupabaseAdminClient = Depends(get_supabase_admin),
):
    """Create a logistics partner account."""
    profile = await provision_user(
        db,
        supabase,
        email=user_in.email,
        password=user_in.password,
        full_name=user_in.full_name,
        phone=user_in.phone,
        role=UserRole.LOGISTICS,
        region_id=await _target_region(db, admin, user_in.region_id),
        vehicle_number=user_in.vehicle_number,
    )
    return _created(profile)
