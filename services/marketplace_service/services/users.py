"""Staff and partner account provisioning.

An account is two writes in two systems: the Supabase auth user, then the
``profiles`` row keyed by its id. When the profile write fails the auth
user is deleted again so no login exists without a profile.
"""

import uuid
from typing import Optional

from fastapi import HTTPException
from libs.common.logging import get_logger
from libs.common.supabase_admin import SupabaseAdminClient, SupabaseAdminError
from services.marketplace_service.models import (
    AdminRole,
    AgentStatus,
    DeliveryAgent,
    KYCStatus,
    Profile,
    UserRole,
)
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

DEFAULT_VEHICLE_TYPE = "bike"


async def provision_user(
    db: AsyncSession,
    supabase: SupabaseAdminClient,
    *,
    email: str,
    password: str,
    full_name: str,
    phone: str,
    role: UserRole,
    region_id: Optional[uuid.UUID],
    admin_role: Optional[AdminRole] = None,
    vehicle_number: Optional[str] = None,
) -> Profile:
    """Create the auth user, then its profile (and delivery agent for logistics).

    Accounts created here skip KYC: they are approved and active at once.
    """
    existing = await db.execute(
        select(Profile.id).where(func.lower(Profile.email) == email.lower())
    )
    if existing.first():
        raise HTTPException(status_code=400, detail="Email already exists")

    try:
        auth_user = await supabase.create_user(
            email,
            password,
            user_metadata={
                "role": role.value,
                "full_name": full_name,
                "phone": phone,
            },
        )
    except SupabaseAdminError as exc:
        raise HTTPException(status_code=400, detail=exc.message)

    user_id = uuid.UUID(str(auth_user["id"]))

    # A signup trigger may already have inserted a bare profile row
    profile = await db.get(Profile, user_id)
    if profile is None:
        profile = Profile(id=user_id, email=email)
        db.add(profile)

    profile.email = email
    profile.full_name = full_name
    profile.phone = phone
    profile.role = role
    profile.admin_role = (
        (admin_role or AdminRole.REGIONAL_ADMIN) if role == UserRole.ADMIN else None
    )
    profile.region_id = region_id
    profile.vehicle_number = vehicle_number
    profile.kyc_status = KYCStatus.APPROVED
    profile.is_active = True

    if role == UserRole.LOGISTICS:
        db.add(
            DeliveryAgent(
                user=profile,
                region_id=region_id,
                vehicle_type=DEFAULT_VEHICLE_TYPE,
                status=AgentStatus.ACTIVE,
            )
        )

    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Profile write failed for new %s user %s", role.value, email)
        try:
            await supabase.delete_user(str(user_id))
        except SupabaseAdminError:
            logger.error("Orphaned auth user %s left behind", user_id)
        raise HTTPException(status_code=500, detail="Failed to create profile")

    logger.info("Provisioned %s user %s (%s)", role.value, user_id, email)
    return profile
