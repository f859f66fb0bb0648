"""Saved delivery addresses for the checkout address picker."""

import uuid

from fastapi import APIRouter, Depends, HTTPException
from libs.db.session import get_async_db
from services.marketplace_service.dependencies import get_current_profile
from services.marketplace_service.models import Profile, SavedAddress
from services.marketplace_service.schemas import (
    AddressCreate,
    AddressResponse,
    AddressUpdate,
)
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/addresses", tags=["addresses"])


async def _get_own_address(
    db: AsyncSession, profile: Profile, address_id: uuid.UUID
) -> SavedAddress:
    result = await db.execute(
        select(SavedAddress).where(
            SavedAddress.id == address_id, SavedAddress.user_id == profile.id
        )
    )
    address = result.scalar_one_or_none()
    if not address:
        raise HTTPException(status_code=404, detail="Address not found")
    return address


async def _clear_defaults(db: AsyncSession, user_id: uuid.UUID) -> None:
    # Runs inside the caller's transaction; nothing is committed here.
    await db.execute(
        update(SavedAddress)
        .where(SavedAddress.user_id == user_id, SavedAddress.is_default.is_(True))
        .values(is_default=False)
        .execution_options(synchronize_session="fetch")
    )


@router.get("", response_model=list[AddressResponse])
async def list_addresses(
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_async_db),
):
    """List saved addresses, default first."""
    result = await db.execute(
        select(SavedAddress)
        .where(SavedAddress.user_id == profile.id)
        .order_by(SavedAddress.is_default.desc(), SavedAddress.created_at.desc())
    )
    return result.scalars().all()


@router.post("", response_model=AddressResponse, status_code=201)
async def create_address(
    address_in: AddressCreate,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_async_db),
):
    """Save an address. The first one saved becomes the default."""
    count = await db.scalar(
        select(func.count())
        .select_from(SavedAddress)
        .where(SavedAddress.user_id == profile.id)
    )
    make_default = address_in.is_default or not count
    if make_default:
        await _clear_defaults(db, profile.id)

    address = SavedAddress(
        user_id=profile.id,
        **address_in.model_dump(exclude={"is_default"}),
        is_default=make_default,
    )
    db.add(address)
    await db.commit()
    return address


@router.put("/{address_id}", response_model=AddressResponse)
async def update_address(
    address_id: uuid.UUID,
    address_in: AddressUpdate,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_async_db),
):
    """Update a saved address."""
    address = await _get_own_address(db, profile, address_id)
    changes = address_in.model_dump(exclude_unset=True)

    if changes.pop("is_default", None) and not address.is_default:
        await _clear_defaults(db, profile.id)
        address.is_default = True

    for field, value in changes.items():
        setattr(address, field, value)
    await db.commit()
    return address


@router.post("/{address_id}/default", response_model=AddressResponse)
async def set_default_address(
    address_id: uuid.UUID,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_async_db),
):
    """Make one address the default, unsetting the others in the same transaction."""
    address = await _get_own_address(db, profile, address_id)
    await _clear_defaults(db, profile.id)
    address.is_default = True
    await db.commit()
    return address


@router.delete("/{address_id}", status_code=204)
async def delete_address(
    address_id: uuid.UUID,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_async_db),
):
    """Delete a saved address; the newest remaining one inherits the default."""
    address = await _get_own_address(db, profile, address_id)
    was_default = address.is_default
    await db.delete(address)
    await db.flush()

    if was_default:
        result = await db.execute(
            select(SavedAddress)
            .where(SavedAddress.user_id == profile.id)
            .order_by(SavedAddress.created_at.desc())
            .limit(1)
        )
        successor = result.scalar_one_or_none()
        if successor:
            successor.is_default = True

    await db.commit()
