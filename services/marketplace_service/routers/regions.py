"""Public region directory used by registration and checkout."""

from fastapi import APIRouter, Depends
from libs.db.session import get_async_db
from services.marketplace_service.models import Region
from services.marketplace_service.schemas import RegionResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/regions", tags=["regions"])


@router.get("", response_model=list[RegionResponse])
async def list_regions(db: AsyncSession = Depends(get_async_db)):
    """List active regions, alphabetically."""
    result = await db.execute(
        select(Region).where(Region.is_active.is_(True)).order_by(Region.name)
    )
    return result.scalars().all()
