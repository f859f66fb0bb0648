"""Account models: regions, profiles, saved addresses, delivery agents."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.marketplace_service.models.enums import (
    AdminRole,
    AgentStatus,
    BusinessType,
    KYCStatus,
    UserRole,
    enum_values,
)
from sqlalchemy import Boolean, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import (
    Float,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    Uuid,
    false,
    text,
    true,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

# ============================================================================
# REGIONS
# ============================================================================


class Region(Base):
    """Service area; the tenancy key for profiles, products and orders."""

    __tablename__ = "regions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, server_default=true())

    support_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    support_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    min_order_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=0, server_default="0"
    )
    delivery_fee: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=0, server_default="0"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    def __repr__(self):
        return f"<Region {self.code}>"


# ============================================================================
# PROFILES
# ============================================================================


class Profile(Base):
    """A customer, admin or logistics partner. ``id`` is the Supabase auth uid."""

    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    full_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    avatar_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    role: Mapped[UserRole] = mapped_column(
        SAEnum(UserRole, values_callable=enum_values, name="user_role_enum"),
        default=UserRole.USER,
        server_default="user",
    )
    admin_role: Mapped[Optional[AdminRole]] = mapped_column(
        SAEnum(AdminRole, values_callable=enum_values, name="admin_role_enum"),
        nullable=True,
    )
    region_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("regions.id", ondelete="SET NULL"), nullable=True, index=True
    )

    # Business details (captured during KYC)
    business_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    business_type: Mapped[Optional[BusinessType]] = mapped_column(
        SAEnum(BusinessType, values_callable=enum_values, name="business_type_enum"),
        nullable=True,
    )
    gstin: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    address_line1: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    address_line2: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    postal_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    # KYC
    kyc_status: Mapped[KYCStatus] = mapped_column(
        SAEnum(KYCStatus, values_callable=enum_values, name="kyc_status_enum"),
        default=KYCStatus.PENDING,
        server_default="pending",
        index=True,
    )
    kyc_submitted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    kyc_verified_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    kyc_verified_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    kyc_rejection_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Logistics partners
    vehicle_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, server_default=true())
    last_login_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    __table_args__ = (Index("ix_profiles_role_region", "role", "region_id"),)

    region = relationship("Region")
    addresses = relationship(
        "SavedAddress", back_populates="user", cascade="all, delete-orphan"
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_logistics(self) -> bool:
        return self.role == UserRole.LOGISTICS

    @property
    def is_super_admin(self) -> bool:
        return self.is_admin and self.admin_role == AdminRole.SUPER_ADMIN

    def can_access_region(self, region_id: Optional[uuid.UUID]) -> bool:
        """Super admins see every region; everyone else only their own."""
        if self.is_super_admin:
            return True
        return self.region_id is not None and self.region_id == region_id

    def __repr__(self):
        return f"<Profile {self.email} role={self.role}>"


# ============================================================================
# SAVED ADDRESSES
# ============================================================================


class SavedAddress(Base):
    """Reusable delivery address. At most one default per user."""

    __tablename__ = "saved_addresses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    label: Mapped[str] = mapped_column(String(100), nullable=False, default="Home")
    address: Mapped[str] = mapped_column(Text, nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    state: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    pincode: Mapped[str] = mapped_column(String(20), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    lat: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    lng: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    is_default: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false()
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    __table_args__ = (
        Index(
            "uq_saved_addresses_one_default",
            "user_id",
            unique=True,
            postgresql_where=text("is_default"),
            sqlite_where=text("is_default"),
        ),
    )

    user = relationship("Profile", back_populates="addresses")

    def __repr__(self):
        return f"<SavedAddress {self.label} default={self.is_default}>"


# ============================================================================
# DELIVERY AGENTS
# ============================================================================


class DeliveryAgent(Base):
    """Operational record for a logistics partner."""

    __tablename__ = "delivery_agents"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True, index=True
    )
    region_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("regions.id", ondelete="SET NULL"), nullable=True
    )
    vehicle_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    status: Mapped[AgentStatus] = mapped_column(
        SAEnum(AgentStatus, values_callable=enum_values, name="agent_status_enum"),
        default=AgentStatus.ACTIVE,
        server_default="active",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    user = relationship("Profile")

    def __repr__(self):
        return f"<DeliveryAgent user={self.user_id} status={self.status}>"
