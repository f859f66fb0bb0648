"""Schemas for regions, profiles, KYC, saved addresses and admin user management."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field
from services.marketplace_service.models import (
    AdminRole,
    BusinessType,
    KYCStatus,
    UserRole,
)

# ============================================================================
# REGION SCHEMAS
# ============================================================================


class RegionSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    code: str


class RegionResponse(RegionSummary):
    description: Optional[str] = None
    is_active: bool
    support_email: Optional[str] = None
    support_phone: Optional[str] = None
    min_order_amount: Decimal
    delivery_fee: Decimal


# ============================================================================
# PROFILE SCHEMAS
# ============================================================================


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    phone: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    role: UserRole
    admin_role: Optional[AdminRole] = None
    region_id: Optional[uuid.UUID] = None
    region: Optional[RegionSummary] = None
    business_name: Optional[str] = None
    business_type: Optional[BusinessType] = None
    gstin: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    kyc_status: KYCStatus
    kyc_submitted_at: Optional[datetime] = None
    kyc_verified_at: Optional[datetime] = None
    kyc_rejection_reason: Optional[str] = None
    vehicle_number: Optional[str] = None
    is_active: bool
    created_at: datetime


class ProfileUpdate(BaseModel):
    """Fields a user may change on their own profile."""

    full_name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    avatar_url: Optional[str] = None
    address_line1: Optional[str] = Field(None, max_length=255)
    address_line2: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)


# ============================================================================
# KYC SCHEMAS
# ============================================================================


class KYCSubmission(BaseModel):
    business_name: str = Field(..., min_length=1, max_length=255)
    business_type: BusinessType
    gstin: Optional[str] = Field(None, max_length=20)
    phone: Optional[str] = Field(None, max_length=50)
    address_line1: str = Field(..., min_length=1, max_length=255)
    address_line2: Optional[str] = Field(None, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    postal_code: str = Field(..., min_length=1, max_length=20)


class KYCDecision(BaseModel):
    status: KYCStatus
    rejection_reason: Optional[str] = None


class KYCQueueItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    business_name: Optional[str] = None
    business_type: Optional[BusinessType] = None
    gstin: Optional[str] = None
    city: Optional[str] = None
    region_id: Optional[uuid.UUID] = None
    kyc_status: KYCStatus
    kyc_submitted_at: Optional[datetime] = None
    kyc_rejection_reason: Optional[str] = None


# ============================================================================
# SAVED ADDRESS SCHEMAS
# ============================================================================


class AddressBase(BaseModel):
    label: str = Field("Home", max_length=100)
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    pincode: str = Field(..., min_length=1, max_length=20)
    phone: Optional[str] = Field(None, max_length=50)
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)


class AddressCreate(AddressBase):
    is_default: bool = False


class AddressUpdate(BaseModel):
    label: Optional[str] = Field(None, max_length=100)
    address: Optional[str] = Field(None, min_length=1)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    pincode: Optional[str] = Field(None, min_length=1, max_length=20)
    phone: Optional[str] = Field(None, max_length=50)
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)
    is_default: Optional[bool] = None


class AddressResponse(AddressBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    is_default: bool
    created_at: datetime
    updated_at: datetime


# ============================================================================
# ADMIN USER SCHEMAS
# ============================================================================


class AdminUserCreate(BaseModel):
    """Accepts the web client's camelCase keys as well as snake_case."""

    model_config = ConfigDict(populate_by_name=True)

    email: EmailStr
    password: str = Field(..., min_length=6)
    full_name: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("full_name", "fullName")
    )
    phone: str = Field(..., min_length=1)
    role: UserRole
    admin_role: Optional[AdminRole] = Field(
        None, validation_alias=AliasChoices("admin_role", "adminRole")
    )
    region_id: Optional[uuid.UUID] = Field(
        None, validation_alias=AliasChoices("region_id", "regionId")
    )


class LogisticsUserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    full_name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    region_id: Optional[uuid.UUID] = None
    vehicle_number: Optional[str] = Field(None, max_length=50)


class CreatedUser(BaseModel):
    id: uuid.UUID
    email: str
    full_name: Optional[str] = None
    role: UserRole


class CreatedUserResponse(BaseModel):
    success: bool = True
    user: CreatedUser


class LogisticsUserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    full_name: Optional[str] = None
    phone: Optional[str] = None
    email: str
    region_id: Optional[uuid.UUID] = None
    vehicle_number: Optional[str] = None


class UserListResponse(BaseModel):
    users: list[ProfileResponse]


class LogisticsUserListResponse(BaseModel):
    users: list[LogisticsUserSummary]
