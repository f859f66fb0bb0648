"""Shared helpers for marketplace tests.

The engine, session and HTTP client fixtures live in the root conftest;
this module adds authentication overrides, a Supabase admin double and a
few ready-made accounts.
"""

import uuid
from contextlib import contextmanager
from typing import Optional

import pytest
import pytest_asyncio
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.common.supabase_admin import SupabaseAdminError, get_supabase_admin
from services.marketplace_service.app.main import app
from tests.factories import ProfileFactory, RegionFactory

# ---------------------------------------------------------------------------
# Auth helpers
# ---------------------------------------------------------------------------


def make_auth_user(profile) -> AuthUser:
    return AuthUser(sub=str(profile.id), email=profile.email)


@contextmanager
def override_auth(app_instance, user: AuthUser):
    """Temporarily authenticate every request as ``user``."""
    previous = app_instance.dependency_overrides.get(get_current_user)
    app_instance.dependency_overrides[get_current_user] = lambda: user
    try:
        yield
    finally:
        if previous is None:
            app_instance.dependency_overrides.pop(get_current_user, None)
        else:
            app_instance.dependency_overrides[get_current_user] = previous


@pytest.fixture
def login_as():
    """Return a callable that makes later requests run as the given profile."""

    def _login(profile) -> AuthUser:
        user = make_auth_user(profile)
        app.dependency_overrides[get_current_user] = lambda: user
        return user

    yield _login
    app.dependency_overrides.pop(get_current_user, None)


# ---------------------------------------------------------------------------
# Supabase admin double
# ---------------------------------------------------------------------------


class FakeSupabaseAdmin:
    """Records admin calls instead of talking to Supabase."""

    def __init__(self):
        self.created: list[dict] = []
        self.deleted: list[str] = []
        self.create_error: Optional[str] = None

    async def create_user(self, email, password, user_metadata=None):
        if self.create_error:
            raise SupabaseAdminError(self.create_error, 422)
        user = {
            "id": str(uuid.uuid4()),
            "email": email,
            "user_metadata": user_metadata or {},
        }
        self.created.append(user)
        return user

    async def delete_user(self, user_id):
        self.deleted.append(user_id)


@pytest.fixture
def fake_supabase():
    fake = FakeSupabaseAdmin()
    app.dependency_overrides[get_supabase_admin] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_supabase_admin, None)


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def region(db_session):
    region = RegionFactory.create(name="Pune", code="PUN")
    db_session.add(region)
    await db_session.commit()
    return region


@pytest_asyncio.fixture
async def other_region(db_session):
    region = RegionFactory.create(name="Nashik", code="NSK")
    db_session.add(region)
    await db_session.commit()
    return region


@pytest_asyncio.fixture
async def customer(db_session, region):
    profile = ProfileFactory.customer(region_id=region.id)
    db_session.add(profile)
    await db_session.commit()
    return profile


@pytest_asyncio.fixture
async def regional_admin(db_session, region):
    profile = ProfileFactory.admin(region_id=region.id)
    db_session.add(profile)
    await db_session.commit()
    return profile


@pytest_asyncio.fixture
async def super_admin(db_session):
    profile = ProfileFactory.super_admin()
    db_session.add(profile)
    await db_session.commit()
    return profile


@pytest_asyncio.fixture
async def courier(db_session, region):
    profile = ProfileFactory.logistics(region_id=region.id, full_name="Ravi Courier")
    db_session.add(profile)
    await db_session.commit()
    return profile
