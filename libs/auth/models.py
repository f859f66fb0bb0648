import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class AuthUser(BaseModel):
    """
    Identity carried by a verified Supabase access token.

    Application roles live on the ``profiles`` row, not in the token;
    ``role`` here is Supabase's own claim (normally ``authenticated``).
    """

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="sub")
    email: Optional[EmailStr] = None
    role: str = "authenticated"
    session_id: Optional[str] = None

    @property
    def profile_id(self) -> uuid.UUID:
        return uuid.UUID(self.user_id)
