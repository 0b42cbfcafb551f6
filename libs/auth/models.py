from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class AuthUser(BaseModel):
    """
    Claims of a validated Supabase access token.
    """

    user_id: str = Field(..., alias="sub")
    email: Optional[EmailStr] = None
    role: str = "authenticated"

    model_config = {"populate_by_name": True}


@dataclass(frozen=True)
class OwnerContext:
    """The signed-in coach on whose behalf a request runs.

    Resolved once per request and passed explicitly into every service
    call that reads or writes owner-scoped records.
    """

    user_id: str
    email: Optional[str] = None
    name: Optional[str] = None
    country: Optional[str] = None
    currency: str = "USD"
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        return self.role in ("admin", "super_admin")
