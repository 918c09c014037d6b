from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime, timezone

class ProfileBase(SQLModel):
    username: str = Field(index=True, max_length=30)
    email: Optional[str] = Field(default=None, index=True, max_length=100)
    avatar_url: Optional[str] = Field(default=None, max_length=255)
    points: int = Field(default=0, ge=0)
    level: int = Field(default=1, ge=1)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

class Profile(ProfileBase, table=True):
    # Identity id issued by the external identity provider
    id: str = Field(primary_key=True, max_length=36)
    referral_code: str = Field(index=True, unique=True, max_length=8)
    referred_by: Optional[str] = Field(default=None, foreign_key="profile.id", max_length=36)
    partner_code: str = Field(index=True, unique=True, max_length=8)
    # Unique so at most one profile can point at a given partner
    partner_id: Optional[str] = Field(default=None, foreign_key="profile.id", unique=True, max_length=36)
    is_curator: bool = Field(default=False)

class ProfileCreate(SQLModel):
    username: str = Field(min_length=1, max_length=30)
    email: Optional[str] = Field(default=None, max_length=100)
    referral_code: Optional[str] = None

class ProfilePublic(SQLModel):
    id: str
    username: str
    avatar_url: Optional[str]
    points: int
    level: int

class ProfileMe(ProfilePublic):
    email: Optional[str]
    referral_code: str
    partner_code: str
    partner_id: Optional[str]
    is_curator: bool
    points_in_level: int
    points_to_next_level: int

class PartnerCodeInput(SQLModel):
    partner_code: str = Field(min_length=1, max_length=32)
