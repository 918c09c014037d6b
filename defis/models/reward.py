from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint
from typing import Optional
from datetime import datetime, timezone

class RewardBase(SQLModel):
    name: str = Field(max_length=100)
    description: str = Field(max_length=500)
    type: str = Field(default="badge", max_length=30)
    icon: str = Field(max_length=10)
    points_required: int = Field(default=0, ge=0, index=True)

class Reward(RewardBase, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

class UserReward(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("user_id", "reward_id"),  # Unlocked once per user
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(foreign_key="profile.id", index=True, max_length=36)
    reward_id: int = Field(foreign_key="reward.id", index=True)
    unlocked_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

class RewardPublic(RewardBase):
    id: int
    unlocked: bool
    unlocked_at: Optional[datetime] = None
