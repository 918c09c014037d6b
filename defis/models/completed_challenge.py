from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint
from typing import Optional
from datetime import datetime, timezone

class CompletedChallengeBase(SQLModel):
    user_id: str = Field(foreign_key="profile.id", index=True, max_length=36)
    challenge_id: int = Field(foreign_key="challenge.id", index=True)
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    comment: Optional[str] = Field(default=None, max_length=500)
    completed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

class CompletedChallenge(CompletedChallengeBase, table=True):
    __table_args__ = (
        UniqueConstraint("user_id", "challenge_id"),  # At most one completion per user per challenge
    )

    id: Optional[int] = Field(default=None, primary_key=True)

class CompletionRequest(SQLModel):
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    comment: Optional[str] = Field(default=None, max_length=500)

class CompletionResult(SQLModel):
    challenge_id: int
    sent_challenge_id: Optional[int] = None
    already_completed: bool
    points_awarded: int
    points: int
    level: int
    leveled_up: bool = False
