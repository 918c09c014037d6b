from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime, timezone
from enum import Enum

from .challenge import Category, Difficulty, ChallengePublic
from .profile import ProfilePublic

class SentChallengeStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REFUSED = "refused"
    COMPLETED = "completed"

class SentChallengeBase(SQLModel):
    sender_id: str = Field(foreign_key="profile.id", index=True, max_length=36)
    receiver_id: str = Field(foreign_key="profile.id", index=True, max_length=36)
    category: Category
    difficulty: Difficulty
    # Set at send time for a direct send, at accept time for a deferred one
    challenge_id: Optional[int] = Field(default=None, foreign_key="challenge.id", index=True)
    is_direct: bool = Field(default=False)
    status: SentChallengeStatus = Field(default=SentChallengeStatus.PENDING, index=True)
    sent_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    responded_at: Optional[datetime] = None

class SentChallenge(SentChallengeBase, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

class SentChallengeCreate(SQLModel):
    challenge_id: Optional[int] = None
    category: Optional[Category] = None
    difficulty: Optional[Difficulty] = None

class SentChallengePublic(SQLModel):
    id: int
    sender_id: str
    receiver_id: str
    category: Category
    difficulty: Difficulty
    challenge_id: Optional[int]
    is_direct: bool
    status: SentChallengeStatus
    sent_at: datetime
    responded_at: Optional[datetime]

class SentChallengeDetail(SentChallengePublic):
    challenge: Optional[ChallengePublic] = None
    sender: Optional[ProfilePublic] = None
    receiver: Optional[ProfilePublic] = None

class PendingCount(SQLModel):
    pending: int
