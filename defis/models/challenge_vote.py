from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint
from typing import Optional
from datetime import datetime, timezone
from enum import Enum

class VoteType(str, Enum):
    UP = "up"
    DOWN = "down"

class ChallengeVoteBase(SQLModel):
    challenge_id: int = Field(foreign_key="challenge.id", index=True)
    user_id: str = Field(foreign_key="profile.id", index=True, max_length=36)
    vote_type: VoteType
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

class ChallengeVote(ChallengeVoteBase, table=True):
    __table_args__ = (
        UniqueConstraint("challenge_id", "user_id"),  # One vote per user per challenge
    )

    id: Optional[int] = Field(default=None, primary_key=True)

class VoteRequest(SQLModel):
    vote_type: VoteType

class VoteResult(SQLModel):
    challenge_id: int
    vote_type: Optional[VoteType]
    votes_count: int
