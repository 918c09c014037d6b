from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime, timezone

from .profile import ProfilePublic

class ChallengeCommentBase(SQLModel):
    challenge_id: int = Field(foreign_key="challenge.id", index=True)
    user_id: str = Field(foreign_key="profile.id", index=True, max_length=36)
    content: str = Field(max_length=1000)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

class ChallengeComment(ChallengeCommentBase, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

class ChallengeCommentCreate(SQLModel):
    content: str = Field(min_length=1, max_length=1000)

class ChallengeCommentPublic(SQLModel):
    id: int
    challenge_id: int
    content: str
    created_at: datetime
    author: ProfilePublic
