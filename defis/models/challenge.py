from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime, timezone
from enum import Enum

class Category(str, Enum):
    ROMANTIQUE = "romantique"
    COQUIN = "coquin"
    AVENTURE = "aventure"
    CULINAIRE = "culinaire"
    CREATIF = "creatif"
    SPORT = "sport"
    CULTURE = "culture"
    COMMUNICATION = "communication"
    BIEN_ETRE = "bien-etre"

class Difficulty(str, Enum):
    FACILE = "facile"
    MOYEN = "moyen"
    DIFFICILE = "difficile"

# Reward granted to community proposals, by difficulty
COMMUNITY_POINTS = {
    Difficulty.FACILE: 10,
    Difficulty.MOYEN: 20,
    Difficulty.DIFFICILE: 30,
}

class ChallengeBase(SQLModel):
    title: str = Field(max_length=200)
    description: str = Field(max_length=1000)
    category: Category = Field(index=True)
    difficulty: Difficulty = Field(index=True)
    points_reward: int = Field(gt=0)

class Challenge(ChallengeBase, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    is_approved: bool = Field(default=False, index=True)
    is_community: bool = Field(default=False, index=True)
    created_by: Optional[str] = Field(default=None, foreign_key="profile.id", max_length=36)
    # Up minus down, maintained in the same transaction as the vote rows
    votes_count: int = Field(default=0)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

class ChallengePublic(ChallengeBase):
    id: int
    is_approved: bool
    is_community: bool
    created_by: Optional[str]
    votes_count: int
    created_at: datetime

class ChallengeProposal(SQLModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=1000)
    category: Category
    difficulty: Difficulty
