from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from typing import Optional, List
from datetime import datetime, timezone
from enum import Enum

from .challenge import Category, Difficulty

class PreferenceMode(str, Enum):
    RANDOM = "random"
    CATEGORIES = "categories"
    OFF = "off"

class ChallengePreferences(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(foreign_key="profile.id", unique=True, index=True, max_length=36)
    mode: PreferenceMode = Field(default=PreferenceMode.RANDOM)
    # Stored as enum values ("romantique", "facile", ...)
    allowed_categories: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    allowed_difficulties: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    show_challenge_before_accept: bool = Field(default=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

class PreferencesUpdate(SQLModel):
    mode: PreferenceMode
    allowed_categories: List[Category] = []
    allowed_difficulties: List[Difficulty] = []
    show_challenge_before_accept: bool = True

class PreferencesPublic(SQLModel):
    mode: PreferenceMode
    allowed_categories: List[str]
    allowed_difficulties: List[str]
    show_challenge_before_accept: bool
    updated_at: datetime
