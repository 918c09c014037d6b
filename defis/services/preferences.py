import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..errors import Conflict
from ..models.challenge import Category, Difficulty
from ..models.preferences import ChallengePreferences, PreferenceMode, PreferencesUpdate
from .profiles import get_profile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GateDecision:
    allowed: bool
    # "off", "category" or "difficulty" when denied
    reason: Optional[str] = None

    def __bool__(self):
        return self.allowed


DENIAL_MESSAGES = {
    "off": "Receiving challenges is turned off in your preferences",
    "category": "This category is not allowed by your preferences",
    "difficulty": "This difficulty is not allowed by your preferences",
}


def _value(item) -> str:
    return item.value if isinstance(item, (Category, Difficulty)) else str(item)


def is_allowed(
    preferences: Optional[ChallengePreferences],
    category: Category,
    difficulty: Difficulty,
) -> GateDecision:
    """Decide whether an incoming (category, difficulty) is acceptable."""
    if preferences is None or preferences.mode == PreferenceMode.RANDOM:
        return GateDecision(True)
    if preferences.mode == PreferenceMode.OFF:
        return GateDecision(False, "off")

    if _value(category) not in (preferences.allowed_categories or []):
        return GateDecision(False, "category")
    if _value(difficulty) not in (preferences.allowed_difficulties or []):
        return GateDecision(False, "difficulty")
    return GateDecision(True)


def find_preferences(session: Session, user_id: str) -> Optional[ChallengePreferences]:
    return session.exec(
        select(ChallengePreferences).where(ChallengePreferences.user_id == user_id)
    ).first()


def _save(session: Session, preferences: ChallengePreferences) -> ChallengePreferences:
    user_id = preferences.user_id
    session.add(preferences)
    try:
        session.commit()
    except IntegrityError as exc:
        # Another request created the row first
        session.rollback()
        logger.warning("Preferences for %s were created concurrently", user_id)
        raise Conflict("Preferences were changed by a concurrent request") from exc
    session.refresh(preferences)
    return preferences


def get_preferences(session: Session, user_id: str) -> ChallengePreferences:
    get_profile(session, user_id)
    preferences = find_preferences(session, user_id)
    if not preferences:
        preferences = _save(session, ChallengePreferences(user_id=user_id))
    return preferences


def update_preferences(session: Session, user_id: str, update: PreferencesUpdate) -> ChallengePreferences:
    get_profile(session, user_id)
    preferences = find_preferences(session, user_id) or ChallengePreferences(user_id=user_id)

    preferences.mode = update.mode
    # Deduplicated, in the order given
    preferences.allowed_categories = list(dict.fromkeys(_value(c) for c in update.allowed_categories))
    preferences.allowed_difficulties = list(dict.fromkeys(_value(d) for d in update.allowed_difficulties))
    preferences.show_challenge_before_accept = update.show_challenge_before_accept
    preferences.updated_at = datetime.now(timezone.utc)

    return _save(session, preferences)
