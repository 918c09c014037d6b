"""Points and levels.

A profile's level is a pure function of its point total, so every mutation of
``Profile.points`` goes through :func:`award_points`, which rewrites the level
in the same step. Nothing here commits: the caller owns the transaction that
also records the completion and moves the exchange state.
"""
import logging
from typing import Optional

from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..errors import Conflict, InvalidOperation, NotFound
from ..models.challenge import Challenge
from ..models.completed_challenge import CompletedChallenge, CompletionResult
from ..models.profile import Profile
from .profiles import lock_profile
from .rewards import unlock_rewards

logger = logging.getLogger(__name__)

POINTS_PER_LEVEL = 100


class PointsAward(BaseModel):
    points_awarded: int
    points: int
    level: int
    leveled_up: bool


def level_for_points(points: int) -> int:
    if points < 0:
        raise ValueError("points must be non-negative")
    return points // POINTS_PER_LEVEL + 1


def level_progress(points: int) -> tuple[int, int]:
    """Return (points earned inside the current level, points left to the next)."""
    in_level = points % POINTS_PER_LEVEL
    return in_level, POINTS_PER_LEVEL - in_level


def award_points(session: Session, profile: Profile, amount: int) -> PointsAward:
    if amount < 0:
        raise ValueError("amount must be non-negative")

    old_level = profile.level
    profile.points += amount
    profile.level = level_for_points(profile.points)
    session.add(profile)
    unlock_rewards(session, profile)

    if profile.level > old_level:
        logger.info("Profile %s reached level %s", profile.id, profile.level)

    return PointsAward(
        points_awarded=amount,
        points=profile.points,
        level=profile.level,
        leveled_up=profile.level > old_level,
    )


def record_completion(
    session: Session,
    profile: Profile,
    challenge: Challenge,
    rating: Optional[int] = None,
    comment: Optional[str] = None,
) -> Optional[PointsAward]:
    """Insert the completion row and award its points.

    Returns None when the profile had already completed this challenge, in
    which case nothing is written.
    """
    existing = session.exec(
        select(CompletedChallenge).where(
            (CompletedChallenge.user_id == profile.id) &
            (CompletedChallenge.challenge_id == challenge.id)
        )
    ).first()
    if existing:
        return None

    session.add(CompletedChallenge(
        user_id=profile.id,
        challenge_id=challenge.id,
        rating=rating,
        comment=comment,
    ))
    session.flush()
    return award_points(session, profile, challenge.points_reward)


def completion_result(
    profile: Profile,
    challenge: Challenge,
    award: Optional[PointsAward],
    sent_challenge_id: Optional[int] = None,
) -> CompletionResult:
    return CompletionResult(
        challenge_id=challenge.id,
        sent_challenge_id=sent_challenge_id,
        already_completed=award is None,
        points_awarded=award.points_awarded if award else 0,
        points=profile.points,
        level=profile.level,
        leveled_up=award.leveled_up if award else False,
    )


def complete_challenge(
    session: Session,
    user_id: str,
    challenge_id: int,
    rating: Optional[int] = None,
    comment: Optional[str] = None,
) -> CompletionResult:
    """Mark a catalog challenge as done outside of any exchange."""
    challenge = session.get(Challenge, challenge_id)
    if not challenge:
        raise NotFound("Challenge not found")
    if not challenge.is_approved:
        raise InvalidOperation("Only approved challenges can be completed")

    profile = lock_profile(session, user_id)
    try:
        award = record_completion(session, profile, challenge, rating, comment)
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise Conflict("Completion was recorded concurrently") from exc

    session.refresh(profile)
    if award:
        logger.info("Profile %s completed challenge %s (+%s)", user_id, challenge_id, award.points_awarded)
    return completion_result(profile, challenge, award)
