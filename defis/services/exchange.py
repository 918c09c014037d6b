"""Challenge exchange between paired partners.

A SentChallenge moves ``pending -> accepted -> completed`` or
``pending -> refused``; completed and refused are terminal. A send is either
direct (a concrete challenge attached up front) or deferred (only a category
and difficulty, with the concrete challenge drawn at random when the receiver
accepts). Completion records the CompletedChallenge row, moves the status and
awards the points in one transaction.
"""
import logging
import random
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from .. import config
from ..errors import Conflict, InvalidOperation, NotAvailable, NotFound, PolicyDenied
from ..models.challenge import Category, Challenge, ChallengePublic, Difficulty
from ..models.completed_challenge import CompletionResult
from ..models.profile import Profile, ProfilePublic
from ..models.sent_challenge import (
    SentChallenge,
    SentChallengeDetail,
    SentChallengeStatus,
)
from .preferences import DENIAL_MESSAGES, find_preferences, is_allowed
from .profiles import get_profile, lock_profile
from .scoring import completion_result, record_completion

logger = logging.getLogger(__name__)


def send_challenge(
    session: Session,
    sender_id: str,
    challenge_id: Optional[int] = None,
    category: Optional[Category] = None,
    difficulty: Optional[Difficulty] = None,
) -> SentChallenge:
    sender = get_profile(session, sender_id)
    if not sender.partner_id:
        raise InvalidOperation("You need a partner before sending a challenge")

    if challenge_id is not None:
        challenge = session.get(Challenge, challenge_id)
        if not challenge:
            raise NotFound("Challenge not found")
        if not challenge.is_approved:
            raise InvalidOperation("Only approved challenges can be sent")
        sent = SentChallenge(
            sender_id=sender.id,
            receiver_id=sender.partner_id,
            category=challenge.category,
            difficulty=challenge.difficulty,
            challenge_id=challenge.id,
            is_direct=True,
        )
    elif category is not None and difficulty is not None:
        sent = SentChallenge(
            sender_id=sender.id,
            receiver_id=sender.partner_id,
            category=category,
            difficulty=difficulty,
        )
    else:
        raise InvalidOperation("Provide a challenge or both a category and a difficulty")

    session.add(sent)
    session.commit()
    session.refresh(sent)
    logger.info("Profile %s sent challenge %s to %s", sender.id, sent.id, sent.receiver_id)
    return sent


def _lock_received(session: Session, receiver_id: str, sent_challenge_id: int) -> SentChallenge:
    sent = session.exec(
        select(SentChallenge)
        .where(SentChallenge.id == sent_challenge_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).first()
    # Only the receiver may act; to anyone else the record does not exist
    if not sent or sent.receiver_id != receiver_id:
        raise NotFound("Sent challenge not found")
    return sent


def _draw_challenge(session: Session, category: Category, difficulty: Difficulty, rng) -> Optional[Challenge]:
    candidates = session.exec(
        select(Challenge).where(
            (Challenge.category == category) &
            (Challenge.difficulty == difficulty) &
            (Challenge.is_approved == True)  # noqa: E712
        ).order_by(Challenge.id)
    ).all()
    if not candidates:
        return None
    return rng.choice(candidates)


def accept_challenge(session: Session, user_id: str, sent_challenge_id: int, rng=random) -> SentChallenge:
    sent = _lock_received(session, user_id, sent_challenge_id)
    if sent.status != SentChallengeStatus.PENDING:
        raise InvalidOperation(f"Cannot accept a challenge that is {sent.status.value}")

    if sent.challenge_id is None:
        decision = is_allowed(find_preferences(session, user_id), sent.category, sent.difficulty)
        if not decision:
            logger.warning("Profile %s preferences denied sent challenge %s (%s)", user_id, sent.id, decision.reason)
            raise PolicyDenied(DENIAL_MESSAGES[decision.reason])

        challenge = _draw_challenge(session, sent.category, sent.difficulty, rng)
        if challenge is None:
            raise NotAvailable("No challenge available for this category and difficulty")
        sent.challenge_id = challenge.id

    sent.status = SentChallengeStatus.ACCEPTED
    sent.responded_at = datetime.now(timezone.utc)
    session.add(sent)
    session.commit()
    session.refresh(sent)
    logger.info("Profile %s accepted sent challenge %s (challenge %s)", user_id, sent.id, sent.challenge_id)
    return sent


def refuse_challenge(session: Session, user_id: str, sent_challenge_id: int) -> SentChallenge:
    sent = _lock_received(session, user_id, sent_challenge_id)
    if sent.status != SentChallengeStatus.PENDING:
        raise InvalidOperation(f"Cannot refuse a challenge that is {sent.status.value}")

    sent.status = SentChallengeStatus.REFUSED
    sent.responded_at = datetime.now(timezone.utc)
    session.add(sent)
    session.commit()
    session.refresh(sent)
    logger.info("Profile %s refused sent challenge %s", user_id, sent.id)
    return sent


def _can_complete(sent: SentChallenge) -> bool:
    if sent.status == SentChallengeStatus.ACCEPTED:
        return True
    return (
        sent.status == SentChallengeStatus.PENDING and
        sent.is_direct and
        config.ALLOW_DIRECT_COMPLETE_FROM_PENDING
    )


def complete_sent_challenge(
    session: Session,
    user_id: str,
    sent_challenge_id: int,
    rating: Optional[int] = None,
    comment: Optional[str] = None,
) -> CompletionResult:
    sent = _lock_received(session, user_id, sent_challenge_id)

    if sent.status == SentChallengeStatus.COMPLETED:
        # A previous call already did the work; report it without a second award
        challenge = session.get(Challenge, sent.challenge_id)
        result = completion_result(get_profile(session, user_id), challenge, None, sent_challenge_id=sent_challenge_id)
        session.rollback()
        return result

    if not _can_complete(sent):
        raise InvalidOperation(f"Cannot complete a challenge that is {sent.status.value}")

    challenge = session.get(Challenge, sent.challenge_id)
    if not challenge:
        raise NotFound("Challenge not found")
    if not challenge.is_approved:
        raise InvalidOperation("Only approved challenges can be completed")

    profile = lock_profile(session, user_id)
    try:
        award = record_completion(session, profile, challenge, rating, comment)
        sent.status = SentChallengeStatus.COMPLETED
        if sent.responded_at is None:
            sent.responded_at = datetime.now(timezone.utc)
        session.add(sent)
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise Conflict("Completion was recorded concurrently") from exc

    session.refresh(profile)
    logger.info(
        "Profile %s completed sent challenge %s (+%s)",
        user_id, sent_challenge_id, award.points_awarded if award else 0
    )
    return completion_result(profile, challenge, award, sent_challenge_id=sent_challenge_id)


def _detail(sent: SentChallenge, challenge, sender, receiver, hide_challenge: bool = False) -> SentChallengeDetail:
    detail = SentChallengeDetail.model_validate(sent)
    if hide_challenge:
        # The id alone would let the receiver look the challenge up
        detail.challenge_id = None
    elif challenge:
        detail.challenge = ChallengePublic.model_validate(challenge)
    if sender:
        detail.sender = ProfilePublic.model_validate(sender)
    if receiver:
        detail.receiver = ProfilePublic.model_validate(receiver)
    return detail


def _with_challenge(statement):
    return statement.outerjoin(Challenge, Challenge.id == SentChallenge.challenge_id)


def list_received(session: Session, user_id: str) -> list[SentChallengeDetail]:
    preferences = find_preferences(session, user_id)
    reveal = preferences.show_challenge_before_accept if preferences else True

    statement = _with_challenge(
        select(SentChallenge, Challenge, Profile)
        .join(Profile, Profile.id == SentChallenge.sender_id)
    ).where(SentChallenge.receiver_id == user_id).order_by(SentChallenge.sent_at.desc())

    return [
        _detail(
            sent, challenge, sender, None,
            hide_challenge=not reveal and sent.status == SentChallengeStatus.PENDING
        )
        for sent, challenge, sender in session.exec(statement).all()
    ]


def list_sent(session: Session, user_id: str) -> list[SentChallengeDetail]:
    statement = _with_challenge(
        select(SentChallenge, Challenge, Profile)
        .join(Profile, Profile.id == SentChallenge.receiver_id)
    ).where(SentChallenge.sender_id == user_id).order_by(SentChallenge.sent_at.desc())

    return [
        _detail(sent, challenge, None, receiver)
        for sent, challenge, receiver in session.exec(statement).all()
    ]


def pending_count(session: Session, user_id: str) -> int:
    return session.exec(
        select(func.count(SentChallenge.id)).where(
            (SentChallenge.receiver_id == user_id) &
            (SentChallenge.status == SentChallengeStatus.PENDING)
        )
    ).one()
