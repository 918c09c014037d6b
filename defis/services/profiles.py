import logging
import secrets
import string
from typing import Optional

from pydantic import BaseModel
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..errors import Conflict, NotFound
from ..models.completed_challenge import CompletedChallenge
from ..models.profile import Profile, ProfilePublic
from ..models.sent_challenge import SentChallenge, SentChallengeStatus

logger = logging.getLogger(__name__)

CODE_LENGTH = 8
CODE_ALPHABET = string.ascii_uppercase + string.digits


class DashboardStats(BaseModel):
    completed_count: int
    active_challenges: int
    partner: Optional[ProfilePublic] = None
    partner_active_challenges: int = 0


def generate_code() -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))


def normalize_code(code: str) -> str:
    return code.strip().upper()


def _unique_code(session: Session, column) -> str:
    code = generate_code()
    # Ensure code is unique
    while session.exec(select(Profile).where(column == code)).first():
        code = generate_code()
    return code


def get_profile(session: Session, user_id: str) -> Profile:
    profile = session.get(Profile, user_id)
    if not profile:
        raise NotFound("Profile not found")
    return profile


def lock_profile(session: Session, user_id: str) -> Profile:
    """Load a profile with a row lock held until the transaction ends."""
    profile = session.exec(
        select(Profile)
        .where(Profile.id == user_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).first()
    if not profile:
        raise NotFound("Profile not found")
    return profile


def get_profile_by_partner_code(session: Session, partner_code: str) -> Profile:
    profile = session.exec(
        select(Profile).where(Profile.partner_code == normalize_code(partner_code))
    ).first()
    if not profile:
        raise NotFound("No profile matches this partner code")
    return profile


def get_profile_by_referral_code(session: Session, referral_code: str) -> Profile:
    profile = session.exec(
        select(Profile).where(Profile.referral_code == normalize_code(referral_code))
    ).first()
    if not profile:
        raise NotFound("No profile matches this referral code")
    return profile


def create_profile(
    session: Session,
    user_id: str,
    username: str,
    email: Optional[str] = None,
    referral_code: Optional[str] = None,
) -> Profile:
    if session.get(Profile, user_id):
        raise Conflict("Profile already exists")

    referred_by = None
    if referral_code:
        referred_by = get_profile_by_referral_code(session, referral_code).id

    profile = Profile(
        id=user_id,
        username=username,
        email=email,
        referral_code=_unique_code(session, Profile.referral_code),
        partner_code=_unique_code(session, Profile.partner_code),
        referred_by=referred_by,
    )
    session.add(profile)
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise Conflict("Profile or code already taken") from exc

    session.refresh(profile)
    logger.info("Created profile %s (%s)", profile.id, profile.username)
    return profile


def leaderboard(session: Session, limit: int = 10) -> list[Profile]:
    return session.exec(
        select(Profile)
        .order_by(Profile.points.desc(), Profile.created_at)
        .limit(limit)
    ).all()


def _active_count(session: Session, receiver_id: str) -> int:
    return session.exec(
        select(func.count(SentChallenge.id)).where(
            (SentChallenge.receiver_id == receiver_id) &
            (SentChallenge.status == SentChallengeStatus.ACCEPTED)
        )
    ).one()


def dashboard_stats(session: Session, user_id: str) -> DashboardStats:
    profile = get_profile(session, user_id)

    completed_count = session.exec(
        select(func.count(CompletedChallenge.id)).where(CompletedChallenge.user_id == user_id)
    ).one()

    stats = DashboardStats(
        completed_count=completed_count,
        active_challenges=_active_count(session, user_id),
    )
    if profile.partner_id:
        partner = session.get(Profile, profile.partner_id)
        if partner:
            stats.partner = ProfilePublic.model_validate(partner)
            stats.partner_active_challenges = _active_count(session, partner.id)
    return stats
