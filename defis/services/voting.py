import logging

from sqlalchemy import case, func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..errors import Conflict, InvalidOperation, NotFound
from ..models.challenge import Challenge
from ..models.challenge_vote import ChallengeVote, VoteResult, VoteType
from .profiles import get_profile

logger = logging.getLogger(__name__)


def tally(session: Session, challenge_id: int) -> int:
    """Up votes minus down votes, computed from the vote rows."""
    total = session.exec(
        select(
            func.coalesce(
                func.sum(case((ChallengeVote.vote_type == VoteType.UP, 1), else_=-1)),
                0
            )
        ).where(ChallengeVote.challenge_id == challenge_id)
    ).one()
    return int(total)


def vote(session: Session, user_id: str, challenge_id: int, direction: VoteType) -> VoteResult:
    """Toggle the caller's vote.

    Voting the same direction twice removes the vote, voting the other way
    flips it, and a first vote inserts it. The challenge row stays locked until
    the tally is rewritten so concurrent voters are serialised.
    """
    get_profile(session, user_id)

    challenge = session.exec(
        select(Challenge)
        .where(Challenge.id == challenge_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).first()
    if not challenge:
        raise NotFound("Challenge not found")
    if not challenge.is_community:
        raise InvalidOperation("Only community challenges can be voted on")

    existing = session.exec(
        select(ChallengeVote).where(
            (ChallengeVote.challenge_id == challenge_id) &
            (ChallengeVote.user_id == user_id)
        )
    ).first()

    current = direction
    if existing and existing.vote_type == direction:
        session.delete(existing)
        current = None
    elif existing:
        existing.vote_type = direction
        session.add(existing)
    else:
        session.add(ChallengeVote(challenge_id=challenge_id, user_id=user_id, vote_type=direction))

    try:
        session.flush()
        challenge.votes_count = tally(session, challenge_id)
        session.add(challenge)
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise Conflict("Vote was changed by a concurrent request") from exc

    logger.info("Profile %s voted %s on challenge %s", user_id, current.value if current else "none", challenge_id)
    return VoteResult(challenge_id=challenge_id, vote_type=current, votes_count=challenge.votes_count)


def user_votes(session: Session, user_id: str, challenge_ids: list[int]) -> dict[int, VoteType]:
    if not challenge_ids:
        return {}
    votes = session.exec(
        select(ChallengeVote).where(
            (ChallengeVote.user_id == user_id) &
            ChallengeVote.challenge_id.in_(challenge_ids)
        )
    ).all()
    return {v.challenge_id: v.vote_type for v in votes}
