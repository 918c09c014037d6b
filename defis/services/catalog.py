import logging
from typing import Optional

from sqlmodel import Session, select

from ..errors import InvalidOperation, NotFound, PolicyDenied
from ..models.challenge import COMMUNITY_POINTS, Category, Challenge, ChallengePublic, Difficulty
from ..models.challenge_comment import ChallengeComment, ChallengeCommentPublic
from ..models.challenge_vote import VoteType
from ..models.profile import Profile, ProfilePublic
from .profiles import get_profile
from .voting import user_votes

logger = logging.getLogger(__name__)


class CommunityChallenge(ChallengePublic):
    user_vote: Optional[VoteType] = None


def get_challenge(session: Session, challenge_id: int) -> Challenge:
    challenge = session.get(Challenge, challenge_id)
    if not challenge:
        raise NotFound("Challenge not found")
    return challenge


def list_challenges(
    session: Session,
    category: Optional[Category] = None,
    difficulty: Optional[Difficulty] = None,
    approved_only: bool = True,
) -> list[Challenge]:
    statement = select(Challenge)
    if category:
        statement = statement.where(Challenge.category == category)
    if difficulty:
        statement = statement.where(Challenge.difficulty == difficulty)
    if approved_only:
        statement = statement.where(Challenge.is_approved == True)  # noqa: E712
    return session.exec(statement.order_by(Challenge.created_at.desc(), Challenge.id.desc())).all()


def list_community(session: Session, user_id: str) -> list[CommunityChallenge]:
    challenges = session.exec(
        select(Challenge)
        .where(Challenge.is_community == True)  # noqa: E712
        .order_by(Challenge.votes_count.desc(), Challenge.created_at.desc())
    ).all()
    votes = user_votes(session, user_id, [c.id for c in challenges])

    return [
        CommunityChallenge(**challenge.model_dump(), user_vote=votes.get(challenge.id))
        for challenge in challenges
    ]


def propose_challenge(
    session: Session,
    user_id: str,
    title: str,
    description: str,
    category: Category,
    difficulty: Difficulty,
) -> Challenge:
    get_profile(session, user_id)

    challenge = Challenge(
        title=title,
        description=description,
        category=category,
        difficulty=difficulty,
        points_reward=COMMUNITY_POINTS[difficulty],
        is_community=True,
        is_approved=False,
        created_by=user_id,
        votes_count=0,
    )
    session.add(challenge)
    session.commit()
    session.refresh(challenge)
    logger.info("Profile %s proposed challenge %s", user_id, challenge.id)
    return challenge


def approve_challenge(session: Session, curator_id: str, challenge_id: int) -> Challenge:
    curator = get_profile(session, curator_id)
    if not curator.is_curator:
        raise PolicyDenied("Only curators can approve challenges")

    challenge = get_challenge(session, challenge_id)
    if challenge.is_approved:
        return challenge

    challenge.is_approved = True
    session.add(challenge)
    session.commit()
    session.refresh(challenge)
    logger.info("Curator %s approved challenge %s", curator_id, challenge_id)
    return challenge


def add_comment(session: Session, user_id: str, challenge_id: int, content: str) -> ChallengeCommentPublic:
    author = get_profile(session, user_id)
    get_challenge(session, challenge_id)
    content = content.strip()
    if not content:
        raise InvalidOperation("Comment cannot be empty")

    comment = ChallengeComment(challenge_id=challenge_id, user_id=user_id, content=content)
    session.add(comment)
    session.commit()
    session.refresh(comment)
    return ChallengeCommentPublic(
        **comment.model_dump(exclude={"user_id"}),
        author=ProfilePublic.model_validate(author),
    )


def list_comments(session: Session, challenge_id: int) -> list[ChallengeCommentPublic]:
    get_challenge(session, challenge_id)

    results = session.exec(
        select(ChallengeComment, Profile)
        .join(Profile, Profile.id == ChallengeComment.user_id)
        .where(ChallengeComment.challenge_id == challenge_id)
        .order_by(ChallengeComment.created_at.desc(), ChallengeComment.id.desc())
    ).all()

    return [
        ChallengeCommentPublic(
            **comment.model_dump(exclude={"user_id"}),
            author=ProfilePublic.model_validate(author),
        )
        for comment, author in results
    ]
