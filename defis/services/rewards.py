import logging

from sqlmodel import Session, select

from ..models.profile import Profile
from ..models.reward import Reward, RewardPublic, UserReward

logger = logging.getLogger(__name__)


def list_rewards(session: Session, profile: Profile) -> list[RewardPublic]:
    rewards = session.exec(select(Reward).order_by(Reward.points_required)).all()
    unlocked_at = {
        user_reward.reward_id: user_reward.unlocked_at
        for user_reward in session.exec(
            select(UserReward).where(UserReward.user_id == profile.id)
        ).all()
    }

    return [
        RewardPublic(
            **reward.model_dump(exclude={"created_at"}),
            unlocked=profile.points >= reward.points_required,
            unlocked_at=unlocked_at.get(reward.id),
        )
        for reward in rewards
    ]


def unlock_rewards(session: Session, profile: Profile) -> list[Reward]:
    """Record every reward the profile now qualifies for but has not unlocked yet."""
    already = select(UserReward.reward_id).where(UserReward.user_id == profile.id)
    earned = session.exec(
        select(Reward).where(
            (Reward.points_required <= profile.points) &
            ~Reward.id.in_(already)
        )
    ).all()

    for reward in earned:
        session.add(UserReward(user_id=profile.id, reward_id=reward.id))
        logger.info("Profile %s unlocked reward %s", profile.id, reward.name)
    return earned
