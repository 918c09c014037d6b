from fastapi import APIRouter, Depends
from sqlmodel import Session
from typing import List

from ..services.database import get_session
from ..services.auth import get_current_user_id
from ..models.reward import RewardPublic
from ..services.profiles import get_profile
from ..services.rewards import list_rewards

router = APIRouter(
    prefix="/rewards",
    tags=["Rewards"]
)

@router.get("", response_model=List[RewardPublic])
def read_rewards(
    session: Session = Depends(get_session),
    current_user_id: str = Depends(get_current_user_id)
):
    return list_rewards(session, get_profile(session, current_user_id))
