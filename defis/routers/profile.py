from fastapi import APIRouter, Depends, Query
from sqlmodel import Session
from typing import List

from ..services.database import get_session
from ..services.auth import get_current_user_id
from ..models.profile import Profile, ProfileCreate, ProfileMe, ProfilePublic, PartnerCodeInput
from ..services import pairing, profiles
from ..services.profiles import DashboardStats
from ..services.scoring import level_progress

router = APIRouter(
    prefix="/profile",
    tags=["Profile"]
)

def to_me(profile: Profile) -> ProfileMe:
    points_in_level, points_to_next_level = level_progress(profile.points)
    return ProfileMe(
        **profile.model_dump(),
        points_in_level=points_in_level,
        points_to_next_level=points_to_next_level
    )

@router.post("", response_model=ProfileMe, status_code=201)
def create_profile(
    request: ProfileCreate,
    session: Session = Depends(get_session),
    current_user_id: str = Depends(get_current_user_id)
):
    profile = profiles.create_profile(
        session,
        current_user_id,
        username=request.username,
        email=request.email,
        referral_code=request.referral_code
    )
    return to_me(profile)


@router.get("/me", response_model=ProfileMe)
def read_current_profile(
    session: Session = Depends(get_session),
    current_user_id: str = Depends(get_current_user_id)
):
    return to_me(profiles.get_profile(session, current_user_id))


@router.get("/me/stats", response_model=DashboardStats)
def read_dashboard_stats(
    session: Session = Depends(get_session),
    current_user_id: str = Depends(get_current_user_id)
):
    return profiles.dashboard_stats(session, current_user_id)


@router.get("/leaderboard", response_model=List[ProfilePublic])
def read_leaderboard(
    limit: int = Query(default=10, ge=1, le=100),
    session: Session = Depends(get_session),
    current_user_id: str = Depends(get_current_user_id)
):
    return profiles.leaderboard(session, limit)


@router.post("/partner", response_model=ProfilePublic)
def associate_partner(
    request: PartnerCodeInput,
    session: Session = Depends(get_session),
    current_user_id: str = Depends(get_current_user_id)
):
    return pairing.associate_partner(session, current_user_id, request.partner_code)


@router.delete("/partner", status_code=204)
def disassociate_partner(
    session: Session = Depends(get_session),
    current_user_id: str = Depends(get_current_user_id)
):
    pairing.disassociate_partner(session, current_user_id)
