from fastapi import APIRouter, Depends
from sqlmodel import Session
from typing import Optional, List

from ..services.database import get_session
from ..services.auth import get_current_user_id
from ..models.challenge import Category, Difficulty, ChallengePublic, ChallengeProposal
from ..models.challenge_comment import ChallengeCommentCreate, ChallengeCommentPublic
from ..models.challenge_vote import VoteRequest, VoteResult
from ..models.completed_challenge import CompletionRequest, CompletionResult
from ..services import catalog, voting
from ..services.catalog import CommunityChallenge
from ..services.scoring import complete_challenge

router = APIRouter(
    prefix="/challenges",
    tags=["Challenges"]
)

@router.get("", response_model=List[ChallengePublic])
def list_challenges(
    category: Optional[Category] = None,
    difficulty: Optional[Difficulty] = None,
    session: Session = Depends(get_session),
    current_user_id: str = Depends(get_current_user_id)
):
    return catalog.list_challenges(session, category, difficulty)


@router.get("/community", response_model=List[CommunityChallenge])
def list_community_challenges(
    session: Session = Depends(get_session),
    current_user_id: str = Depends(get_current_user_id)
):
    return catalog.list_community(session, current_user_id)


@router.post("/propose", response_model=ChallengePublic, status_code=201)
def propose_challenge(
    proposal: ChallengeProposal,
    session: Session = Depends(get_session),
    current_user_id: str = Depends(get_current_user_id)
):
    return catalog.propose_challenge(
        session,
        current_user_id,
        title=proposal.title,
        description=proposal.description,
        category=proposal.category,
        difficulty=proposal.difficulty
    )


@router.get("/{challenge_id}", response_model=ChallengePublic)
def read_challenge(
    challenge_id: int,
    session: Session = Depends(get_session),
    current_user_id: str = Depends(get_current_user_id)
):
    return catalog.get_challenge(session, challenge_id)


@router.put("/{challenge_id}/approve", response_model=ChallengePublic)
def approve_challenge(
    challenge_id: int,
    session: Session = Depends(get_session),
    current_user_id: str = Depends(get_current_user_id)
):
    return catalog.approve_challenge(session, current_user_id, challenge_id)


@router.post("/{challenge_id}/complete", response_model=CompletionResult)
def complete_catalog_challenge(
    challenge_id: int,
    request: Optional[CompletionRequest] = None,
    session: Session = Depends(get_session),
    current_user_id: str = Depends(get_current_user_id)
):
    request = request or CompletionRequest()
    return complete_challenge(
        session,
        current_user_id,
        challenge_id,
        rating=request.rating,
        comment=request.comment
    )


@router.post("/{challenge_id}/vote", response_model=VoteResult)
def vote_on_challenge(
    challenge_id: int,
    request: VoteRequest,
    session: Session = Depends(get_session),
    current_user_id: str = Depends(get_current_user_id)
):
    return voting.vote(session, current_user_id, challenge_id, request.vote_type)


@router.get("/{challenge_id}/comments", response_model=List[ChallengeCommentPublic])
def list_comments(
    challenge_id: int,
    session: Session = Depends(get_session),
    current_user_id: str = Depends(get_current_user_id)
):
    return catalog.list_comments(session, challenge_id)


@router.post("/{challenge_id}/comments", response_model=ChallengeCommentPublic, status_code=201)
def add_comment(
    challenge_id: int,
    request: ChallengeCommentCreate,
    session: Session = Depends(get_session),
    current_user_id: str = Depends(get_current_user_id)
):
    return catalog.add_comment(session, current_user_id, challenge_id, request.content)
