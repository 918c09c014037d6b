from fastapi import APIRouter, Depends
from sqlmodel import Session
from typing import Optional, List

from ..services.database import get_session
from ..services.auth import get_current_user_id
from ..models.sent_challenge import (
    SentChallengeCreate,
    SentChallengePublic,
    SentChallengeDetail,
    PendingCount
)
from ..models.completed_challenge import CompletionRequest, CompletionResult
from ..services import exchange

router = APIRouter(
    prefix="/sent-challenges",
    tags=["Sent Challenges"]
)

@router.post("", response_model=SentChallengePublic, status_code=201)
def send_challenge(
    request: SentChallengeCreate,
    session: Session = Depends(get_session),
    current_user_id: str = Depends(get_current_user_id)
):
    return exchange.send_challenge(
        session,
        current_user_id,
        challenge_id=request.challenge_id,
        category=request.category,
        difficulty=request.difficulty
    )


@router.get("/received", response_model=List[SentChallengeDetail])
def list_received(
    session: Session = Depends(get_session),
    current_user_id: str = Depends(get_current_user_id)
):
    return exchange.list_received(session, current_user_id)


@router.get("/sent", response_model=List[SentChallengeDetail])
def list_sent(
    session: Session = Depends(get_session),
    current_user_id: str = Depends(get_current_user_id)
):
    return exchange.list_sent(session, current_user_id)


@router.get("/pending-count", response_model=PendingCount)
def read_pending_count(
    session: Session = Depends(get_session),
    current_user_id: str = Depends(get_current_user_id)
):
    return PendingCount(pending=exchange.pending_count(session, current_user_id))


@router.put("/{sent_challenge_id}/accept", response_model=SentChallengePublic)
def accept_challenge(
    sent_challenge_id: int,
    session: Session = Depends(get_session),
    current_user_id: str = Depends(get_current_user_id)
):
    return exchange.accept_challenge(session, current_user_id, sent_challenge_id)


@router.put("/{sent_challenge_id}/refuse", response_model=SentChallengePublic)
def refuse_challenge(
    sent_challenge_id: int,
    session: Session = Depends(get_session),
    current_user_id: str = Depends(get_current_user_id)
):
    return exchange.refuse_challenge(session, current_user_id, sent_challenge_id)


@router.put("/{sent_challenge_id}/complete", response_model=CompletionResult)
def complete_challenge(
    sent_challenge_id: int,
    request: Optional[CompletionRequest] = None,
    session: Session = Depends(get_session),
    current_user_id: str = Depends(get_current_user_id)
):
    request = request or CompletionRequest()
    return exchange.complete_sent_challenge(
        session,
        current_user_id,
        sent_challenge_id,
        rating=request.rating,
        comment=request.comment
    )
