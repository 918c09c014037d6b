from fastapi import APIRouter, Depends
from sqlmodel import Session

from ..services.database import get_session
from ..services.auth import get_current_user_id
from ..models.preferences import PreferencesUpdate, PreferencesPublic
from ..services import preferences

router = APIRouter(
    prefix="/preferences",
    tags=["Preferences"]
)

@router.get("", response_model=PreferencesPublic)
def read_preferences(
    session: Session = Depends(get_session),
    current_user_id: str = Depends(get_current_user_id)
):
    return preferences.get_preferences(session, current_user_id)


@router.put("", response_model=PreferencesPublic)
def update_preferences(
    request: PreferencesUpdate,
    session: Session = Depends(get_session),
    current_user_id: str = Depends(get_current_user_id)
):
    return preferences.update_preferences(session, current_user_id, request)
