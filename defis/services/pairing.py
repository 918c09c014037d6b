"""Partner pairing.

Pairing is symmetric: after a successful association both profiles point at
each other, and after a dissociation neither does. Both rows are locked and
written in a single transaction so no caller can observe one side updated
without the other. The unique constraint on ``Profile.partner_id`` resolves
concurrent attempts on the same target to a single winner.
"""
import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..errors import Conflict, InvalidOperation, NotFound
from ..models.profile import Profile
from .profiles import get_profile_by_partner_code, lock_profile

logger = logging.getLogger(__name__)


def _lock_pair(session: Session, first_id: str, second_id: str) -> dict[str, Profile]:
    # Always lock in id order so two opposite requests cannot deadlock
    profiles = session.exec(
        select(Profile)
        .where(Profile.id.in_([first_id, second_id]))
        .order_by(Profile.id)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).all()
    return {profile.id: profile for profile in profiles}


def associate_partner(session: Session, requesting_user_id: str, partner_code_input: str) -> Profile:
    """Pair the requester with the owner of ``partner_code_input`` and return the partner."""
    target = get_profile_by_partner_code(session, partner_code_input)
    if target.id == requesting_user_id:
        raise InvalidOperation("You cannot pair with yourself")

    locked = _lock_pair(session, requesting_user_id, target.id)
    requester = locked.get(requesting_user_id)
    partner = locked.get(target.id)
    if requester is None:
        raise NotFound("Profile not found")
    if partner is None:
        raise NotFound("No profile matches this partner code")

    if requester.partner_id == partner.id and partner.partner_id == requester.id:
        # Already paired together, nothing to do
        session.rollback()
        return partner
    if requester.partner_id is not None:
        raise Conflict("You are already paired with a partner")
    if partner.partner_id is not None:
        raise Conflict("This profile is already paired with someone else")

    requester.partner_id = partner.id
    partner.partner_id = requester.id
    session.add(requester)
    session.add(partner)
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise Conflict("Pairing was taken by a concurrent request") from exc

    session.refresh(partner)
    logger.info("Paired profiles %s and %s", requester.id, partner.id)
    return partner


def disassociate_partner(session: Session, user_id: str) -> None:
    """Clear the pairing on both sides. Unpairing an unpaired profile is a no-op."""
    user = lock_profile(session, user_id)
    partner_id = user.partner_id
    if partner_id is None:
        session.rollback()
        return

    locked = _lock_pair(session, user_id, partner_id)
    user = locked[user_id]
    partner = locked.get(partner_id)

    user.partner_id = None
    session.add(user)
    # Only clear the partner's side if it still points back at us
    if partner is not None and partner.partner_id == user_id:
        partner.partner_id = None
        session.add(partner)

    session.commit()
    logger.info("Unpaired profiles %s and %s", user_id, partner_id)
